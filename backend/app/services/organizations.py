from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Optional

DEFAULT_FUEL_REIMBURSEMENT_POLICY = 1000


class OrganizationNotFoundError(Exception):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Organization {name} not found")


@dataclass
class Organization:
    name: str
    account: str
    website: str
    fuel_reimbursement_policy: float = DEFAULT_FUEL_REIMBURSEMENT_POLICY
    speed_limit_policy: Optional[float] = None
    parent_org_id: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_ORGANIZATIONS = (
    Organization(name="Org1", account="acc1", website="www.org1.com", fuel_reimbursement_policy=1000, speed_limit_policy=25),
    Organization(
        name="Org2",
        account="acc2",
        website="www.org2.com",
        fuel_reimbursement_policy=1500,
        speed_limit_policy=30,
        parent_org_id="Org1",
    ),
)


class OrganizationStore:
    """Plain in-memory organization directory keyed by name."""

    def __init__(self, seed: Iterable[Organization] = ()):
        self._orgs: Dict[str, Organization] = {}
        for org in seed:
            self._orgs[org.name] = Organization(**org.as_dict())

    def get(self, name: str) -> Optional[Organization]:
        return self._orgs.get(name)

    def create(
        self,
        name: str,
        account: str,
        website: str,
        fuel_reimbursement_policy: Optional[float] = None,
        speed_limit_policy: Optional[float] = None,
    ) -> Organization:
        # an existing name is replaced
        org = Organization(
            name=name,
            account=account,
            website=website,
            fuel_reimbursement_policy=fuel_reimbursement_policy or DEFAULT_FUEL_REIMBURSEMENT_POLICY,
            speed_limit_policy=speed_limit_policy,
        )
        self._orgs[name] = org
        return org

    def update(
        self,
        name: str,
        *,
        account: Optional[str] = None,
        website: Optional[str] = None,
        fuel_reimbursement_policy: Optional[float] = None,
        speed_limit_policy: Optional[float] = None,
    ) -> Organization:
        org = self._orgs.get(name)
        if org is None:
            raise OrganizationNotFoundError(name)
        if account:
            org.account = account
        if website:
            org.website = website
        if fuel_reimbursement_policy is not None:
            org.fuel_reimbursement_policy = fuel_reimbursement_policy
        if speed_limit_policy is not None:
            org.speed_limit_policy = speed_limit_policy
        return org

    def page(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        if page < 1 or limit < 1:
            raise ValueError("Invalid pagination parameters")
        orgs = list(self._orgs.values())
        start = (page - 1) * limit
        rows = []
        for org in orgs[start : start + limit]:
            parent = self._orgs.get(org.parent_org_id) if org.parent_org_id else None
            rows.append({**org.as_dict(), "parent_org": parent.name if parent else None})
        return {
            "total_orgs": len(orgs),
            "page": page,
            "total_pages": math.ceil(len(orgs) / limit),
            "data": rows,
        }

    def __len__(self) -> int:
        return len(self._orgs)
