from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from backend.app.api.deps import get_org_store
from backend.app.services.organizations import OrganizationNotFoundError, OrganizationStore

router = APIRouter()


class OrganizationIn(BaseModel):
    name: Optional[str] = None
    account: Optional[str] = None
    website: Optional[str] = None
    fuel_reimbursement_policy: Optional[float] = None
    speed_limit_policy: Optional[float] = None


class OrganizationPatch(BaseModel):
    account: Optional[str] = None
    website: Optional[str] = None
    fuel_reimbursement_policy: Optional[float] = None
    speed_limit_policy: Optional[float] = None


@router.post("", status_code=201)
async def create_org(body: OrganizationIn, store: OrganizationStore = Depends(get_org_store)):
    if not body.name or not body.account or not body.website:
        raise HTTPException(status_code=400, detail="Name, account, and website are required fields.")
    org = store.create(
        body.name,
        body.account,
        body.website,
        fuel_reimbursement_policy=body.fuel_reimbursement_policy,
        speed_limit_policy=body.speed_limit_policy,
    )
    return org.as_dict()


@router.patch("/{name}")
async def update_org(name: str, body: OrganizationPatch, store: OrganizationStore = Depends(get_org_store)):
    try:
        org = store.update(name, **body.model_dump())
    except OrganizationNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Organization not found") from exc
    return {"message": "Organization updated", "org": org.as_dict()}


@router.get("")
async def list_orgs(page: str = "1", limit: str = "10", store: OrganizationStore = Depends(get_org_store)):
    try:
        return store.page(int(page), int(limit))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid pagination parameters") from exc
