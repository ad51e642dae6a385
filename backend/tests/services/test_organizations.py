import pytest

from backend.app.services.organizations import (
    DEFAULT_ORGANIZATIONS,
    OrganizationNotFoundError,
    OrganizationStore,
)


def test_create_defaults_fuel_policy():
    store = OrganizationStore()
    org = store.create("Org3", "acc3", "www.org3.com")
    assert org.fuel_reimbursement_policy == 1000
    assert org.speed_limit_policy is None
    assert store.get("Org3") is org


def test_update_only_touches_provided_fields():
    store = OrganizationStore(DEFAULT_ORGANIZATIONS)
    org = store.update("Org1", website="www.org1.example", speed_limit_policy=40)

    assert org.account == "acc1"
    assert org.website == "www.org1.example"
    assert org.speed_limit_policy == 40
    assert org.fuel_reimbursement_policy == 1000


def test_update_unknown_org_raises():
    store = OrganizationStore()
    with pytest.raises(OrganizationNotFoundError):
        store.update("Missing", account="acc")


def test_seed_is_copied():
    OrganizationStore(DEFAULT_ORGANIZATIONS).update("Org1", account="changed")
    assert DEFAULT_ORGANIZATIONS[0].account == "acc1"


def test_page_resolves_parent_names():
    store = OrganizationStore(DEFAULT_ORGANIZATIONS)
    store.create("Org3", "acc3", "www.org3.com")

    first = store.page(1, 2)
    assert first["total_orgs"] == 3
    assert first["total_pages"] == 2
    assert [row["name"] for row in first["data"]] == ["Org1", "Org2"]
    assert first["data"][0]["parent_org"] is None
    assert first["data"][1]["parent_org"] == "Org1"

    second = store.page(2, 2)
    assert [row["name"] for row in second["data"]] == ["Org3"]


@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (-1, -1)])
def test_page_rejects_invalid_parameters(page, limit):
    with pytest.raises(ValueError):
        OrganizationStore().page(page, limit)
