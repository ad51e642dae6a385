import pytest
from fastapi.testclient import TestClient

from backend.app.api.deps import get_org_store
from backend.app.api.main import app
from backend.app.services.organizations import DEFAULT_ORGANIZATIONS, OrganizationStore


@pytest.fixture
def client():
    store = OrganizationStore(DEFAULT_ORGANIZATIONS)
    app.dependency_overrides[get_org_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_create_org_applies_default_fuel_policy(client):
    response = client.post("/orgs", json={"name": "Org3", "account": "acc3", "website": "www.org3.com"})
    assert response.status_code == 201
    body = response.json()
    assert body["fuel_reimbursement_policy"] == 1000
    assert body["speed_limit_policy"] is None


def test_create_org_requires_identity_fields(client):
    response = client.post("/orgs", json={"name": "Org3"})
    assert response.status_code == 400


def test_update_org(client):
    response = client.patch("/orgs/Org2", json={"speed_limit_policy": 45})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Organization updated"
    assert body["org"]["speed_limit_policy"] == 45
    assert body["org"]["account"] == "acc2"


def test_update_unknown_org_is_404(client):
    assert client.patch("/orgs/Nope", json={"account": "x"}).status_code == 404


def test_list_orgs_paginates(client):
    response = client.get("/orgs", params={"page": 1, "limit": 1})
    assert response.status_code == 200
    body = response.json()
    assert body["total_orgs"] == 2
    assert body["total_pages"] == 2
    assert body["data"][0]["name"] == "Org1"

    response = client.get("/orgs", params={"page": 2, "limit": 1})
    assert response.json()["data"][0]["parent_org"] == "Org1"


@pytest.mark.parametrize(
    "params",
    [{"page": 0}, {"limit": 0}, {"page": "abc"}, {"limit": "ten"}, {"page": "1.5"}, {"page": ""}],
)
def test_list_orgs_rejects_bad_pagination(client, params):
    response = client.get("/orgs", params=params)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid pagination parameters"
