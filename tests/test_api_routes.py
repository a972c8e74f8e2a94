"""
HTTP surface tests: permission guards, error mapping and the verify endpoint.

The store, cache and current user are swapped through FastAPI dependency
overrides; services run unmodified on top of them.
"""

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_cache, get_current_user, get_store
from app.main import app
from app.modules.auth.schemas import CurrentUser

ADMIN_ID = "ae032b1b-cc3c-4e44-9197-276ca877a7f8"
GROUP_ID = "91742290-4049-45c9-9c27-c9f6200fef4c"


@pytest.fixture
def current_user():
    return CurrentUser(id=ADMIN_ID, email="admin@test.com")


@pytest.fixture
def client(store, cache, current_user):
    store.seed("users", id=ADMIN_ID, email="admin@test.com")
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_current_user] = lambda: current_user
    yield TestClient(app)
    app.dependency_overrides.clear()


def grant(store, *names):
    for name in names:
        permission = store.seed("permissions", name=name)
        store.seed("user_permissions", user_id=ADMIN_ID, permission_id=permission["id"])


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


def test_missing_permission_is_forbidden(client, store):
    grant(store, "ViewGroup")

    resp = client.post("/api/v1/groups", json={"name": "Ops"})

    assert resp.status_code == 403
    assert "CreateGroup" in resp.json()["detail"]


def test_granted_permission_is_allowed(client, store):
    grant(store, "CreateGroup")

    resp = client.post("/api/v1/groups", json={"name": "Ops"})

    assert resp.status_code == 201
    assert resp.json()["name"] == "Ops"


def test_super_user_bypasses_permission_checks(client, current_user):
    current_user.is_super_user = True

    resp = client.post("/api/v1/groups", json={"name": "Ops"})

    assert resp.status_code == 201


def test_unknown_group_maps_to_404(client, store):
    grant(store, "ViewGroup")

    resp = client.get("/api/v1/groups/missing")

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Group not found: missing"


def test_granting_unknown_permission_lists_missing_ids(client, store):
    grant(store, "EditGroup")
    store.seed("groups", id=GROUP_ID, name="G1")

    resp = client.put(
        f"/api/v1/groups/{GROUP_ID}/permissions", json={"permissions": ["nope-1", "nope-2"]}
    )

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Permission not found: nope-1,nope-2"


def test_deleting_group_with_members_is_conflict(client, store):
    grant(store, "DeleteGroup")
    store.seed("groups", id=GROUP_ID, name="G1")
    store.seed("user_groups", user_id=ADMIN_ID, group_id=GROUP_ID)

    resp = client.delete(f"/api/v1/groups/{GROUP_ID}")

    assert resp.status_code == 409


def test_user_group_membership_round_trip(client, store):
    grant(store, "EditUser", "ViewUser")
    store.seed("groups", id=GROUP_ID, name="G1")

    put = client.put(f"/api/v1/users/{ADMIN_ID}/groups", json={"groups": [GROUP_ID]})
    listed = client.get(f"/api/v1/users/{ADMIN_ID}/groups")
    removed = client.request(
        "DELETE", f"/api/v1/users/{ADMIN_ID}/groups", json={"groups": [GROUP_ID]}
    )

    assert put.status_code == 200
    assert [g["id"] for g in listed.json()] == [GROUP_ID]
    assert removed.json() == {"removed": 1}


def test_verify_endpoint(client, store):
    grant(store, "ViewUser")
    member = store.seed("users", email="member@test.com")
    store.seed("groups", id=GROUP_ID, name="G1")
    store.seed("user_groups", user_id=member["id"], group_id=GROUP_ID)
    create_user = store.seed("permissions", name="CreateUser")
    store.seed("group_permissions", group_id=GROUP_ID, permission_id=create_user["id"])

    granted = client.post(
        "/api/v1/authorization/verify",
        json={"user_id": member["id"], "permissions": ["CreateUser"]},
    )
    denied = client.post(
        "/api/v1/authorization/verify",
        json={"user_id": member["id"], "permissions": ["CreateUser", "DeleteUser"]},
    )

    assert granted.json()["granted"] is True
    assert denied.json()["granted"] is False


def test_me_lists_effective_permissions(client, store):
    grant(store, "ViewUser", "EditUser")

    resp = client.get("/api/v1/auth/me")

    assert resp.status_code == 200
    assert resp.json()["permissions"] == ["EditUser", "ViewUser"]
