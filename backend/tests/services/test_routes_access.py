"""Route Guards — every protected route enforces its operation's permissions.

Tests cover:
    - No identity → 401 before anything else
    - Identity lacking the required permission → 403 (before body validation)
    - Identity holding exactly the required permission passes the guard
    - get_identity resolves request.state.user_id through load_identity
"""

from types import SimpleNamespace

import pytest

from bloodbank.api.dependencies import get_identity
from bloodbank.core.permissions import ALL_PERMISSIONS, Operation, required_permissions

ROUTES = [
    ("GET", "/api/v1/bloods", Operation.BLOOD_READ_ALL),
    ("GET", "/api/v1/bloods/1", Operation.BLOOD_READ_ONE),
    ("POST", "/api/v1/donors", Operation.DONOR_CREATE),
    ("GET", "/api/v1/donors", Operation.DONOR_READ_ALL),
    ("GET", "/api/v1/donors/1", Operation.DONOR_READ_ONE),
    ("PATCH", "/api/v1/donors/1", Operation.DONOR_UPDATE),
    ("DELETE", "/api/v1/donors/1", Operation.DONOR_DELETE),
    ("POST", "/api/v1/health-entities", Operation.HEALTH_ENTITY_CREATE),
    ("GET", "/api/v1/health-entities", Operation.HEALTH_ENTITY_READ_ALL),
    ("DELETE", "/api/v1/health-entities/1", Operation.HEALTH_ENTITY_DELETE),
    ("POST", "/api/v1/requests", Operation.REQUEST_CREATE),
    ("GET", "/api/v1/requests", Operation.REQUEST_READ_ALL),
    ("PATCH", "/api/v1/requests/1", Operation.REQUEST_UPDATE),
    ("DELETE", "/api/v1/requests/1", Operation.REQUEST_DELETE),
    ("POST", "/api/v1/blood-bags", Operation.BLOOD_BAG_CREATE),
    ("GET", "/api/v1/blood-bags", Operation.BLOOD_BAG_READ_ALL),
    ("DELETE", "/api/v1/blood-bags/1", Operation.BLOOD_BAG_DELETE),
    ("POST", "/api/v1/users", Operation.USER_CREATE),
    ("GET", "/api/v1/users", Operation.USER_READ_ALL),
    ("DELETE", "/api/v1/users/1", Operation.USER_DELETE),
    ("GET", "/api/v1/roles", Operation.ROLE_READ_ALL),
    ("POST", "/api/v1/roles/1/permissions", Operation.ROLE_ASSIGN_PERMISSIONS),
    ("DELETE", "/api/v1/roles/1/permissions/1", Operation.ROLE_REMOVE_PERMISSION),
    ("GET", "/api/v1/permissions", Operation.PERMISSION_READ_ALL),
    ("GET", "/api/v1/reports/inventory", Operation.REPORT_READ),
    ("GET", "/api/v1/reports/requests/overdue", Operation.REPORT_READ),
]


@pytest.mark.parametrize("method, path, operation", ROUTES)
async def test_unauthenticated_is_401(client, method, path, operation):
    res = await client.request(method, path, json={})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHENTICATED"


@pytest.mark.parametrize("method, path, operation", ROUTES)
async def test_missing_permission_is_403(client, act_as, method, path, operation):
    act_as(*(ALL_PERMISSIONS - required_permissions(operation)))
    res = await client.request(method, path, json={})
    assert res.status_code == 403
    assert res.json()["error"]["category"] == "authorization"


@pytest.mark.parametrize("method, path, operation", ROUTES)
async def test_required_permission_passes_guard(client, act_as, method, path, operation):
    act_as(*required_permissions(operation))
    res = await client.request(method, path, json={})
    assert res.status_code not in (401, 403)


async def test_health_endpoint_needs_no_identity(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_bloods_listed_with_labels(client, act_as):
    act_as("blood_read")
    res = await client.get("/api/v1/bloods")
    assert res.status_code == 200
    assert [b["label"] for b in res.json()] == [
        "A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-",
    ]


# ─── get_identity ────────────────────────────────────────────────

async def test_get_identity_without_user_id_is_none(test_db):
    request = SimpleNamespace(state=SimpleNamespace())
    assert await get_identity(request, test_db) is None


async def test_get_identity_resolves_state_user(services, make_user, test_db):
    user = await make_user()
    request = SimpleNamespace(state=SimpleNamespace(user_id=user.id))
    identity = await get_identity(request, test_db)
    assert identity.user_id == user.id
    assert "report_read" in identity.permissions
