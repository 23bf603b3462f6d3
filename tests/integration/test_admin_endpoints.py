"""
Integration tests for /api/v1/admin/*.

Focus: admin-only access, filtering and pagination of users, account
deactivation and the moderation queue for global workouts and exercises.

User management runs against mock_db; moderation goes through live_client
so the review flags are read back from the database.
"""

import pytest
from unittest.mock import MagicMock

from app.models.user import RoleEnum
from tests.conftest import make_auth_headers

pytestmark = pytest.mark.integration


# ---------------------------------------------------------------------------
# mock_db helpers
# ---------------------------------------------------------------------------

def setup_mock_db_for_user_list(mock_db, users: list, total: int):
    """db.execute is called twice: COUNT first, then the page of users."""
    count_result = MagicMock()
    count_result.scalar_one.return_value = total

    users_result = MagicMock()
    users_result.scalars.return_value.all.return_value = users

    mock_db.execute.side_effect = [count_result, users_result]


def setup_mock_db_for_single_user(mock_db, user):
    result = MagicMock()
    result.scalar_one_or_none.return_value = user
    mock_db.execute.return_value = result


# ---------------------------------------------------------------------------
# access control
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_users_as_admin_returns_200(admin_client, mock_db, admin_fixture):
    setup_mock_db_for_user_list(mock_db, [admin_fixture], total=1)

    response = await admin_client.get("/api/v1/admin/users")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["pages"] == 1
    assert data["items"][0]["email"] == admin_fixture.email


@pytest.mark.asyncio
async def test_get_users_as_user_returns_403(user_client):
    response = await user_client.get("/api/v1/admin/users")
    assert response.status_code == 403
    assert response.json() == {"message": "Access denied. Admin only."}


@pytest.mark.asyncio
async def test_get_users_without_token_is_rejected(client, mock_repo):
    response = await client.get("/api/v1/admin/users")
    assert response.status_code in (401, 403)


@pytest.mark.asyncio
async def test_moderation_queue_as_user_returns_403(user_client):
    response = await user_client.get("/api/v1/admin/workouts/pending")
    assert response.status_code == 403


# ---------------------------------------------------------------------------
# GET /admin/users
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_users_pagination_structure(admin_client, mock_db, admin_fixture, user_fixture):
    setup_mock_db_for_user_list(mock_db, [admin_fixture, user_fixture], total=25)

    response = await admin_client.get("/api/v1/admin/users?page=2&page_size=10")

    assert response.status_code == 200
    data = response.json()
    assert data["page"] == 2
    assert data["page_size"] == 10
    assert data["total"] == 25
    assert data["pages"] == 3
    assert len(data["items"]) == 2


@pytest.mark.asyncio
async def test_get_users_empty_result_returns_200(admin_client, mock_db):
    setup_mock_db_for_user_list(mock_db, [], total=0)

    response = await admin_client.get("/api/v1/admin/users")

    assert response.status_code == 200
    assert response.json()["items"] == []


@pytest.mark.asyncio
async def test_get_users_invalid_role_filter_returns_400(admin_client, mock_db):
    response = await admin_client.get("/api/v1/admin/users?role=superadmin")
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# GET /admin/users/{user_id}
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_user_by_id_as_admin_returns_200(admin_client, mock_db, user_fixture):
    setup_mock_db_for_single_user(mock_db, user_fixture)

    response = await admin_client.get(f"/api/v1/admin/users/{user_fixture.id}")

    assert response.status_code == 200
    assert response.json()["email"] == user_fixture.email


@pytest.mark.asyncio
async def test_get_user_by_id_not_found_returns_404(admin_client, mock_db):
    setup_mock_db_for_single_user(mock_db, None)

    response = await admin_client.get("/api/v1/admin/users/99999")

    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


# ---------------------------------------------------------------------------
# PUT /admin/users/{user_id}/role
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_change_user_role_as_admin_success(admin_client, mock_db, user_fixture):
    setup_mock_db_for_single_user(mock_db, user_fixture)

    response = await admin_client.put(f"/api/v1/admin/users/{user_fixture.id}/role", json={"role": "admin"})

    assert response.status_code == 200
    assert response.json()["new_role"] == "admin"
    assert user_fixture.role == RoleEnum.admin
    mock_db.commit.assert_awaited()


@pytest.mark.asyncio
async def test_change_own_role_returns_400(admin_client, admin_fixture):
    response = await admin_client.put(f"/api/v1/admin/users/{admin_fixture.id}/role", json={"role": "user"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_change_role_invalid_value_returns_400(admin_client, mock_db, user_fixture):
    setup_mock_db_for_single_user(mock_db, user_fixture)

    response = await admin_client.put(f"/api/v1/admin/users/{user_fixture.id}/role", json={"role": "superadmin"})

    assert response.status_code == 400


# ---------------------------------------------------------------------------
# PUT /admin/users/{user_id}/deactivate
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_deactivate_user_clears_refresh_token(admin_client, mock_db, user_fixture):
    user_fixture.refresh_token = "some-token"
    setup_mock_db_for_single_user(mock_db, user_fixture)

    response = await admin_client.put(f"/api/v1/admin/users/{user_fixture.id}/deactivate")

    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert user_fixture.refresh_token is None


@pytest.mark.asyncio
async def test_deactivate_self_returns_400(admin_client, admin_fixture):
    response = await admin_client.put(f"/api/v1/admin/users/{admin_fixture.id}/deactivate")
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# moderation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_workout_review_approve_and_reject(live_client, make_user):
    alice = await make_user("Alice")
    admin = await make_user("Coach", role=RoleEnum.admin)
    user_headers = make_auth_headers(alice)
    admin_headers = make_auth_headers(admin)

    first = await live_client.post("/api/v1/workouts", json={"title": "Share me", "is_global": True}, headers=user_headers)
    second = await live_client.post("/api/v1/workouts", json={"title": "And me", "is_global": True}, headers=user_headers)
    assert first.json()["approved_by_admin"] is False

    pending = await live_client.get("/api/v1/admin/workouts/pending", headers=admin_headers)
    assert {w["id"] for w in pending.json()} == {first.json()["id"], second.json()["id"]}

    approved = await live_client.put(f"/api/v1/admin/workouts/{first.json()['id']}/approve", headers=admin_headers)
    assert approved.status_code == 200
    assert approved.json()["is_global"] is True
    assert approved.json()["approved_by_admin"] is True

    rejected = await live_client.put(f"/api/v1/admin/workouts/{second.json()['id']}/reject", headers=admin_headers)
    assert rejected.json() == {"message": "Workout rejected"}

    pending = await live_client.get("/api/v1/admin/workouts/pending", headers=admin_headers)
    assert pending.json() == []

    missing = await live_client.put("/api/v1/admin/workouts/999/approve", headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_exercise_review_publishes_to_everyone(live_client, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    admin = await make_user("Coach", role=RoleEnum.admin)
    admin_headers = make_auth_headers(admin)

    section = await live_client.post(
        "/api/v1/sections", json={"name": "Shoulders", "is_global": True}, headers=admin_headers
    )
    exercise = await live_client.post(
        "/api/v1/exercises",
        json={"name": "Arnold press", "section_id": section.json()["id"], "is_global": True},
        headers=make_auth_headers(alice),
    )
    exercise_id = exercise.json()["id"]

    hidden = await live_client.get(f"/api/v1/exercises/{exercise_id}", headers=make_auth_headers(bob))
    assert hidden.status_code == 403

    pending = await live_client.get("/api/v1/admin/exercises/pending", headers=admin_headers)
    assert [e["id"] for e in pending.json()] == [exercise_id]

    await live_client.put(f"/api/v1/admin/exercises/{exercise_id}/approve", headers=admin_headers)

    visible = await live_client.get(f"/api/v1/exercises/{exercise_id}", headers=make_auth_headers(bob))
    assert visible.status_code == 200
    assert visible.json()["approved_by_admin"] is True
