"""Tests for login, tokens, role guards and user management."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.api.v1.deps import get_current_active_user, require_admin
from hrms.core.security import (create_access_token, decode_access_token,
                                get_password_hash)
from hrms.main import app
from hrms.models.employee import Employee
from hrms.models.user import User

PASSWORD = "s3cret-pass"


@pytest.fixture
def real_auth():
    """Run the request through the real JWT guards instead of the test overrides."""
    saved = dict(app.dependency_overrides)
    app.dependency_overrides.pop(get_current_active_user, None)
    app.dependency_overrides.pop(require_admin, None)
    yield
    app.dependency_overrides.clear()
    app.dependency_overrides.update(saved)


@pytest.fixture
def make_user(db_session: AsyncSession):
    async def _make(email="user@example.com", role="employee", is_active=True, employee_id=None) -> User:
        user = User(
            email=email,
            hashed_password=get_password_hash(PASSWORD),
            role=role,
            is_active=is_active,
            employee_id=employee_id,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


async def _login(client: AsyncClient, email: str, password: str = PASSWORD):
    return await client.post(
        "/api/v1/auth/login",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


def _bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, role=user.role)}"}


@pytest.mark.asyncio
async def test_login_sets_tokens_and_cookies(async_client: AsyncClient, make_user):
    user = await make_user(role="manager")

    resp = await _login(async_client, "USER@example.com ")

    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert decode_access_token(body["access_token"])["role"] == "manager"
    assert decode_access_token(body["access_token"])["sub"] == str(user.id)
    assert "access_token" in resp.cookies
    assert "refresh_token" in resp.cookies


@pytest.mark.asyncio
async def test_wrong_password_is_401(async_client: AsyncClient, make_user):
    await make_user()
    resp = await _login(async_client, "user@example.com", "nope")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_inactive_user_cannot_log_in(async_client: AsyncClient, make_user):
    await make_user(is_active=False)
    resp = await _login(async_client, "user@example.com")
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_refresh_with_body_token(async_client: AsyncClient, make_user):
    await make_user()
    tokens = (await _login(async_client, "user@example.com")).json()

    resp = await async_client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )

    assert resp.status_code == 200
    assert resp.json()["access_token"]


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(async_client: AsyncClient, make_user):
    await make_user()
    tokens = (await _login(async_client, "user@example.com")).json()

    resp = await async_client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]}
    )

    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_logout(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Logged out"


@pytest.mark.asyncio
async def test_me_requires_a_token(async_client: AsyncClient, real_auth):
    resp = await async_client.get("/api/v1/auth/me")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_me_with_bearer_header(async_client: AsyncClient, make_user, real_auth):
    user = await make_user()
    resp = await async_client.get("/api/v1/auth/me", headers=_bearer(user))
    assert resp.status_code == 200
    assert resp.json()["email"] == "user@example.com"


@pytest.mark.asyncio
async def test_employee_role_cannot_schedule(async_client: AsyncClient, make_user, real_auth):
    user = await make_user(role="employee")
    resp = await async_client.post(
        "/api/v1/shifts",
        json={"employee_id": 1, "date": "2024-03-04", "start_time": "09:00", "end_time": "17:00"},
        headers=_bearer(user),
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_manager_can_schedule_but_not_change_settings(
    async_client: AsyncClient, db_session: AsyncSession, make_user, real_auth
):
    emp = Employee(first_name="Ada", last_name="Lovelace")
    db_session.add(emp)
    await db_session.commit()
    manager = await make_user(email="boss@example.com", role="manager")

    resp = await async_client.post(
        "/api/v1/shifts",
        json={"employee_id": emp.id, "date": "2024-03-04", "start_time": "09:00", "end_time": "17:00"},
        headers=_bearer(manager),
    )
    assert resp.status_code == 201

    resp = await async_client.put(
        "/api/v1/settings", json={"late_grace_minutes": 30}, headers=_bearer(manager)
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_employee_self_service_with_real_token(
    async_client: AsyncClient, db_session: AsyncSession, make_user, real_auth
):
    emp = Employee(first_name="Ada", last_name="Lovelace")
    db_session.add(emp)
    await db_session.commit()
    user = await make_user(employee_id=emp.id)

    resp = await async_client.post("/api/v1/clock/me/in", json={}, headers=_bearer(user))

    assert resp.status_code == 201
    assert resp.json()["entry"]["employee_id"] == emp.id


# ── User management ────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_admin_creates_and_updates_users(async_client: AsyncClient, db_session: AsyncSession):
    emp = Employee(first_name="Ada", last_name="Lovelace")
    db_session.add(emp)
    await db_session.commit()

    resp = await async_client.post(
        "/api/v1/auth/users",
        json={"email": "ada@example.com", "password": "long-enough", "employee_id": emp.id},
    )
    assert resp.status_code == 201
    created = resp.json()
    assert created["role"] == "employee"
    assert created["employee_id"] == emp.id

    dup = await async_client.post(
        "/api/v1/auth/users", json={"email": "ada@example.com", "password": "long-enough"}
    )
    assert dup.status_code == 400

    resp = await async_client.patch(f"/api/v1/auth/users/{created['id']}", json={"role": "manager"})
    assert resp.status_code == 200
    assert resp.json()["role"] == "manager"

    listed = await async_client.get("/api/v1/auth/users")
    assert [u["email"] for u in listed.json()] == ["ada@example.com"]


@pytest.mark.asyncio
async def test_user_link_to_missing_employee(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/auth/users",
        json={"email": "x@example.com", "password": "long-enough", "employee_id": 777},
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_invalid_role_rejected(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/auth/users",
        json={"email": "x@example.com", "password": "long-enough", "role": "kiosk"},
    )
    assert resp.status_code == 422
