"""
Shared test fixtures for the HRMS time clock test suite.

Async throughout: aiosqlite + AsyncSession, httpx AsyncClient over ASGI.
"""

import os
import sys
from datetime import date
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hrms.api.v1.deps import get_current_active_user, get_db, require_admin
from hrms.api.v1.endpoints.auth import limiter
from hrms.db.base import Base
from hrms.main import app
from hrms.models.employee import Employee
from hrms.models.shift_assignment import ShiftAssignment
from hrms.models.user import User
from hrms.stores.container import Stores, build_stores

# One in-memory database shared by the app and the tests
test_engine = create_async_engine(
    "sqlite+aiosqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Login tests hit the same endpoint repeatedly from one address
limiter.enabled = False


@pytest.fixture(autouse=True)
async def setup_db():
    """Create all tables before usage and drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestingSessionLocal() as session:
        yield session


app.dependency_overrides[get_db] = _override_get_db


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def stores(db_session: AsyncSession) -> Stores:
    return build_stores(db_session)


# ── Factories ───────────────────────────────────────────────────────
@pytest.fixture
def make_employee(db_session: AsyncSession):
    async def _make(first_name: str = "Ada", last_name: str = "Lovelace", **fields) -> Employee:
        employee = Employee(first_name=first_name, last_name=last_name, **fields)
        db_session.add(employee)
        await db_session.commit()
        return employee

    return _make


@pytest.fixture
def make_shift(db_session: AsyncSession):
    async def _make(
        employee_id: int,
        start_time: str = "09:00",
        end_time: str = "17:00",
        on: date = date(2024, 3, 4),
        **fields,
    ) -> ShiftAssignment:
        shift = ShiftAssignment(
            employee_id=employee_id,
            date=on,
            start_time=start_time,
            end_time=end_time,
            **fields,
        )
        db_session.add(shift)
        await db_session.commit()
        return shift

    return _make


# ── Auth Overrides ──────────────────────────────────────────────────
async def _override_get_current_active_user():
    return User(id=1, email="test@example.com", is_active=True, role="admin")


async def _override_require_admin():
    return User(id=1, email="admin@example.com", is_active=True, role="admin")


app.dependency_overrides[get_current_active_user] = _override_get_current_active_user
app.dependency_overrides[require_admin] = _override_require_admin
