"""
FastAPI dependencies — auth guards, database session and per-request services.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core.config import settings
from hrms.core.enums import UserRole
from hrms.core.security import decode_access_token
from hrms.db.session import async_session_factory
from hrms.models.user import User
from hrms.stores.container import Stores, build_stores
from hrms.timeclock.assignments import AssignmentService
from hrms.timeclock.clock import ClockService, parse_offset
from hrms.timeclock.validator import AttendancePolicy

# auto_error=False so the cookie can be checked when the header is missing
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_PREFIX}/auth/login", auto_error=False
)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_stores(db: AsyncSession = Depends(get_db)) -> Stores:
    return build_stores(db)


# ── Services ────────────────────────────────────────────────────────
async def get_clock_service(stores: Stores = Depends(get_stores)) -> ClockService:
    """ClockService configured from the live attendance settings row."""
    row = await stores.attendance_settings.get_or_create()
    return ClockService(
        stores,
        policy=AttendancePolicy.from_row(row),
        tz=parse_offset(row.timezone_offset),
    )


async def get_assignment_service(stores: Stores = Depends(get_stores)) -> AssignmentService:
    return AssignmentService(stores)


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),  # HttpOnly cookie
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode JWT from Header OR Cookie, look up user."""

    # Priority: Header > Cookie
    final_token = token
    if not final_token and access_token:
        # auth.py stores the cookie as "Bearer <token>"
        if access_token.startswith("Bearer "):
            final_token = access_token.split(" ", 1)[1]
        else:
            final_token = access_token

    credentials_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not final_token:
        raise credentials_exc

    payload = decode_access_token(final_token)
    if payload is None:
        raise credentials_exc

    user_id: str | None = payload.get("sub")
    if user_id is None:
        raise credentials_exc

    result = await db.execute(select(User).where(User.id == int(user_id)))
    user = result.scalar_one_or_none()
    if user is None:
        raise credentials_exc
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Reject inactive accounts."""
    if not current_user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user account")
    return current_user


async def require_admin(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Only allow admin role to proceed."""
    if current_user.role != UserRole.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user


async def require_manager(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Admins and managers: scheduling, clock corrections, leave review."""
    if current_user.role not in (UserRole.ADMIN.value, UserRole.MANAGER.value):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Manager privileges required",
        )
    return current_user


async def get_current_employee_id(
    current_user: User = Depends(get_current_active_user),
) -> int:
    """The employee record behind a self-service login."""
    if current_user.employee_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account is not linked to an employee",
        )
    return current_user.employee_id
