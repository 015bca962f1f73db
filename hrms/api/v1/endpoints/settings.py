"""
Settings endpoints — admin-configurable attendance policy.

Singleton pattern: only one row in attendance_settings. GET retrieves it,
PUT updates it. If no row exists, one is created from the configured
defaults on first access.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from hrms.api.v1.deps import get_stores, require_admin
from hrms.models.attendance_settings import AttendanceSettings
from hrms.models.user import User
from hrms.schemas.settings import AttendanceSettingsRead, AttendanceSettingsUpdate
from hrms.stores.container import Stores

router = APIRouter(tags=["settings"])
logger = logging.getLogger(__name__)


@router.get("/settings", response_model=AttendanceSettingsRead)
async def get_settings(
    stores: Stores = Depends(get_stores),
    _admin: User = Depends(require_admin),
) -> AttendanceSettings:
    """Get the current attendance policy."""
    row = await stores.attendance_settings.get_or_create()
    await stores.commit()
    return row


@router.put("/settings", response_model=AttendanceSettingsRead)
async def update_settings(
    body: AttendanceSettingsUpdate,
    stores: Stores = Depends(get_stores),
    _admin: User = Depends(require_admin),
) -> AttendanceSettings:
    """Update the late grace, early-arrival window or timezone offset."""
    patch = body.model_dump(exclude_unset=True)
    row = await stores.attendance_settings.update(patch)
    await stores.commit()
    logger.info("Attendance settings updated: %s", patch)
    return row
