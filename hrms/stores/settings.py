"""
Attendance settings store — singleton row, created with defaults on first read.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core.config import settings
from hrms.models.attendance_settings import AttendanceSettings

logger = logging.getLogger(__name__)


class AttendanceSettingsStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_or_create(self) -> AttendanceSettings:
        """Fetch the singleton settings row, creating it with defaults if absent."""
        result = await self._session.execute(select(AttendanceSettings).limit(1))
        row = result.scalar_one_or_none()
        if row is None:
            row = AttendanceSettings(
                id=1,
                late_grace_minutes=settings.LATE_GRACE_MINUTES,
                early_arrival_minutes=settings.EARLY_ARRIVAL_MINUTES,
                timezone_offset=settings.TIMEZONE_OFFSET,
            )
            self._session.add(row)
            await self._session.flush()
            logger.info("Created default attendance settings")
        return row

    async def update(self, patch: dict) -> AttendanceSettings:
        row = await self.get_or_create()
        for field, value in patch.items():
            setattr(row, field, value)
        await self._session.flush()
        return row
