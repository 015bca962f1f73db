"""
Attendance Settings model — singleton table for the admin-tunable policy.

Only one row should ever exist. The clock endpoints read it to build the
grace windows used when classifying clock-ins, and to resolve "now" in the
organisation's local time.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from hrms.db.base import Base


class AttendanceSettings(Base):
    __tablename__ = "attendance_settings"

    id: int = Column(Integer, primary_key=True, default=1)  # type: ignore[assignment]
    late_grace_minutes: int = Column(Integer, nullable=False, default=5)  # type: ignore[assignment]
    early_arrival_minutes: int = Column(Integer, nullable=False, default=15)  # type: ignore[assignment]
    timezone_offset: str = Column(String(6), nullable=False, default="+00:00")  # type: ignore[assignment]
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
