"""
TimeEntry & TimeEntryBreak models — observed clock-in/out sessions.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (Boolean, Column, Date, DateTime, Float, ForeignKey,
                        Index, Integer, String, text)
from sqlalchemy.orm import relationship

from hrms.db.base import Base

_ACTIVE = text("status IN ('clocked_in', 'on_break')")


class TimeEntry(Base):
    __tablename__ = "time_entries"
    __table_args__ = (
        Index("ix_time_entry_employee_date", "employee_id", "date"),
        # At most one active session per employee, enforced by the database.
        Index(
            "uq_time_entry_active_employee",
            "employee_id",
            unique=True,
            postgresql_where=_ACTIVE,
            sqlite_where=_ACTIVE,
        ),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    date: date = Column(Date, nullable=False, index=True)  # type: ignore[assignment]
    clock_in: str = Column(String(5), nullable=False)  # type: ignore[assignment]  # HH:MM
    clock_out: str | None = Column(String(5), nullable=True)  # type: ignore[assignment]
    location: str = Column(String(20), nullable=False, default="Office")  # type: ignore[assignment]
    work_type: str = Column(String(30), nullable=False, default="Regular")  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20), nullable=False, default="clocked_in", index=True
    )  # clocked_in | on_break | clocked_out

    shift_id: int | None = Column(Integer, nullable=True, index=True)  # type: ignore[assignment]
    attendance_status: str = Column(String(20), nullable=False, default="Unscheduled")  # type: ignore[assignment]
    hours_worked: float = Column(Float, nullable=False, default=0.0)  # type: ignore[assignment]
    total_hours: float = Column(Float, nullable=False, default=0.0)  # type: ignore[assignment]
    scheduled_hours: float = Column(Float, nullable=False, default=0.0)  # type: ignore[assignment]
    variance: float | None = Column(Float, nullable=True)  # type: ignore[assignment]

    gps_latitude: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    gps_longitude: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    gps_accuracy: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    gps_latitude_out: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    gps_longitude_out: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    gps_accuracy_out: float | None = Column(Float, nullable=True)  # type: ignore[assignment]

    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    is_manual_entry: bool = Column(Boolean, default=False, server_default="false")  # type: ignore[assignment]
    created_by: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    breaks = relationship(
        "TimeEntryBreak",
        back_populates="time_entry",
        cascade="all, delete-orphan",
        order_by="TimeEntryBreak.id",
        lazy="selectin",
    )

    @property
    def open_break(self) -> "TimeEntryBreak | None":
        return next((b for b in self.breaks if b.end_time is None), None)


class TimeEntryBreak(Base):
    __tablename__ = "time_entry_breaks"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    time_entry_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("time_entries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_time: str = Column(String(5), nullable=False)  # type: ignore[assignment]
    end_time: str | None = Column(String(5), nullable=True)  # type: ignore[assignment]  # null while open
    duration: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]  # minutes
    type: str = Column(String(10), nullable=False, default="other")  # type: ignore[assignment]  # lunch | coffee | other

    time_entry = relationship("TimeEntry", back_populates="breaks")
