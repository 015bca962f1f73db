"""
ShiftAssignment model — one employee's planned work period on one date.

``time_entry_id`` is a weak back-reference written only by the shift
synchronizer. There is no foreign key in either direction
between shifts and time entries.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String

from hrms.db.base import Base


class ShiftAssignment(Base):
    __tablename__ = "shift_assignments"
    __table_args__ = (Index("ix_shift_employee_date", "employee_id", "date"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    date: date = Column(Date, nullable=False, index=True)  # type: ignore[assignment]
    start_time: str = Column(String(5), nullable=False)  # type: ignore[assignment]  # HH:MM
    end_time: str = Column(String(5), nullable=False)  # type: ignore[assignment]  # HH:MM, may wrap
    location: str = Column(String(20), nullable=False, default="Office")  # type: ignore[assignment]
    work_type: str = Column(String(30), nullable=False, default="Regular")  # type: ignore[assignment]
    break_duration: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]  # minutes
    status: str = Column(  # type: ignore[assignment]
        String(20), nullable=False, default="Scheduled", index=True
    )
    # Scheduled | In Progress | On Break | Completed | Missed | Cancelled | Swapped
    assigned_by: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]

    # Swap request sub-record
    swap_requested_by: int | None = Column(Integer, ForeignKey("employees.id"), nullable=True)  # type: ignore[assignment]
    swap_requested_with: int | None = Column(Integer, ForeignKey("employees.id"), nullable=True)  # type: ignore[assignment]
    swap_status: str | None = Column(String(10), nullable=True)  # type: ignore[assignment]  # Pending | Approved | Rejected
    swap_reason: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    swap_requested_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    swap_reviewed_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]

    # Written by the synchronizer
    actual_start_time: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    actual_end_time: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    time_entry_id: int | None = Column(Integer, nullable=True, index=True)  # type: ignore[assignment]

    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def describe(self) -> dict:
        """Compact summary used in conflict reports and log lines."""
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "date": self.date.isoformat() if self.date else None,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "status": self.status,
        }
