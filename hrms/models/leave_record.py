"""
LeaveRecord model — leave covering an inclusive date range.

The timeclock core only ever reads approved records.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, String

from hrms.db.base import Base


class LeaveRecord(Base):
    __tablename__ = "leave_records"
    __table_args__ = (Index("ix_leave_employee_range", "employee_id", "start_date", "end_date"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    start_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    end_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    leave_type: str = Column(String(20), nullable=False, default="Annual")  # type: ignore[assignment]
    status: str = Column(String(10), nullable=False, default="Pending")  # type: ignore[assignment]
    # Pending | Approved | Rejected
    reason: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    reviewed_by: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
