"""Pydantic schemas for shift assignments and swap requests.

Times are plain ``HH:MM`` strings here; the timeclock layer owns their
validation so malformed values surface as a ``FormatError``.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from hrms.core.enums import ShiftLocation, ShiftStatus, WorkType


class ShiftAssignmentCreate(BaseModel):
    employee_id: int
    date: dt.date
    start_time: str
    end_time: str
    location: ShiftLocation = ShiftLocation.OFFICE
    work_type: WorkType = WorkType.REGULAR
    break_duration: int = Field(default=0, ge=0, le=720)
    notes: str | None = Field(default=None, max_length=500)

    model_config = {"use_enum_values": True, "validate_default": True}


class ShiftAssignmentBulkCreate(BaseModel):
    assignments: list[ShiftAssignmentCreate] = Field(min_length=1, max_length=500)


class ShiftAssignmentUpdate(BaseModel):
    employee_id: int | None = None
    date: dt.date | None = None
    start_time: str | None = None
    end_time: str | None = None
    location: ShiftLocation | None = None
    work_type: WorkType | None = None
    break_duration: int | None = Field(default=None, ge=0, le=720)
    status: ShiftStatus | None = None
    notes: str | None = Field(default=None, max_length=500)

    model_config = {"use_enum_values": True, "validate_default": True}


class ShiftAssignmentRead(BaseModel):
    id: int
    employee_id: int
    date: dt.date
    start_time: str
    end_time: str
    location: str
    work_type: str
    break_duration: int
    status: str
    assigned_by: int | None
    notes: str | None
    swap_requested_by: int | None
    swap_requested_with: int | None
    swap_status: str | None
    swap_reason: str | None
    swap_requested_at: dt.datetime | None
    swap_reviewed_at: dt.datetime | None
    actual_start_time: dt.datetime | None
    actual_end_time: dt.datetime | None
    time_entry_id: int | None
    created_at: dt.datetime | None
    updated_at: dt.datetime | None

    model_config = {"from_attributes": True}


class SwapRequest(BaseModel):
    requested_with: int
    reason: str | None = Field(default=None, max_length=500)


class SwapReview(BaseModel):
    approve: bool


class ShiftStatistics(BaseModel):
    start_date: dt.date
    end_date: dt.date
    total: int
    by_status: dict[str, int]
    by_location: dict[str, int]
