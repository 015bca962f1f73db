"""Pydantic schemas for leave records."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field, model_validator

from hrms.core.enums import LeaveType


class LeaveCreate(BaseModel):
    employee_id: int
    start_date: dt.date
    end_date: dt.date
    leave_type: LeaveType = LeaveType.ANNUAL
    reason: str | None = Field(default=None, max_length=500)

    model_config = {"use_enum_values": True, "validate_default": True}

    @model_validator(mode="after")
    def _range(self) -> "LeaveCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LeaveReview(BaseModel):
    approve: bool


class LeaveRead(BaseModel):
    id: int
    employee_id: int
    start_date: dt.date
    end_date: dt.date
    leave_type: str
    status: str
    reason: str | None
    reviewed_by: int | None
    created_at: dt.datetime | None

    model_config = {"from_attributes": True}
