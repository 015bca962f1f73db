"""Pydantic schemas for the attendance policy settings."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AttendanceSettingsRead(BaseModel):
    late_grace_minutes: int
    early_arrival_minutes: int
    timezone_offset: str

    model_config = {"from_attributes": True}


class AttendanceSettingsUpdate(BaseModel):
    late_grace_minutes: int | None = Field(default=None, ge=0, le=240)
    early_arrival_minutes: int | None = Field(default=None, ge=0, le=240)
    timezone_offset: str | None = Field(default=None, pattern=r"^[+-]\d{2}:\d{2}$")
