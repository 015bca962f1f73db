"""Pydantic schemas for clock events and time entries."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from hrms.core.enums import BreakType, ShiftLocation, WorkType


class GpsReading(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    accuracy: float | None = Field(default=None, ge=0)


# ── Live clock events ──────────────────────────────────────────────
class ClockInRequest(BaseModel):
    location: ShiftLocation | None = None
    work_type: WorkType | None = None
    gps: GpsReading | None = None
    notes: str | None = Field(default=None, max_length=500)
    # Admin back-dating; self-service always uses the server clock.
    at: dt.datetime | None = None

    model_config = {"use_enum_values": True, "validate_default": True}


class ClockOutRequest(BaseModel):
    gps: GpsReading | None = None
    at: dt.datetime | None = None


class BreakStartRequest(BaseModel):
    type: BreakType = BreakType.OTHER
    at: dt.datetime | None = None

    model_config = {"use_enum_values": True, "validate_default": True}


class BreakEndRequest(BaseModel):
    at: dt.datetime | None = None


# ── Time entries ───────────────────────────────────────────────────
class BreakCreate(BaseModel):
    start_time: str
    end_time: str
    type: BreakType = BreakType.OTHER

    model_config = {"use_enum_values": True, "validate_default": True}


class BreakRead(BaseModel):
    id: int
    start_time: str
    end_time: str | None
    duration: int
    type: str

    model_config = {"from_attributes": True}


class ManualEntryCreate(BaseModel):
    employee_id: int
    date: dt.date
    clock_in: str
    clock_out: str | None = None
    breaks: list[BreakCreate] = Field(default_factory=list, max_length=20)
    location: ShiftLocation | None = None
    work_type: WorkType | None = None
    notes: str | None = Field(default=None, max_length=500)

    model_config = {"use_enum_values": True, "validate_default": True}


class TimeEntryUpdate(BaseModel):
    clock_in: str | None = None
    clock_out: str | None = None
    location: ShiftLocation | None = None
    work_type: WorkType | None = None
    notes: str | None = Field(default=None, max_length=500)

    model_config = {"use_enum_values": True, "validate_default": True}


class TimeEntryRead(BaseModel):
    id: int
    employee_id: int
    date: dt.date
    clock_in: str
    clock_out: str | None
    location: str
    work_type: str
    status: str
    shift_id: int | None
    attendance_status: str
    hours_worked: float
    total_hours: float
    scheduled_hours: float
    variance: float | None
    gps_latitude: float | None
    gps_longitude: float | None
    gps_accuracy: float | None
    gps_latitude_out: float | None
    gps_longitude_out: float | None
    gps_accuracy_out: float | None
    notes: str | None
    is_manual_entry: bool
    created_by: int | None
    breaks: list[BreakRead] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class ClockInResponse(BaseModel):
    success: bool = True
    message: str
    attendance_status: str
    delta_minutes: int | None
    entry: TimeEntryRead


class ClockStatusResponse(BaseModel):
    employee_id: int
    status: str
    time_entry: TimeEntryRead | None


class StatusBoardItem(BaseModel):
    employee_id: int
    name: str
    department: str | None
    status: str
    clock_in: str | None
    clock_out: str | None
    location: str | None
    attendance_status: str | None
    shift_id: int | None


class StatusBoardResponse(BaseModel):
    date: dt.date
    total_employees: int
    employees: list[StatusBoardItem]
