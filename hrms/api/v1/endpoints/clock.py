"""
Clock endpoints — clock in/out, breaks and time entry administration.

- ``/clock/me/*`` is self-service for a login linked to an employee and
  always uses the server clock.
- ``/clock/{employee_id}/*`` lets a manager clock on someone's behalf,
  optionally back-dated with ``at``.
- Time entry corrections (manual entry, edits, deletes, added breaks)
  require a manager or admin.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from hrms.api.v1.deps import (get_clock_service, get_current_active_user,
                              get_current_employee_id, get_stores,
                              require_manager)
from hrms.core.exceptions import NotFoundError
from hrms.models.time_entry import TimeEntry
from hrms.models.user import User
from hrms.schemas.clock import (BreakCreate, BreakEndRequest,
                                BreakStartRequest, ClockInRequest,
                                ClockInResponse, ClockOutRequest,
                                ClockStatusResponse, ManualEntryCreate,
                                StatusBoardResponse, TimeEntryRead,
                                TimeEntryUpdate)
from hrms.schemas.common import DeleteResponse
from hrms.stores.container import Stores
from hrms.timeclock.clock import (BreakInput, ClockInResult, ClockService,
                                  GpsFix)

router = APIRouter(prefix="/clock", tags=["clock"])
logger = logging.getLogger(__name__)


def _gps(reading) -> GpsFix | None:
    if reading is None:
        return None
    return GpsFix(reading.latitude, reading.longitude, reading.accuracy)


def _clock_in_response(result: ClockInResult) -> ClockInResponse:
    return ClockInResponse(
        message=result.decision.message,
        attendance_status=result.decision.status.value,
        delta_minutes=result.decision.delta_minutes,
        entry=TimeEntryRead.model_validate(result.entry),
    )


# ── Self-service ───────────────────────────────────────────────────
@router.post("/me/in", response_model=ClockInResponse, status_code=201)
async def clock_in_me(
    body: ClockInRequest,
    employee_id: int = Depends(get_current_employee_id),
    service: ClockService = Depends(get_clock_service),
    user: User = Depends(get_current_active_user),
) -> ClockInResponse:
    result = await service.clock_in(
        employee_id,
        location=body.location,
        work_type=body.work_type,
        gps=_gps(body.gps),
        notes=body.notes,
        created_by=user.id,
    )
    return _clock_in_response(result)


@router.post("/me/out", response_model=TimeEntryRead)
async def clock_out_me(
    body: ClockOutRequest,
    employee_id: int = Depends(get_current_employee_id),
    service: ClockService = Depends(get_clock_service),
) -> TimeEntry:
    return await service.clock_out(employee_id, gps=_gps(body.gps))


@router.post("/me/break/start", response_model=TimeEntryRead)
async def start_break_me(
    body: BreakStartRequest,
    employee_id: int = Depends(get_current_employee_id),
    service: ClockService = Depends(get_clock_service),
) -> TimeEntry:
    return await service.start_break(employee_id, break_type=body.type)


@router.post("/me/break/end", response_model=TimeEntryRead)
async def end_break_me(
    employee_id: int = Depends(get_current_employee_id),
    service: ClockService = Depends(get_clock_service),
) -> TimeEntry:
    return await service.end_break(employee_id)


@router.get("/me/status", response_model=ClockStatusResponse)
async def my_status(
    employee_id: int = Depends(get_current_employee_id),
    service: ClockService = Depends(get_clock_service),
) -> dict:
    return await service.current_status(employee_id, service.local_time().date())


# ── Reporting ──────────────────────────────────────────────────────
@router.get("/status-board", response_model=StatusBoardResponse)
async def status_board(
    on: date | None = Query(default=None, alias="date"),
    service: ClockService = Depends(get_clock_service),
    _user: User = Depends(get_current_active_user),
) -> StatusBoardResponse:
    """Who is in, on break, out, on leave or absent on a given day."""
    day = on or service.local_time().date()
    board = await service.status_board(day)
    return StatusBoardResponse(date=day, total_employees=len(board), employees=board)


@router.get("/entries", response_model=list[TimeEntryRead])
async def list_entries(
    employee_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    status: str | None = None,
    limit: int = Query(default=100, le=1000),
    stores: Stores = Depends(get_stores),
    _user: User = Depends(get_current_active_user),
) -> list[TimeEntry]:
    return await stores.entries.find(
        employee_id=employee_id,
        start=start_date,
        end=end_date,
        statuses=[status] if status else None,
        limit=limit,
    )


@router.get("/entries/{entry_id}", response_model=TimeEntryRead)
async def get_entry(
    entry_id: int,
    stores: Stores = Depends(get_stores),
    _user: User = Depends(get_current_active_user),
) -> TimeEntry:
    entry = await stores.entries.get(entry_id)
    if entry is None:
        raise NotFoundError(f"Time entry {entry_id} not found")
    return entry


# ── Corrections ────────────────────────────────────────────────────
@router.post("/entries/manual", response_model=ClockInResponse, status_code=201)
async def create_manual_entry(
    body: ManualEntryCreate,
    service: ClockService = Depends(get_clock_service),
    manager: User = Depends(require_manager),
) -> ClockInResponse:
    """Back-fill a forgotten clock-in (and optionally its clock-out)."""
    result = await service.record_manual_entry(
        body.employee_id,
        on=body.date,
        clock_in=body.clock_in,
        clock_out=body.clock_out,
        breaks=[BreakInput(b.start_time, b.end_time, b.type) for b in body.breaks],
        location=body.location,
        work_type=body.work_type,
        notes=body.notes,
        created_by=manager.id,
    )
    return _clock_in_response(result)


@router.put("/entries/{entry_id}", response_model=TimeEntryRead)
async def update_entry(
    entry_id: int,
    body: TimeEntryUpdate,
    service: ClockService = Depends(get_clock_service),
    _manager: User = Depends(require_manager),
) -> TimeEntry:
    return await service.update_entry(entry_id, body.model_dump(exclude_unset=True))


@router.post("/entries/{entry_id}/breaks", response_model=TimeEntryRead, status_code=201)
async def add_break(
    entry_id: int,
    body: BreakCreate,
    service: ClockService = Depends(get_clock_service),
    _manager: User = Depends(require_manager),
) -> TimeEntry:
    return await service.add_break(entry_id, BreakInput(body.start_time, body.end_time, body.type))


@router.delete("/entries/{entry_id}", response_model=DeleteResponse)
async def delete_entry(
    entry_id: int,
    service: ClockService = Depends(get_clock_service),
    _manager: User = Depends(require_manager),
) -> DeleteResponse:
    """Delete a time entry; its shift goes back to Scheduled."""
    await service.delete_entry(entry_id)
    return DeleteResponse(success=True, message=f"Time entry {entry_id} deleted")


# ── On behalf of an employee ───────────────────────────────────────
@router.post("/{employee_id}/in", response_model=ClockInResponse, status_code=201)
async def clock_in_employee(
    employee_id: int,
    body: ClockInRequest,
    service: ClockService = Depends(get_clock_service),
    manager: User = Depends(require_manager),
) -> ClockInResponse:
    result = await service.clock_in(
        employee_id,
        at=body.at,
        location=body.location,
        work_type=body.work_type,
        gps=_gps(body.gps),
        notes=body.notes,
        created_by=manager.id,
    )
    return _clock_in_response(result)


@router.post("/{employee_id}/out", response_model=TimeEntryRead)
async def clock_out_employee(
    employee_id: int,
    body: ClockOutRequest,
    service: ClockService = Depends(get_clock_service),
    _manager: User = Depends(require_manager),
) -> TimeEntry:
    return await service.clock_out(employee_id, at=body.at, gps=_gps(body.gps))


@router.post("/{employee_id}/break/start", response_model=TimeEntryRead)
async def start_break_employee(
    employee_id: int,
    body: BreakStartRequest,
    service: ClockService = Depends(get_clock_service),
    _manager: User = Depends(require_manager),
) -> TimeEntry:
    return await service.start_break(employee_id, at=body.at, break_type=body.type)


@router.post("/{employee_id}/break/end", response_model=TimeEntryRead)
async def end_break_employee(
    employee_id: int,
    body: BreakEndRequest,
    service: ClockService = Depends(get_clock_service),
    _manager: User = Depends(require_manager),
) -> TimeEntry:
    return await service.end_break(employee_id, at=body.at)
