"""
Shift assignment endpoints — the rota.

- GET operations require any authenticated user.
- Scheduling, edits, deletes and swap reviews require a manager or admin.
- Swap requests may come from any user: managers on anyone's behalf,
  employees only for their own shifts.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from hrms.api.v1.deps import (get_assignment_service, get_current_active_user,
                              get_stores, require_manager)
from hrms.core.enums import UserRole
from hrms.core.exceptions import NotFoundError
from hrms.models.shift_assignment import ShiftAssignment
from hrms.models.user import User
from hrms.schemas.common import DeleteResponse
from hrms.schemas.shift import (ShiftAssignmentBulkCreate,
                                ShiftAssignmentCreate, ShiftAssignmentRead,
                                ShiftAssignmentUpdate, ShiftStatistics,
                                SwapRequest, SwapReview)
from hrms.stores.container import Stores
from hrms.timeclock.assignments import AssignmentService

router = APIRouter(prefix="/shifts", tags=["shifts"])
logger = logging.getLogger(__name__)


@router.post("", response_model=ShiftAssignmentRead, status_code=201)
async def create_shift(
    body: ShiftAssignmentCreate,
    service: AssignmentService = Depends(get_assignment_service),
    manager: User = Depends(require_manager),
) -> ShiftAssignment:
    return await service.create(body.model_dump(), assigned_by=manager.id)


@router.post("/bulk", response_model=list[ShiftAssignmentRead], status_code=201)
async def create_shifts_bulk(
    body: ShiftAssignmentBulkCreate,
    service: AssignmentService = Depends(get_assignment_service),
    manager: User = Depends(require_manager),
) -> list[ShiftAssignment]:
    """Schedule many shifts at once; nothing is saved unless every one is valid."""
    return await service.create_bulk(
        [item.model_dump() for item in body.assignments], assigned_by=manager.id
    )


@router.get("", response_model=list[ShiftAssignmentRead])
async def list_shifts(
    employee_id: int | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    status: str | None = None,
    location: str | None = None,
    stores: Stores = Depends(get_stores),
    _user: User = Depends(get_current_active_user),
) -> list[ShiftAssignment]:
    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    return await stores.shifts.find(
        employee_id=employee_id,
        start=start_date,
        end=end_date or start_date,
        statuses=[status] if status else None,
        location=location,
    )


@router.get("/statistics", response_model=ShiftStatistics)
async def shift_statistics(
    start_date: date = Query(...),
    end_date: date = Query(...),
    service: AssignmentService = Depends(get_assignment_service),
    _user: User = Depends(get_current_active_user),
) -> dict:
    """Assignment counts by status and by location over a date range."""
    return await service.statistics(start_date, end_date)


@router.get("/{shift_id}", response_model=ShiftAssignmentRead)
async def get_shift(
    shift_id: int,
    stores: Stores = Depends(get_stores),
    _user: User = Depends(get_current_active_user),
) -> ShiftAssignment:
    shift = await stores.shifts.get(shift_id)
    if shift is None:
        raise NotFoundError(f"Shift assignment {shift_id} not found")
    return shift


@router.put("/{shift_id}", response_model=ShiftAssignmentRead)
async def update_shift(
    shift_id: int,
    body: ShiftAssignmentUpdate,
    service: AssignmentService = Depends(get_assignment_service),
    _manager: User = Depends(require_manager),
) -> ShiftAssignment:
    return await service.update(shift_id, body.model_dump(exclude_unset=True))


@router.delete("/{shift_id}", response_model=DeleteResponse)
async def delete_shift(
    shift_id: int,
    service: AssignmentService = Depends(get_assignment_service),
    _manager: User = Depends(require_manager),
) -> DeleteResponse:
    await service.delete(shift_id)
    return DeleteResponse(success=True, message=f"Shift assignment {shift_id} deleted")


# ── Swaps ──────────────────────────────────────────────────────────
@router.post("/{shift_id}/swap-request", response_model=ShiftAssignmentRead)
async def request_swap(
    shift_id: int,
    body: SwapRequest,
    stores: Stores = Depends(get_stores),
    service: AssignmentService = Depends(get_assignment_service),
    user: User = Depends(get_current_active_user),
) -> ShiftAssignment:
    if user.role == UserRole.EMPLOYEE.value:
        shift = await stores.shifts.get(shift_id)
        if shift is not None and shift.employee_id != user.employee_id:
            raise HTTPException(status_code=403, detail="You can only swap your own shifts")
    return await service.request_swap(
        shift_id,
        requested_with=body.requested_with,
        requested_by=user.employee_id,
        reason=body.reason,
    )


@router.post("/{shift_id}/swap-review", response_model=ShiftAssignmentRead)
async def review_swap(
    shift_id: int,
    body: SwapReview,
    service: AssignmentService = Depends(get_assignment_service),
    _manager: User = Depends(require_manager),
) -> ShiftAssignment:
    return await service.review_swap(shift_id, approve=body.approve)
