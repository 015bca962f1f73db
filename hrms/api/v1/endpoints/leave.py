"""
Leave endpoints — the minimal record keeping the scheduler and status board read.

Managers file and review leave; anyone signed in may list it.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from hrms.api.v1.deps import get_current_active_user, get_stores, require_manager
from hrms.core.enums import LeaveStatus
from hrms.core.exceptions import NotFoundError, StateError
from hrms.models.leave_record import LeaveRecord
from hrms.models.user import User
from hrms.schemas.leave import LeaveCreate, LeaveRead, LeaveReview
from hrms.stores.container import Stores

router = APIRouter(prefix="/leave", tags=["leave"])
logger = logging.getLogger(__name__)


@router.post("", response_model=LeaveRead, status_code=201)
async def create_leave(
    body: LeaveCreate,
    stores: Stores = Depends(get_stores),
    _manager: User = Depends(require_manager),
) -> LeaveRecord:
    if await stores.employees.find_employee(body.employee_id) is None:
        raise NotFoundError(f"Employee {body.employee_id} not found")
    record = await stores.leave.create(**body.model_dump(), status=LeaveStatus.PENDING.value)
    await stores.commit()
    logger.info(
        "Leave %s filed for employee %s (%s to %s)",
        record.id,
        record.employee_id,
        record.start_date,
        record.end_date,
    )
    return record


@router.get("", response_model=list[LeaveRead])
async def list_leave(
    employee_id: int | None = None,
    status: str | None = None,
    stores: Stores = Depends(get_stores),
    _user: User = Depends(get_current_active_user),
) -> list[LeaveRecord]:
    return await stores.leave.list(employee_id=employee_id, status=status)


@router.post("/{leave_id}/review", response_model=LeaveRead)
async def review_leave(
    leave_id: int,
    body: LeaveReview,
    stores: Stores = Depends(get_stores),
    manager: User = Depends(require_manager),
) -> LeaveRecord:
    """Approve or reject a pending request. Approved leave blocks scheduling."""
    record = await stores.leave.get(leave_id)
    if record is None:
        raise NotFoundError(f"Leave record {leave_id} not found")
    if record.status != LeaveStatus.PENDING.value:
        raise StateError(f"Leave record {leave_id} is already {record.status}")

    record.status = (LeaveStatus.APPROVED if body.approve else LeaveStatus.REJECTED).value
    record.reviewed_by = manager.id
    await stores.session.flush()
    await stores.commit()
    logger.info("Leave %s %s by user %s", leave_id, record.status.lower(), manager.id)
    return record
