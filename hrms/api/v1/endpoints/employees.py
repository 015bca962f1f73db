"""
Employee directory endpoints.

- GET operations require any authenticated user.
- POST / PUT / DELETE operations require admin role.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from hrms.api.v1.deps import get_current_active_user, get_stores, require_admin
from hrms.models.employee import Employee
from hrms.models.user import User
from hrms.schemas.common import DeleteResponse
from hrms.schemas.employee import EmployeeCreate, EmployeeRead, EmployeeUpdate
from hrms.stores.container import Stores

router = APIRouter(tags=["employees"])
logger = logging.getLogger(__name__)


async def _email_taken(stores: Stores, email: str | None, exclude_id: int | None = None) -> bool:
    if not email:
        return False
    existing = await stores.employees.find_by_email(email)
    return existing is not None and existing.id != exclude_id


@router.get("/employees", response_model=list[EmployeeRead])
async def list_employees(
    skip: int = 0,
    limit: int = Query(default=50, le=500),
    search: str | None = None,
    department: str | None = None,
    stores: Stores = Depends(get_stores),
    _user: User = Depends(get_current_active_user),
) -> list[Employee]:
    return await stores.employees.list(
        skip=skip, limit=limit, search=search, department=department
    )


@router.post("/employees", response_model=EmployeeRead, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    stores: Stores = Depends(get_stores),
    _admin: User = Depends(require_admin),
) -> Employee:
    if await _email_taken(stores, body.email):
        raise HTTPException(status_code=400, detail=f"Email '{body.email}' already registered")

    employee = await stores.employees.create(**body.model_dump())
    await stores.commit()
    logger.info("Created employee %d (%s)", employee.id, employee.full_name)
    return employee


@router.get("/employees/{employee_id}", response_model=EmployeeRead)
async def get_employee(
    employee_id: int,
    stores: Stores = Depends(get_stores),
    _user: User = Depends(get_current_active_user),
) -> Employee:
    emp = await stores.employees.find_employee(employee_id, active_only=True)
    if emp is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    return emp


@router.put("/employees/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: int,
    body: EmployeeUpdate,
    stores: Stores = Depends(get_stores),
    _admin: User = Depends(require_admin),
) -> Employee:
    emp = await stores.employees.find_employee(employee_id)
    if emp is None:
        raise HTTPException(status_code=404, detail="Employee not found")

    patch = body.model_dump(exclude_unset=True)
    if await _email_taken(stores, patch.get("email"), exclude_id=emp.id):
        raise HTTPException(status_code=400, detail=f"Email '{patch['email']}' already registered")

    await stores.employees.update(emp, patch)
    await stores.commit()
    logger.info("Updated employee %d", employee_id)
    return emp


@router.delete("/employees/{employee_id}", response_model=DeleteResponse)
async def delete_employee(
    employee_id: int,
    stores: Stores = Depends(get_stores),
    _admin: User = Depends(require_admin),
) -> DeleteResponse:
    """Soft-delete (deactivate) an employee. Shift and time entry history is preserved."""
    emp = await stores.employees.find_employee(employee_id)
    if emp is None:
        raise HTTPException(status_code=404, detail="Employee not found")

    await stores.employees.update(emp, {"is_active": False})
    await stores.commit()
    logger.info("Soft-deleted employee %d (%s)", employee_id, emp.full_name)
    return DeleteResponse(success=True, message=f"Employee '{emp.full_name}' deactivated")
