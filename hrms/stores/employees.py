"""
Employee directory store.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.models.employee import Employee


class EmployeeDirectory:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_employee(self, employee_id: int, *, active_only: bool = False) -> Employee | None:
        query = select(Employee).where(Employee.id == employee_id)
        if active_only:
            query = query.where(Employee.is_active.is_(True))
        result = await self._session.execute(query)
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Employee | None:
        result = await self._session.execute(select(Employee).where(Employee.email == email))
        return result.scalar_one_or_none()

    async def list(
        self,
        *,
        skip: int = 0,
        limit: int = 50,
        search: str | None = None,
        department: str | None = None,
    ) -> list[Employee]:
        query = (
            select(Employee)
            .where(Employee.is_active.is_(True))
            .order_by(Employee.last_name, Employee.first_name)
            .offset(skip)
            .limit(limit)
        )
        if search:
            # Escape SQL LIKE metacharacters to prevent wildcard injection
            safe = search.replace("%", r"\%").replace("_", r"\_")
            pattern = f"%{safe}%"
            query = query.where(
                Employee.first_name.ilike(pattern, escape="\\")
                | Employee.last_name.ilike(pattern, escape="\\")
            )
        if department:
            query = query.where(Employee.department == department)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def list_active(self) -> list[Employee]:
        result = await self._session.execute(
            select(Employee)
            .where(Employee.is_active.is_(True))
            .order_by(Employee.last_name, Employee.first_name)
        )
        return list(result.scalars().all())

    async def create(self, **fields) -> Employee:
        employee = Employee(**fields)
        self._session.add(employee)
        await self._session.flush()
        return employee

    async def update(self, employee: Employee, patch: dict) -> Employee:
        for field, value in patch.items():
            setattr(employee, field, value)
        await self._session.flush()
        return employee
