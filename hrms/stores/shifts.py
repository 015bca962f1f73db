"""
Shift assignment store.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.models.shift_assignment import ShiftAssignment


class ShiftAssignmentStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, shift_id: int) -> ShiftAssignment | None:
        result = await self._session.execute(
            select(ShiftAssignment).where(ShiftAssignment.id == shift_id)
        )
        return result.scalar_one_or_none()

    async def find(
        self,
        *,
        employee_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
        statuses: Sequence[str] | None = None,
        exclude_statuses: Sequence[str] | None = None,
        location: str | None = None,
    ) -> list[ShiftAssignment]:
        """Assignments filtered by employee, inclusive date range and status.

        Passing only *start* selects that single calendar day.
        """
        query = select(ShiftAssignment)
        if employee_id is not None:
            query = query.where(ShiftAssignment.employee_id == employee_id)
        if start is not None:
            query = query.where(ShiftAssignment.date >= start)
            query = query.where(ShiftAssignment.date <= (end or start))
        elif end is not None:
            query = query.where(ShiftAssignment.date <= end)
        if statuses:
            query = query.where(ShiftAssignment.status.in_(list(statuses)))
        if exclude_statuses:
            query = query.where(ShiftAssignment.status.not_in(list(exclude_statuses)))
        if location:
            query = query.where(ShiftAssignment.location == location)
        query = query.order_by(
            ShiftAssignment.date, ShiftAssignment.start_time, ShiftAssignment.id
        )
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def find_by_time_entry(self, time_entry_id: int) -> ShiftAssignment | None:
        result = await self._session.execute(
            select(ShiftAssignment).where(ShiftAssignment.time_entry_id == time_entry_id)
        )
        return result.scalars().first()

    async def counts_by(self, column_name: str, start: date, end: date) -> dict[str, int]:
        column = getattr(ShiftAssignment, column_name)
        result = await self._session.execute(
            select(column, func.count(ShiftAssignment.id))
            .where(ShiftAssignment.date >= start, ShiftAssignment.date <= end)
            .group_by(column)
        )
        return {key: count for key, count in result.all()}

    async def create(self, **fields) -> ShiftAssignment:
        shift = ShiftAssignment(**fields)
        self._session.add(shift)
        await self._session.flush()
        return shift

    async def create_many(self, shifts: list[ShiftAssignment]) -> list[ShiftAssignment]:
        self._session.add_all(shifts)
        await self._session.flush()
        return shifts

    def savepoint(self):
        """Nested transaction: rolling it back leaves the rest of the unit of work intact."""
        return self._session.begin_nested()

    async def update(self, shift: ShiftAssignment, patch: dict) -> ShiftAssignment:
        for field, value in patch.items():
            setattr(shift, field, value)
        await self._session.flush()
        return shift

    async def delete(self, shift: ShiftAssignment) -> None:
        await self._session.delete(shift)
        await self._session.flush()
