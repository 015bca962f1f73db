"""
Time entry store.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core.enums import ACTIVE_ENTRY_STATUSES
from hrms.models.time_entry import TimeEntry, TimeEntryBreak


class TimeEntryStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, entry_id: int) -> TimeEntry | None:
        result = await self._session.execute(select(TimeEntry).where(TimeEntry.id == entry_id))
        return result.scalar_one_or_none()

    async def find(
        self,
        *,
        employee_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
        statuses: Sequence[str] | None = None,
        limit: int | None = None,
    ) -> list[TimeEntry]:
        query = select(TimeEntry)
        if employee_id is not None:
            query = query.where(TimeEntry.employee_id == employee_id)
        if start is not None:
            query = query.where(TimeEntry.date >= start)
        if end is not None:
            query = query.where(TimeEntry.date <= end)
        if statuses:
            query = query.where(TimeEntry.status.in_(list(statuses)))
        query = query.order_by(TimeEntry.date.desc(), TimeEntry.clock_in.desc(), TimeEntry.id.desc())
        if limit:
            query = query.limit(limit)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def find_active(self, employee_id: int) -> TimeEntry | None:
        """The employee's clocked-in or on-break entry, whatever its date."""
        result = await self._session.execute(
            select(TimeEntry)
            .where(
                TimeEntry.employee_id == employee_id,
                TimeEntry.status.in_(list(ACTIVE_ENTRY_STATUSES)),
            )
            .order_by(TimeEntry.id.desc())
        )
        return result.scalars().first()

    async def create(self, **fields) -> TimeEntry:
        entry = TimeEntry(breaks=[], **fields)
        self._session.add(entry)
        await self._session.flush()
        return entry

    async def add_break(self, entry: TimeEntry, **fields) -> TimeEntryBreak:
        item = TimeEntryBreak(**fields)
        entry.breaks.append(item)
        await self._session.flush()
        return item

    async def update(self, entry: TimeEntry, patch: dict) -> TimeEntry:
        for field, value in patch.items():
            setattr(entry, field, value)
        await self._session.flush()
        return entry

    async def delete(self, entry: TimeEntry) -> None:
        await self._session.delete(entry)
        await self._session.flush()

    async def unlink_shift(self, shift_id: int) -> None:
        """Drop the weak reference from every entry pointing at *shift_id*."""
        await self._session.execute(
            update(TimeEntry).where(TimeEntry.shift_id == shift_id).values(shift_id=None)
        )
