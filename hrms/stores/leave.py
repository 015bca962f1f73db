"""
Leave record store. The timeclock core only calls ``find_approved_leave``.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.core.enums import LeaveStatus
from hrms.models.leave_record import LeaveRecord


class LeaveRecordStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, leave_id: int) -> LeaveRecord | None:
        result = await self._session.execute(select(LeaveRecord).where(LeaveRecord.id == leave_id))
        return result.scalar_one_or_none()

    async def find_approved_leave(self, employee_id: int, on: date) -> LeaveRecord | None:
        result = await self._session.execute(
            select(LeaveRecord)
            .where(
                LeaveRecord.employee_id == employee_id,
                LeaveRecord.status == LeaveStatus.APPROVED.value,
                LeaveRecord.start_date <= on,
                LeaveRecord.end_date >= on,
            )
            .order_by(LeaveRecord.start_date)
        )
        return result.scalars().first()

    async def employees_on_leave(self, on: date) -> set[int]:
        result = await self._session.execute(
            select(LeaveRecord.employee_id).where(
                LeaveRecord.status == LeaveStatus.APPROVED.value,
                LeaveRecord.start_date <= on,
                LeaveRecord.end_date >= on,
            )
        )
        return set(result.scalars().all())

    async def list(
        self,
        *,
        employee_id: int | None = None,
        status: str | None = None,
    ) -> list[LeaveRecord]:
        query = select(LeaveRecord).order_by(LeaveRecord.start_date.desc())
        if employee_id is not None:
            query = query.where(LeaveRecord.employee_id == employee_id)
        if status:
            query = query.where(LeaveRecord.status == status)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def create(self, **fields) -> LeaveRecord:
        record = LeaveRecord(**fields)
        self._session.add(record)
        await self._session.flush()
        return record
