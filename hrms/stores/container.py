"""
Per-request bundle of stores sharing one AsyncSession (one unit of work).
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from hrms.stores.employees import EmployeeDirectory
from hrms.stores.leave import LeaveRecordStore
from hrms.stores.settings import AttendanceSettingsStore
from hrms.stores.shifts import ShiftAssignmentStore
from hrms.stores.time_entries import TimeEntryStore


@dataclass(frozen=True)
class Stores:
    session: AsyncSession
    employees: EmployeeDirectory
    shifts: ShiftAssignmentStore
    entries: TimeEntryStore
    leave: LeaveRecordStore
    attendance_settings: AttendanceSettingsStore

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


def build_stores(session: AsyncSession) -> Stores:
    return Stores(
        session=session,
        employees=EmployeeDirectory(session),
        shifts=ShiftAssignmentStore(session),
        entries=TimeEntryStore(session),
        leave=LeaveRecordStore(session),
        attendance_settings=AttendanceSettingsStore(session),
    )
