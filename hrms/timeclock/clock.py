"""
Clock-in / break / clock-out orchestration.

Each operation reads and validates first, then writes the time entry and
lets the synchronizer update the matched shift in the same unit of work,
committing once at the end.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError

from hrms.core.enums import (AttendanceStatus, BreakType, EntryStatus,
                             ShiftLocation, WorkType)
from hrms.core.exceptions import (ConflictError, NotFoundError, StateError,
                                  ValidationError)
from hrms.models.employee import Employee
from hrms.models.shift_assignment import ShiftAssignment
from hrms.models.time_entry import TimeEntry
from hrms.stores.container import Stores
from hrms.timeclock.hours import scheduled_hours, summarize_entry
from hrms.timeclock.intervals import duration, to_minutes
from hrms.timeclock.matcher import match_shift
from hrms.timeclock.synchronizer import ShiftEvent, ShiftSynchronizer
from hrms.timeclock.validator import (AttendancePolicy, ClockInDecision,
                                      classify_clock_in)

logger = logging.getLogger(__name__)

_REQUIRED_ENTRY_FIELDS = ("clock_in", "location", "work_type")


# ── Local time ──────────────────────────────────────────────────────
def parse_offset(tz_offset: str) -> timezone:
    """``"+05:30"`` -> a fixed-offset tzinfo."""
    sign = 1 if tz_offset[0] == "+" else -1
    parts = tz_offset[1:].split(":")
    hours = int(parts[0])
    minutes = int(parts[1]) if len(parts) > 1 else 0
    return timezone(timedelta(hours=sign * hours, minutes=sign * minutes))


# ── Value objects ───────────────────────────────────────────────────
@dataclass(frozen=True)
class GpsFix:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class BreakInput:
    start_time: str
    end_time: str
    type: str = BreakType.OTHER.value


@dataclass(frozen=True)
class ClockInResult:
    entry: TimeEntry
    shift: Optional[ShiftAssignment]
    decision: ClockInDecision


def _hhmm(at: datetime) -> str:
    return at.strftime("%H:%M")


def _gps_fields(gps: GpsFix | None, suffix: str = "") -> dict:
    if gps is None:
        return {}
    return {
        f"gps_latitude{suffix}": gps.latitude,
        f"gps_longitude{suffix}": gps.longitude,
        f"gps_accuracy{suffix}": gps.accuracy,
    }


class ClockService:
    def __init__(
        self,
        stores: Stores,
        policy: AttendancePolicy | None = None,
        tz: timezone = timezone.utc,
    ) -> None:
        self._stores = stores
        self._policy = policy or AttendancePolicy()
        self._tz = tz
        self._sync = ShiftSynchronizer(stores.shifts)

    def local_time(self, at: datetime | None = None) -> datetime:
        """*at* (or now) in the organisation's local time; naive values are taken as local."""
        if at is None:
            return datetime.now(self._tz)
        if at.tzinfo is None:
            return at.replace(tzinfo=self._tz)
        return at.astimezone(self._tz)

    # ── lookups ────────────────────────────────────────────────────
    async def _require_employee(self, employee_id: int) -> Employee:
        employee = await self._stores.employees.find_employee(employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        if not employee.is_active:
            raise ValidationError(f"Employee {employee_id} is deactivated")
        return employee

    async def _require_entry(self, entry_id: int) -> TimeEntry:
        entry = await self._stores.entries.get(entry_id)
        if entry is None:
            raise NotFoundError(f"Time entry {entry_id} not found")
        return entry

    async def _require_active_entry(self, employee_id: int) -> TimeEntry:
        entry = await self._stores.entries.find_active(employee_id)
        if entry is None:
            raise StateError("No active clock-in found for this employee")
        return entry

    async def _reject_if_active(self, employee_id: int) -> None:
        existing = await self._stores.entries.find_active(employee_id)
        if existing is not None:
            raise ConflictError(
                "Employee is already clocked in",
                conflicts=[
                    {
                        "time_entry_id": existing.id,
                        "date": existing.date.isoformat(),
                        "clock_in": existing.clock_in,
                        "status": existing.status,
                    }
                ],
            )

    def _moment(self, on: date, hhmm: str) -> datetime:
        minutes = to_minutes(hhmm)
        return datetime.combine(on, time(minutes // 60, minutes % 60), tzinfo=self._tz)

    async def _create_entry(self, fields: dict) -> TimeEntry:
        try:
            return await self._stores.entries.create(**fields)
        except IntegrityError:
            # Lost the race against a concurrent clock-in for the same employee.
            await self._stores.rollback()
            logger.warning("Concurrent clock-in rejected for employee %s", fields["employee_id"])
            raise ConflictError("Employee is already clocked in") from None

    def _entry_fields(
        self,
        employee_id: int,
        on: date,
        clock_in: str,
        shift: ShiftAssignment | None,
        decision: ClockInDecision,
        location: str | None,
        work_type: str | None,
    ) -> dict:
        return {
            "employee_id": employee_id,
            "date": on,
            "clock_in": clock_in,
            "location": location or (shift.location if shift else ShiftLocation.OFFICE.value),
            "work_type": work_type or (shift.work_type if shift else WorkType.REGULAR.value),
            "shift_id": shift.id if shift else None,
            "attendance_status": decision.status.value,
            "scheduled_hours": round(scheduled_hours(shift), 2),
            "variance": None,
        }

    # ── live clock events ──────────────────────────────────────────
    async def clock_in(
        self,
        employee_id: int,
        *,
        at: datetime | None = None,
        location: str | None = None,
        work_type: str | None = None,
        gps: GpsFix | None = None,
        notes: str | None = None,
        created_by: int | None = None,
    ) -> ClockInResult:
        at = self.local_time(at)
        await self._require_employee(employee_id)
        await self._reject_if_active(employee_id)

        clock_in = _hhmm(at)
        shift = await match_shift(self._stores.shifts, employee_id, at.date(), clock_in, location)
        decision = classify_clock_in(clock_in, shift, self._policy)

        fields = self._entry_fields(employee_id, at.date(), clock_in, shift, decision, location, work_type)
        fields.update(
            status=EntryStatus.CLOCKED_IN.value,
            notes=notes,
            created_by=created_by,
            **_gps_fields(gps),
        )
        entry = await self._create_entry(fields)

        if shift is not None:
            await self._sync.sync(entry, ShiftEvent.CLOCK_IN, at)
        await self._stores.commit()
        logger.info(
            "Employee %s clocked in at %s (%s, shift %s)",
            employee_id,
            clock_in,
            decision.status.value,
            entry.shift_id,
        )
        return ClockInResult(entry=entry, shift=shift, decision=decision)

    async def start_break(
        self,
        employee_id: int,
        *,
        at: datetime | None = None,
        break_type: str = BreakType.OTHER.value,
    ) -> TimeEntry:
        at = self.local_time(at)
        await self._require_employee(employee_id)
        entry = await self._require_active_entry(employee_id)
        if entry.status != EntryStatus.CLOCKED_IN.value:
            raise StateError("Employee is already on a break")

        await self._stores.entries.add_break(
            entry, start_time=_hhmm(at), end_time=None, duration=0, type=break_type
        )
        await self._stores.entries.update(entry, {"status": EntryStatus.ON_BREAK.value})
        await self._sync.sync(entry, ShiftEvent.BREAK_START, at)
        await self._stores.commit()
        logger.info("Employee %s started a %s break at %s", employee_id, break_type, _hhmm(at))
        return entry

    async def end_break(self, employee_id: int, *, at: datetime | None = None) -> TimeEntry:
        at = self.local_time(at)
        await self._require_employee(employee_id)
        entry = await self._require_active_entry(employee_id)
        if entry.status != EntryStatus.ON_BREAK.value:
            raise StateError("Employee is not on a break")
        open_break = entry.open_break
        if open_break is None:
            raise StateError(f"Time entry {entry.id} is on break but has no open break")

        end = _hhmm(at)
        open_break.end_time = end
        open_break.duration = duration(open_break.start_time, end)
        await self._stores.entries.update(entry, {"status": EntryStatus.CLOCKED_IN.value})
        await self._sync.sync(entry, ShiftEvent.BREAK_END, at)
        await self._stores.commit()
        logger.info(
            "Employee %s resumed at %s after %d minute break",
            employee_id,
            end,
            open_break.duration,
        )
        return entry

    async def clock_out(
        self,
        employee_id: int,
        *,
        at: datetime | None = None,
        gps: GpsFix | None = None,
    ) -> TimeEntry:
        at = self.local_time(at)
        await self._require_employee(employee_id)
        entry = await self._require_active_entry(employee_id)

        clock_out = _hhmm(at)
        open_break = entry.open_break
        if open_break is not None:
            open_break.end_time = clock_out
            open_break.duration = duration(open_break.start_time, clock_out)

        entry.clock_out = clock_out
        entry.status = EntryStatus.CLOCKED_OUT.value
        for field, value in _gps_fields(gps, "_out").items():
            setattr(entry, field, value)
        summarize_entry(entry)
        await self._stores.entries.update(entry, {})

        await self._sync.sync(entry, ShiftEvent.CLOCK_OUT, at)
        await self._stores.commit()
        logger.info(
            "Employee %s clocked out at %s (%.2fh worked)",
            employee_id,
            clock_out,
            entry.hours_worked,
        )
        return entry

    # ── administrative edits ───────────────────────────────────────
    async def record_manual_entry(
        self,
        employee_id: int,
        *,
        on: date,
        clock_in: str,
        clock_out: str | None = None,
        breaks: Iterable[BreakInput] = (),
        location: str | None = None,
        work_type: str | None = None,
        notes: str | None = None,
        created_by: int | None = None,
    ) -> ClockInResult:
        """Back-fill a session the employee forgot to clock."""
        breaks = list(breaks)
        to_minutes(clock_in)
        if clock_out is not None:
            to_minutes(clock_out)
        for item in breaks:
            to_minutes(item.start_time)
            to_minutes(item.end_time)

        await self._require_employee(employee_id)
        if clock_out is None:
            await self._reject_if_active(employee_id)

        shift = await match_shift(self._stores.shifts, employee_id, on, clock_in, location)
        decision = classify_clock_in(clock_in, shift, self._policy)

        fields = self._entry_fields(employee_id, on, clock_in, shift, decision, location, work_type)
        fields.update(
            # A closed session never occupies the one active slot per employee.
            status=EntryStatus.CLOCKED_OUT.value if clock_out else EntryStatus.CLOCKED_IN.value,
            clock_out=clock_out,
            notes=notes,
            created_by=created_by,
            is_manual_entry=True,
        )
        entry = await self._create_entry(fields)
        for item in breaks:
            await self._stores.entries.add_break(
                entry,
                start_time=item.start_time,
                end_time=item.end_time,
                duration=duration(item.start_time, item.end_time),
                type=item.type,
            )
        summarize_entry(entry)
        await self._stores.entries.update(entry, {})

        started = self._moment(on, clock_in)
        if shift is not None:
            await self._sync.sync(entry, ShiftEvent.CLOCK_IN, started)

        if clock_out is not None:
            finished = started + timedelta(minutes=duration(clock_in, clock_out))
            await self._sync.sync(entry, ShiftEvent.CLOCK_OUT, finished)

        await self._stores.commit()
        logger.info("Manual time entry %s recorded for employee %s", entry.id, employee_id)
        return ClockInResult(entry=entry, shift=shift, decision=decision)

    async def update_entry(self, entry_id: int, patch: dict) -> TimeEntry:
        entry = await self._require_entry(entry_id)
        cleared = [key for key in _REQUIRED_ENTRY_FIELDS if key in patch and patch[key] is None]
        if cleared:
            raise ValidationError(f"{', '.join(cleared)} cannot be cleared")
        for key in ("clock_in", "clock_out"):
            if patch.get(key) is not None:
                to_minutes(patch[key])
        if "clock_out" in patch and entry.status != EntryStatus.CLOCKED_OUT.value:
            raise StateError("Entry is still active; clock the employee out instead")
        if "clock_out" in patch and patch["clock_out"] is None:
            raise ValidationError("clock_out cannot be cleared on a closed entry")

        await self._stores.entries.update(entry, patch)

        if "clock_in" in patch:
            shift = await self._stores.shifts.get(entry.shift_id) if entry.shift_id else None
            entry.attendance_status = classify_clock_in(entry.clock_in, shift, self._policy).status.value
        summarize_entry(entry)
        await self._stores.entries.update(entry, {})
        await self._stores.commit()
        logger.info("Time entry %s updated: %s", entry_id, sorted(patch))
        return entry

    async def add_break(self, entry_id: int, item: BreakInput) -> TimeEntry:
        to_minutes(item.start_time)
        to_minutes(item.end_time)
        entry = await self._require_entry(entry_id)
        await self._stores.entries.add_break(
            entry,
            start_time=item.start_time,
            end_time=item.end_time,
            duration=duration(item.start_time, item.end_time),
            type=item.type,
        )
        summarize_entry(entry)
        await self._stores.entries.update(entry, {})
        await self._stores.commit()
        logger.info("Break %s-%s added to time entry %s", item.start_time, item.end_time, entry_id)
        return entry

    async def delete_entry(self, entry_id: int, *, at: datetime | None = None) -> None:
        """Delete an entry and revert whichever shift it was driving."""
        entry = await self._require_entry(entry_id)
        await self._sync.sync(entry, ShiftEvent.ENTRY_DELETED, self.local_time(at))
        await self._stores.entries.delete(entry)
        await self._stores.commit()
        logger.info("Time entry %s deleted (employee %s)", entry_id, entry.employee_id)

    # ── read models ────────────────────────────────────────────────
    async def current_status(self, employee_id: int, on: date) -> dict:
        entry = await self._stores.entries.find_active(employee_id)
        if entry is None:
            todays = await self._stores.entries.find(employee_id=employee_id, start=on, end=on, limit=1)
            entry = todays[0] if todays else None
        if entry is None:
            leave = await self._stores.leave.find_approved_leave(employee_id, on)
            return {
                "employee_id": employee_id,
                "status": "on_leave" if leave else "not_clocked_in",
                "time_entry": None,
            }
        return {"employee_id": employee_id, "status": entry.status, "time_entry": entry}

    async def status_board(self, on: date) -> list[dict]:
        """Every active employee's clock status for *on*.

        Employees with no entry are ``on_leave`` when an approved leave
        covers the date, otherwise ``absent``.
        """
        employees = await self._stores.employees.list_active()
        entries = await self._stores.entries.find(start=on, end=on)
        on_leave = await self._stores.leave.employees_on_leave(on)

        latest: dict[int, TimeEntry] = {}
        for entry in entries:  # newest first
            latest.setdefault(entry.employee_id, entry)

        board = []
        for employee in employees:
            entry = latest.get(employee.id)
            if entry is not None:
                status = entry.status
            elif employee.id in on_leave:
                status = "on_leave"
            else:
                status = "absent"
            board.append(
                {
                    "employee_id": employee.id,
                    "name": employee.full_name,
                    "department": employee.department,
                    "status": status,
                    "clock_in": entry.clock_in if entry else None,
                    "clock_out": entry.clock_out if entry else None,
                    "location": entry.location if entry else None,
                    "attendance_status": entry.attendance_status if entry else None,
                    "shift_id": entry.shift_id if entry else None,
                }
            )
        return board
