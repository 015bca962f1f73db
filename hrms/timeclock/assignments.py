"""
Shift assignment scheduling: create, edit, delete, swap and statistics.

Every write is checked (times, employee, leave, overlaps) before anything
is flushed, so a rejected request leaves the rota untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import Any

from hrms.core.enums import (ADMIN_SHIFT_STATUSES, INACTIVE_SHIFT_STATUSES,
                             ShiftLocation, ShiftStatus, SwapStatus, WorkType)
from hrms.core.exceptions import (ConflictError, HRMSError, NotFoundError,
                                  StateError, ValidationError)
from hrms.models.shift_assignment import ShiftAssignment
from hrms.stores.container import Stores
from hrms.timeclock.conflicts import find_conflicts, overlapping
from hrms.timeclock.intervals import to_minutes

logger = logging.getLogger(__name__)

_TIMING_FIELDS = ("employee_id", "date", "start_time", "end_time")


def _check_times(start_time: str, end_time: str) -> None:
    if to_minutes(start_time) == to_minutes(end_time):
        raise ValidationError("Shift start and end times must differ")


class AssignmentService:
    def __init__(self, stores: Stores) -> None:
        self._stores = stores

    async def _require_shift(self, shift_id: int) -> ShiftAssignment:
        shift = await self._stores.shifts.get(shift_id)
        if shift is None:
            raise NotFoundError(f"Shift assignment {shift_id} not found")
        return shift

    async def _require_employee(self, employee_id: int) -> None:
        employee = await self._stores.employees.find_employee(employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")

    async def _check_leave(self, employee_id: int, on: date) -> None:
        leave = await self._stores.leave.find_approved_leave(employee_id, on)
        if leave is not None:
            raise ValidationError(
                f"Employee {employee_id} is on approved {leave.leave_type} leave on {on.isoformat()}"
            )

    async def _check_slot(
        self,
        employee_id: int,
        on: date,
        start_time: str,
        end_time: str,
        exclude_id: int | None = None,
        pending: Iterable[ShiftAssignment] = (),
    ) -> None:
        """Raise unless *employee_id* can take ``start_time-end_time`` on *on*."""
        _check_times(start_time, end_time)
        await self._require_employee(employee_id)
        await self._check_leave(employee_id, on)

        clashes = await find_conflicts(
            self._stores.shifts, employee_id, on, start_time, end_time, exclude_id
        )
        clashes += overlapping(
            start_time,
            end_time,
            [p for p in pending if p.employee_id == employee_id and p.date == on],
        )
        if clashes:
            raise ConflictError(
                f"Shift {start_time}-{end_time} on {on.isoformat()} overlaps "
                f"{len(clashes)} existing assignment(s) for employee {employee_id}",
                conflicts=[c.describe() for c in clashes],
            )

    @staticmethod
    def _new_fields(item: dict[str, Any], assigned_by: int | None) -> dict[str, Any]:
        return {
            "employee_id": item["employee_id"],
            "date": item["date"],
            "start_time": item["start_time"],
            "end_time": item["end_time"],
            "location": item.get("location") or ShiftLocation.OFFICE.value,
            "work_type": item.get("work_type") or WorkType.REGULAR.value,
            "break_duration": item.get("break_duration") or 0,
            "notes": item.get("notes"),
            "status": ShiftStatus.SCHEDULED.value,
            "assigned_by": assigned_by,
        }

    # ── create ─────────────────────────────────────────────────────
    async def create(self, item: dict[str, Any], assigned_by: int | None = None) -> ShiftAssignment:
        fields = self._new_fields(item, assigned_by)
        await self._check_slot(
            fields["employee_id"], fields["date"], fields["start_time"], fields["end_time"]
        )
        shift = await self._stores.shifts.create(**fields)
        await self._stores.commit()
        logger.info(
            "Shift %s scheduled for employee %s on %s %s-%s",
            shift.id,
            shift.employee_id,
            shift.date,
            shift.start_time,
            shift.end_time,
        )
        return shift

    async def create_bulk(
        self, items: list[dict[str, Any]], assigned_by: int | None = None
    ) -> list[ShiftAssignment]:
        """All-or-nothing: either every item is saved or none is.

        Items are checked against the stored rota and against each other;
        every rejected item is reported, not just the first.
        """
        pending: list[ShiftAssignment] = []
        failures: list[dict[str, Any]] = []
        any_conflict = False

        for index, item in enumerate(items):
            fields = self._new_fields(item, assigned_by)
            try:
                await self._check_slot(
                    fields["employee_id"],
                    fields["date"],
                    fields["start_time"],
                    fields["end_time"],
                    pending=pending,
                )
            except HRMSError as exc:
                failure: dict[str, Any] = {
                    "index": index,
                    "employee_id": fields["employee_id"],
                    "date": fields["date"].isoformat(),
                    "error": type(exc).__name__,
                    "detail": exc.message,
                }
                if isinstance(exc, ConflictError):
                    any_conflict = True
                    failure["conflicts"] = exc.conflicts
                failures.append(failure)
                continue
            pending.append(ShiftAssignment(**fields))

        if failures:
            message = f"{len(failures)} of {len(items)} assignments rejected; nothing was saved"
            logger.info("Bulk schedule rejected: %s", message)
            if any_conflict:
                raise ConflictError(message, errors=failures)
            raise ValidationError(message, errors=failures)

        created = await self._stores.shifts.create_many(pending)
        await self._stores.commit()
        logger.info("Bulk scheduled %d shifts", len(created))
        return created

    # ── update / delete ────────────────────────────────────────────
    async def update(self, shift_id: int, patch: dict[str, Any]) -> ShiftAssignment:
        shift = await self._require_shift(shift_id)

        new_status = patch.get("status")
        if new_status is not None and new_status != shift.status:
            if new_status not in ADMIN_SHIFT_STATUSES:
                raise ValidationError(
                    f"Status {new_status!r} is set by clock events, not by editing the shift"
                )
            if shift.time_entry_id is not None:
                raise StateError(
                    f"Shift {shift.id} is linked to time entry {shift.time_entry_id}; "
                    "delete or edit the entry instead"
                )

        merged = {field: patch.get(field, getattr(shift, field)) for field in _TIMING_FIELDS}
        timing_changed = any(merged[f] != getattr(shift, f) for f in _TIMING_FIELDS)
        reactivated = (
            new_status is not None
            and new_status not in INACTIVE_SHIFT_STATUSES
            and shift.status in INACTIVE_SHIFT_STATUSES
        )
        final_status = new_status if new_status is not None else shift.status
        if final_status in INACTIVE_SHIFT_STATUSES:
            # A cancelled or swapped shift holds no slot on the rota.
            if timing_changed:
                _check_times(merged["start_time"], merged["end_time"])
                await self._require_employee(merged["employee_id"])
        elif timing_changed or reactivated:
            await self._check_slot(
                merged["employee_id"],
                merged["date"],
                merged["start_time"],
                merged["end_time"],
                exclude_id=shift.id,
            )

        await self._stores.shifts.update(shift, patch)
        await self._stores.commit()
        logger.info("Shift %s updated: %s", shift.id, sorted(patch))
        return shift

    async def delete(self, shift_id: int) -> None:
        shift = await self._require_shift(shift_id)
        await self._stores.entries.unlink_shift(shift.id)
        await self._stores.shifts.delete(shift)
        await self._stores.commit()
        logger.info("Shift %s deleted", shift_id)

    # ── swaps ──────────────────────────────────────────────────────
    async def request_swap(
        self,
        shift_id: int,
        requested_with: int,
        requested_by: int | None = None,
        reason: str | None = None,
    ) -> ShiftAssignment:
        shift = await self._require_shift(shift_id)
        if shift.status != ShiftStatus.SCHEDULED.value:
            raise StateError(f"Only scheduled shifts can be swapped; shift is {shift.status}")
        if shift.swap_status == SwapStatus.PENDING.value:
            raise StateError(f"Shift {shift.id} already has a pending swap request")
        if requested_with == shift.employee_id:
            raise ValidationError("Cannot swap a shift with the employee who already holds it")
        await self._require_employee(requested_with)

        await self._stores.shifts.update(
            shift,
            {
                "swap_requested_by": requested_by or shift.employee_id,
                "swap_requested_with": requested_with,
                "swap_status": SwapStatus.PENDING.value,
                "swap_reason": reason,
                "swap_requested_at": datetime.now(timezone.utc),
                "swap_reviewed_at": None,
            },
        )
        await self._stores.commit()
        logger.info("Swap requested for shift %s with employee %s", shift.id, requested_with)
        return shift

    async def review_swap(self, shift_id: int, approve: bool) -> ShiftAssignment:
        shift = await self._require_shift(shift_id)
        if shift.swap_status != SwapStatus.PENDING.value:
            raise StateError(f"Shift {shift.id} has no pending swap request")

        patch: dict[str, Any] = {"swap_reviewed_at": datetime.now(timezone.utc)}
        if approve:
            if shift.status != ShiftStatus.SCHEDULED.value:
                raise StateError(f"Shift {shift.id} is {shift.status} and can no longer be swapped")
            await self._check_slot(
                shift.swap_requested_with, shift.date, shift.start_time, shift.end_time
            )
            patch["employee_id"] = shift.swap_requested_with
            patch["swap_status"] = SwapStatus.APPROVED.value
        else:
            patch["swap_status"] = SwapStatus.REJECTED.value

        await self._stores.shifts.update(shift, patch)
        await self._stores.commit()
        logger.info("Swap for shift %s %s", shift.id, patch["swap_status"].lower())
        return shift

    # ── reporting ──────────────────────────────────────────────────
    async def statistics(self, start: date, end: date) -> dict[str, Any]:
        if end < start:
            raise ValidationError("end_date must not be before start_date")
        by_status = await self._stores.shifts.counts_by("status", start, end)
        by_location = await self._stores.shifts.counts_by("location", start, end)
        return {
            "start_date": start,
            "end_date": end,
            "total": sum(by_status.values()),
            "by_status": by_status,
            "by_location": by_location,
        }
