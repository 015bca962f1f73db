"""
Overlapping shift detection for one employee on one calendar date.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from hrms.core.enums import INACTIVE_SHIFT_STATUSES
from hrms.models.shift_assignment import ShiftAssignment
from hrms.stores.shifts import ShiftAssignmentStore
from hrms.timeclock.intervals import overlaps, to_minutes


def overlapping(
    start: str,
    end: str,
    existing: Iterable[ShiftAssignment],
    exclude_id: int | None = None,
) -> list[ShiftAssignment]:
    """Every live assignment in *existing* whose interval overlaps ``[start, end)``."""
    return [
        shift
        for shift in existing
        if shift.status not in INACTIVE_SHIFT_STATUSES
        and (exclude_id is None or shift.id != exclude_id)
        and overlaps(start, end, shift.start_time, shift.end_time)
    ]


async def find_conflicts(
    shifts: ShiftAssignmentStore,
    employee_id: int,
    on: date,
    start: str,
    end: str,
    exclude_id: int | None = None,
) -> list[ShiftAssignment]:
    # Validate before touching the store.
    to_minutes(start)
    to_minutes(end)
    existing = await shifts.find(
        employee_id=employee_id,
        start=on,
        exclude_statuses=INACTIVE_SHIFT_STATUSES,
    )
    return overlapping(start, end, existing, exclude_id)
