"""
Find the shift assignment a clock event belongs to.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Optional

from hrms.core.enums import INACTIVE_SHIFT_STATUSES
from hrms.models.shift_assignment import ShiftAssignment
from hrms.stores.shifts import ShiftAssignmentStore
from hrms.timeclock.intervals import distance_to_interval, to_minutes


def select_current_shift(
    candidates: Sequence[ShiftAssignment],
    observed: str,
    location: str | None = None,
) -> Optional[ShiftAssignment]:
    """Pick the candidate nearest *observed*, earliest start on a tie.

    A location hint narrows the field only when some candidate matches it.
    """
    live = [s for s in candidates if s.status not in INACTIVE_SHIFT_STATUSES]
    if location:
        at_location = [s for s in live if s.location == location]
        live = at_location or live
    if not live:
        return None
    return min(
        live,
        key=lambda s: (
            distance_to_interval(observed, s.start_time, s.end_time),
            to_minutes(s.start_time),
            s.id or 0,
        ),
    )


async def match_shift(
    shifts: ShiftAssignmentStore,
    employee_id: int,
    on: date,
    observed: str,
    location: str | None = None,
) -> Optional[ShiftAssignment]:
    candidates = await shifts.find(
        employee_id=employee_id,
        start=on,
        exclude_statuses=INACTIVE_SHIFT_STATUSES,
    )
    return select_current_shift(candidates, observed, location)
