"""
Worked / scheduled hours and variance.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from hrms.core.enums import EntryStatus
from hrms.timeclock.intervals import duration


def scheduled_hours(shift) -> float:
    """Length of the shift in hours; the shift's break_duration is not deducted."""
    if shift is None:
        return 0.0
    return duration(shift.start_time, shift.end_time) / 60


def break_minutes(breaks: Iterable) -> int:
    return sum(b.duration or 0 for b in breaks)


def hours_worked(clock_in: str, clock_out: str, breaks: Iterable = ()) -> float:
    """Clock-in to clock-out less every break's duration, never negative."""
    minutes = duration(clock_in, clock_out) - break_minutes(breaks)
    return max(0.0, minutes / 60)


def variance(worked: float, scheduled: Optional[float]) -> Optional[float]:
    """Positive is overtime, negative is under-worked, None when nothing was scheduled."""
    if not scheduled:
        return None
    return worked - scheduled


def summarize_entry(entry) -> None:
    """Recompute an entry's derived hour fields in place."""
    if entry.clock_out is None or entry.status != EntryStatus.CLOCKED_OUT.value:
        entry.hours_worked = 0.0
        entry.total_hours = 0.0
        entry.variance = None
        return

    worked = hours_worked(entry.clock_in, entry.clock_out, entry.breaks)
    entry.hours_worked = round(worked, 2)
    entry.total_hours = entry.hours_worked
    diff = variance(worked, entry.scheduled_hours)
    entry.variance = round(diff, 2) if diff is not None else None
