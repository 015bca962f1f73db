"""
Clock-in classification against a matched shift's start time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from hrms.core.config import settings
from hrms.core.enums import AttendanceStatus
from hrms.models.shift_assignment import ShiftAssignment
from hrms.timeclock.intervals import clock_delta, to_minutes


@dataclass(frozen=True)
class AttendancePolicy:
    """Grace windows around a shift's start.

    Arriving up to ``early_arrival_minutes`` before the start, or up to
    ``late_grace_minutes`` after it (both inclusive), is On Time.
    """

    late_grace_minutes: int = settings.LATE_GRACE_MINUTES
    early_arrival_minutes: int = settings.EARLY_ARRIVAL_MINUTES

    @classmethod
    def from_row(cls, row) -> "AttendancePolicy":
        return cls(
            late_grace_minutes=row.late_grace_minutes,
            early_arrival_minutes=row.early_arrival_minutes,
        )


@dataclass(frozen=True)
class ClockInDecision:
    status: AttendanceStatus
    message: str
    delta_minutes: Optional[int] = None


def _plural(n: int) -> str:
    return f"{n} minute" if n == 1 else f"{n} minutes"


def classify_clock_in(
    clock_in: str,
    shift: Optional[ShiftAssignment],
    policy: AttendancePolicy | None = None,
) -> ClockInDecision:
    policy = policy or AttendancePolicy()
    to_minutes(clock_in)  # reject malformed input even when unscheduled

    if shift is None:
        return ClockInDecision(
            status=AttendanceStatus.UNSCHEDULED,
            message=f"Clocked in at {clock_in} with no shift scheduled today",
        )

    delta = clock_delta(clock_in, shift.start_time)
    if delta > policy.late_grace_minutes:
        return ClockInDecision(
            status=AttendanceStatus.LATE,
            message=f"Clocked in {_plural(delta)} late for the {shift.start_time} shift",
            delta_minutes=delta,
        )
    if delta < -policy.early_arrival_minutes:
        return ClockInDecision(
            status=AttendanceStatus.EARLY,
            message=f"Clocked in {_plural(-delta)} early for the {shift.start_time} shift",
            delta_minutes=delta,
        )
    return ClockInDecision(
        status=AttendanceStatus.ON_TIME,
        message=f"Clocked in on time for the {shift.start_time} shift",
        delta_minutes=delta,
    )
