"""
Keeps a shift assignment's status in lockstep with its linked time entry.

    Scheduled ──clock in──▶ In Progress ──break start──▶ On Break
                               ▲  │                        │
                               │  └──────clock out──┐      │
                               └────break end───────┼──────┘
                                                    ▼
                                                Completed

Deleting the linked time entry reverts the shift to Scheduled. This module
is the only writer of shift status in response to clock events. Its async
side is best-effort: the time entry is the source of truth for the
employee-facing action, so a missing shift or a refused transition is
logged and the clock event still succeeds.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError

from hrms.core.enums import EntryStatus, ShiftStatus
from hrms.core.exceptions import StateError
from hrms.models.shift_assignment import ShiftAssignment
from hrms.models.time_entry import TimeEntry
from hrms.stores.shifts import ShiftAssignmentStore

logger = logging.getLogger(__name__)


class ShiftEvent(str, Enum):
    CLOCK_IN = "clock_in"
    BREAK_START = "break_start"
    BREAK_END = "break_end"
    CLOCK_OUT = "clock_out"
    ENTRY_DELETED = "entry_deleted"


_LINKED_STATUSES = (
    ShiftStatus.IN_PROGRESS.value,
    ShiftStatus.ON_BREAK.value,
    ShiftStatus.COMPLETED.value,
)

TRANSITIONS: dict[ShiftEvent, tuple[tuple[str, ...], ShiftStatus]] = {
    ShiftEvent.CLOCK_IN: ((ShiftStatus.SCHEDULED.value,), ShiftStatus.IN_PROGRESS),
    ShiftEvent.BREAK_START: ((ShiftStatus.IN_PROGRESS.value,), ShiftStatus.ON_BREAK),
    ShiftEvent.BREAK_END: ((ShiftStatus.ON_BREAK.value,), ShiftStatus.IN_PROGRESS),
    ShiftEvent.CLOCK_OUT: (
        (ShiftStatus.IN_PROGRESS.value, ShiftStatus.ON_BREAK.value),
        ShiftStatus.COMPLETED,
    ),
    ShiftEvent.ENTRY_DELETED: (_LINKED_STATUSES, ShiftStatus.SCHEDULED),
}

# Shift status implied by each entry status while the two are linked.
SHIFT_STATUS_FOR_ENTRY = {
    EntryStatus.CLOCKED_IN.value: ShiftStatus.IN_PROGRESS,
    EntryStatus.ON_BREAK.value: ShiftStatus.ON_BREAK,
    EntryStatus.CLOCKED_OUT.value: ShiftStatus.COMPLETED,
}


def is_in_sync(shift: ShiftAssignment, entry: TimeEntry | None) -> bool:
    """True when the shift's status is the one its linked entry implies."""
    if entry is None or shift.time_entry_id != entry.id:
        return shift.status not in _LINKED_STATUSES
    return shift.status == SHIFT_STATUS_FOR_ENTRY[entry.status].value


def transition(current: str, event: ShiftEvent) -> ShiftStatus:
    """Next status for *event*, or StateError when *current* does not allow it."""
    allowed, target = TRANSITIONS[event]
    if current not in allowed:
        raise StateError(
            f"Cannot apply {event.value} to a shift that is {current}"
        )
    return target


def apply_event(
    shift: ShiftAssignment,
    entry: TimeEntry,
    event: ShiftEvent,
    now: datetime,
) -> None:
    """Mutate *shift* for *event* on *entry*. Raises StateError when refused."""
    if event is ShiftEvent.CLOCK_IN:
        shift.status = transition(shift.status, event).value
        shift.actual_start_time = now
        shift.actual_end_time = None
        shift.time_entry_id = entry.id
        return

    if shift.time_entry_id != entry.id:
        raise StateError(
            f"Shift {shift.id} is linked to entry {shift.time_entry_id}, not {entry.id}"
        )

    shift.status = transition(shift.status, event).value
    if event is ShiftEvent.CLOCK_OUT:
        shift.actual_end_time = now
    elif event is ShiftEvent.ENTRY_DELETED:
        shift.actual_start_time = None
        shift.actual_end_time = None
        shift.time_entry_id = None


class ShiftSynchronizer:
    def __init__(self, shifts: ShiftAssignmentStore) -> None:
        self._shifts = shifts

    async def _linked_shift(self, entry: TimeEntry, event: ShiftEvent) -> ShiftAssignment | None:
        if event is ShiftEvent.ENTRY_DELETED:
            # Follow the back-reference first; the entry's own pointer may be stale.
            shift = await self._shifts.find_by_time_entry(entry.id)
            if shift is not None:
                return shift
        if entry.shift_id is None:
            return None
        return await self._shifts.get(entry.shift_id)

    async def sync(self, entry: TimeEntry, event: ShiftEvent, now: datetime) -> ShiftAssignment | None:
        """Apply *event* to the entry's shift; returns the shift when it changed."""
        shift = await self._linked_shift(entry, event)
        if shift is None:
            if entry.shift_id is not None:
                logger.warning(
                    "Shift %s for time entry %s not found; skipping %s",
                    entry.shift_id,
                    entry.id,
                    event.value,
                )
            return None

        shift_id = shift.id
        try:
            async with self._shifts.savepoint():
                apply_event(shift, entry, event, now)
                await self._shifts.update(shift, {})
        except StateError as exc:
            logger.warning("Shift %s not synchronized: %s", shift_id, exc.message)
            return None
        except SQLAlchemyError:
            logger.exception(
                "Shift %s not synchronized: failed to save %s for entry %s",
                shift_id,
                event.value,
                entry.id,
            )
            return None

        logger.info(
            "Shift %s -> %s (%s, entry %s)", shift.id, shift.status, event.value, entry.id
        )
        return shift
