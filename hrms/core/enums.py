"""
Status vocabularies shared by models, schemas and the timeclock core.

Columns store the ``.value`` strings; always compare through ``.value``
(or an Enum constructed from the column) rather than mixing members into
sets keyed by raw strings.
"""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class ShiftStatus(str, Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    ON_BREAK = "On Break"
    COMPLETED = "Completed"
    MISSED = "Missed"
    CANCELLED = "Cancelled"
    SWAPPED = "Swapped"


# Assignments in these states never count for matching or conflicts.
INACTIVE_SHIFT_STATUSES = (ShiftStatus.CANCELLED.value, ShiftStatus.SWAPPED.value)

# States an administrator may set directly; the rest belong to the synchronizer.
ADMIN_SHIFT_STATUSES = (
    ShiftStatus.SCHEDULED.value,
    ShiftStatus.MISSED.value,
    ShiftStatus.CANCELLED.value,
    ShiftStatus.SWAPPED.value,
)


class ShiftLocation(str, Enum):
    OFFICE = "Office"
    HOME = "Home"
    FIELD = "Field"
    CLIENT_SITE = "Client Site"


class WorkType(str, Enum):
    REGULAR = "Regular"
    OVERTIME = "Overtime"
    WEEKEND_OVERTIME = "Weekend Overtime"
    CLIENT_SIDE_OVERTIME = "Client-side Overtime"


class SwapStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class EntryStatus(str, Enum):
    CLOCKED_IN = "clocked_in"
    ON_BREAK = "on_break"
    CLOCKED_OUT = "clocked_out"


ACTIVE_ENTRY_STATUSES = (EntryStatus.CLOCKED_IN.value, EntryStatus.ON_BREAK.value)


class AttendanceStatus(str, Enum):
    ON_TIME = "On Time"
    LATE = "Late"
    EARLY = "Early"
    UNSCHEDULED = "Unscheduled"


class BreakType(str, Enum):
    LUNCH = "lunch"
    COFFEE = "coffee"
    OTHER = "other"


class LeaveType(str, Enum):
    ANNUAL = "Annual"
    SICK = "Sick"
    UNPAID = "Unpaid"
    OTHER = "Other"


class LeaveStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
