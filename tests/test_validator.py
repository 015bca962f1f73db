"""
Tests for clock-in classification (On Time / Late / Early / Unscheduled).
"""

from types import SimpleNamespace

import pytest

from hrms.core.enums import AttendanceStatus
from hrms.core.exceptions import FormatError
from hrms.timeclock.validator import AttendancePolicy, classify_clock_in


def _shift(start="09:00", end="17:00"):
    return SimpleNamespace(start_time=start, end_time=end)


DEFAULT = AttendancePolicy(late_grace_minutes=5, early_arrival_minutes=15)


def test_unscheduled_when_no_shift():
    decision = classify_clock_in("10:30", None, DEFAULT)
    assert decision.status is AttendanceStatus.UNSCHEDULED
    assert decision.delta_minutes is None
    assert "no shift" in decision.message


def test_twelve_minutes_late():
    decision = classify_clock_in("09:12", _shift(), DEFAULT)
    assert decision.status is AttendanceStatus.LATE
    assert decision.delta_minutes == 12
    assert "12 minutes late" in decision.message


@pytest.mark.parametrize("clock_in", ["08:45", "09:00", "09:05"])
def test_on_time_bounds_are_inclusive(clock_in):
    assert classify_clock_in(clock_in, _shift(), DEFAULT).status is AttendanceStatus.ON_TIME


def test_one_minute_past_grace_is_late():
    decision = classify_clock_in("09:06", _shift(), DEFAULT)
    assert decision.status is AttendanceStatus.LATE
    assert decision.message.startswith("Clocked in 6 minutes late")


def test_before_early_window_is_early():
    decision = classify_clock_in("08:30", _shift(), DEFAULT)
    assert decision.status is AttendanceStatus.EARLY
    assert decision.delta_minutes == -30
    assert "30 minutes early" in decision.message


@pytest.mark.parametrize(
    "clock_in, expected",
    [("09:10", AttendanceStatus.ON_TIME), ("09:20", AttendanceStatus.LATE)],
)
def test_grace_window_is_configurable(clock_in, expected):
    policy = AttendancePolicy(late_grace_minutes=10, early_arrival_minutes=15)
    assert classify_clock_in(clock_in, _shift(), policy).status is expected


def test_early_arrival_for_shift_just_after_midnight():
    decision = classify_clock_in("23:50", _shift("00:05", "08:00"), DEFAULT)
    assert decision.status is AttendanceStatus.ON_TIME
    assert decision.delta_minutes == -15


def test_singular_minute_in_message():
    decision = classify_clock_in("09:01", _shift(), AttendancePolicy(0, 15))
    assert "1 minute late" in decision.message


def test_malformed_clock_in_rejected_even_without_shift():
    with pytest.raises(FormatError):
        classify_clock_in("9am", None, DEFAULT)


def test_policy_from_settings_row():
    row = SimpleNamespace(late_grace_minutes=7, early_arrival_minutes=20)
    policy = AttendancePolicy.from_row(row)
    assert policy == AttendancePolicy(late_grace_minutes=7, early_arrival_minutes=20)
