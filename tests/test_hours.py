"""
Tests for worked / scheduled hours and variance.
"""

from types import SimpleNamespace

import pytest

from hrms.timeclock.hours import (break_minutes, hours_worked,
                                  scheduled_hours, summarize_entry, variance)


def _break(minutes):
    return SimpleNamespace(duration=minutes)


def test_hours_worked_less_breaks():
    assert hours_worked("09:00", "17:30", [_break(30)]) == pytest.approx(8.0)


def test_overnight_session_is_one_hour_forty():
    # 23:50 -> 01:30 crosses midnight: 10 + 90 minutes.
    assert hours_worked("23:50", "01:30") * 60 == pytest.approx(100)


def test_hours_never_negative():
    assert hours_worked("09:00", "09:30", [_break(45)]) == 0.0


def test_break_minutes_ignores_missing_durations():
    assert break_minutes([_break(15), _break(None), _break(10)]) == 25


def test_scheduled_hours_of_overnight_shift():
    shift = SimpleNamespace(start_time="22:00", end_time="06:00")
    assert scheduled_hours(shift) == pytest.approx(8.0)


def test_scheduled_hours_zero_without_shift():
    assert scheduled_hours(None) == 0.0


def test_variance_positive_is_overtime():
    assert variance(9.0, 8.0) == pytest.approx(1.0)
    assert variance(7.5, 8.0) == pytest.approx(-0.5)


def test_variance_none_when_unscheduled():
    assert variance(3.0, 0.0) is None
    assert variance(3.0, None) is None


def _entry(**fields):
    defaults = dict(
        clock_in="09:00",
        clock_out="17:45",
        status="clocked_out",
        breaks=[_break(30)],
        scheduled_hours=8.0,
        hours_worked=0.0,
        total_hours=0.0,
        variance=None,
    )
    defaults.update(fields)
    return SimpleNamespace(**defaults)


def test_summarize_closed_entry():
    entry = _entry()
    summarize_entry(entry)
    assert entry.hours_worked == 8.25
    assert entry.total_hours == 8.25
    assert entry.variance == 0.25


def test_summarize_unscheduled_entry_has_no_variance():
    entry = _entry(scheduled_hours=0.0, breaks=[])
    summarize_entry(entry)
    assert entry.hours_worked == 8.75
    assert entry.variance is None


def test_summarize_open_entry_resets_derived_fields():
    entry = _entry(clock_out=None, status="clocked_in", hours_worked=3.0, variance=1.0)
    summarize_entry(entry)
    assert entry.hours_worked == 0.0
    assert entry.variance is None
