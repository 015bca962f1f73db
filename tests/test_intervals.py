"""
Tests for HH:MM parsing, the overnight wrap and interval overlap.
"""

import pytest

from hrms.core.exceptions import FormatError, ValidationError
from hrms.timeclock.intervals import (clock_delta, distance_to_interval,
                                      duration, from_minutes,
                                      normalize, overlaps, to_minutes)


@pytest.mark.parametrize(
    "value, minutes",
    [("00:00", 0), ("09:05", 545), ("12:30", 750), ("23:59", 1439)],
)
def test_to_minutes_parses_valid_times(value, minutes):
    assert to_minutes(value) == minutes
    assert from_minutes(minutes) == value


@pytest.mark.parametrize(
    "value",
    ["9:00", "24:00", "12:60", "12-30", "", " 09:00", "09:00 ", "09:00\n", "ab:cd", "0900", "09:5", "０９:００"],
)
def test_to_minutes_rejects_malformed_times(value):
    with pytest.raises(FormatError):
        to_minutes(value)


def test_format_error_is_a_validation_error():
    with pytest.raises(ValidationError):
        to_minutes(None)  # type: ignore[arg-type]


def test_from_minutes_wraps_past_midnight():
    assert from_minutes(1440 + 90) == "01:30"


def test_duration_same_day():
    assert duration("09:00", "17:00") == 480


def test_duration_overnight_wraps():
    assert duration("17:00", "01:00") == 480
    assert duration("22:00", "06:00") == 480


def test_duration_of_equal_times_is_zero():
    assert duration("08:00", "08:00") == 0


def test_normalize_only_shifts_end_when_earlier():
    assert normalize("09:00", "17:00") == (540, 1020)
    assert normalize("23:00", "02:00") == (1380, 1560)


def test_overlap_same_day():
    assert overlaps("09:00", "17:00", "16:00", "20:00")
    assert not overlaps("09:00", "12:00", "13:00", "17:00")


def test_touching_intervals_do_not_overlap():
    assert not overlaps("09:00", "12:00", "12:00", "15:00")


@pytest.mark.parametrize(
    "start, end",
    [("09:00", "17:00"), ("22:00", "06:00"), ("12:00", "12:01"), ("23:59", "00:00")],
)
def test_interval_overlaps_itself(start, end):
    assert overlaps(start, end, start, end)


def test_overlap_with_overnight_interval():
    assert overlaps("22:00", "06:00", "23:00", "02:00")
    assert not overlaps("22:00", "02:00", "09:00", "17:00")


def test_overlap_is_symmetric():
    pairs = [
        ("09:00", "17:00", "16:00", "20:00"),
        ("22:00", "06:00", "23:00", "02:00"),
        ("09:00", "12:00", "12:00", "15:00"),
    ]
    for a_s, a_e, b_s, b_e in pairs:
        assert overlaps(a_s, a_e, b_s, b_e) == overlaps(b_s, b_e, a_s, a_e)


@pytest.mark.parametrize(
    "observed, scheduled, expected",
    [
        ("09:12", "09:00", 12),
        ("08:45", "09:00", -15),
        ("23:50", "00:05", -15),
        ("00:10", "23:55", 15),
    ],
)
def test_clock_delta_folds_across_midnight(observed, scheduled, expected):
    assert clock_delta(observed, scheduled) == expected


def test_distance_inside_interval_is_zero():
    assert distance_to_interval("10:00", "09:00", "17:00") == 0
    assert distance_to_interval("01:00", "22:00", "06:00") == 0


def test_distance_outside_interval():
    assert distance_to_interval("08:30", "09:00", "17:00") == 30
    assert distance_to_interval("18:00", "09:00", "17:00") == 60
