"""
Time-of-day arithmetic on zero-padded 24-hour ``HH:MM`` strings.

Every interval in the system goes through :func:`normalize`, so the
duration calculator and the overlap predicate always agree on what spans
midnight: an end earlier than its start belongs to the next day.
"""

from __future__ import annotations

import re

from hrms.core.exceptions import FormatError

MINUTES_PER_DAY = 24 * 60

_HHMM_RE = re.compile(r"([01][0-9]|2[0-3]):([0-5][0-9])")


def to_minutes(hhmm: str) -> int:
    """Parse ``"HH:MM"`` into minutes since midnight."""
    if not isinstance(hhmm, str):
        raise FormatError(f"Time must be an HH:MM string, got {type(hhmm).__name__}")
    match = _HHMM_RE.fullmatch(hhmm)
    if match is None:
        raise FormatError(f"Invalid time '{hhmm}': expected zero-padded 24-hour HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def from_minutes(minutes: int) -> str:
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize(start: str, end: str) -> tuple[int, int]:
    """Return ``(start, end)`` in minutes with the overnight wrap applied."""
    s, e = to_minutes(start), to_minutes(end)
    if e < s:
        e += MINUTES_PER_DAY
    return s, e


def duration(start: str, end: str) -> int:
    """Minutes from *start* to *end*; 17:00 -> 01:00 is 480, not -960."""
    s, e = normalize(start, end)
    return e - s


def overlaps(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """Half-open ``[start, end)`` overlap; sharing a single minute counts."""
    a_s, a_e = normalize(a_start, a_end)
    b_s, b_e = normalize(b_start, b_end)
    return a_s < b_e and b_s < a_e


def clock_delta(observed: str, scheduled: str) -> int:
    """Signed minutes from *scheduled* to *observed*, folded into (-720, 720].

    23:50 against a 00:05 start is -15 (early), not +1425.
    """
    delta = to_minutes(observed) - to_minutes(scheduled)
    if delta > MINUTES_PER_DAY // 2:
        delta -= MINUTES_PER_DAY
    elif delta <= -MINUTES_PER_DAY // 2:
        delta += MINUTES_PER_DAY
    return delta


def distance_to_interval(point: str, start: str, end: str) -> int:
    """Minutes from *point* to the nearest edge of the interval, 0 inside it.

    The point is tried both as-is and one day later so that early-morning
    times compare correctly against an overnight shift.
    """
    s, e = normalize(start, end)
    p = to_minutes(point)
    best = 2 * MINUTES_PER_DAY
    for candidate in (p, p + MINUTES_PER_DAY):
        if s <= candidate < e:
            return 0
        best = min(best, s - candidate if candidate < s else candidate - e)
    return best
