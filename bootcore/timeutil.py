"""Calendar date to Unix time conversion."""

from __future__ import annotations

SECONDS_PER_DAY = 60 * 60 * 24


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def julian_day_number(day: int, month: int, year: int) -> int:
    """Julian day number of a Gregorian calendar date."""
    m = _cdiv(month - 14, 12)
    return (
        _cdiv(1461 * (year + 4800 + m), 4)
        + _cdiv(367 * (month - 2 - 12 * m), 12)
        - _cdiv(3 * _cdiv(year + 4900 + m, 100), 4)
        + day
        - 32075
    )


def unix_epoch(second: int, minute: int, hour: int, day: int, month: int, year: int) -> int:
    """Seconds since 1970-01-01 00:00:00 for the given UTC date and time."""
    days = julian_day_number(day, month, year) - julian_day_number(1, 1, 1970)
    return days * SECONDS_PER_DAY + hour * 3600 + minute * 60 + second