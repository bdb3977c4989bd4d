"""Calendar arithmetic for monthly recurrences.

Every date built here goes through a clamp or a fallback, so any target
day from 1 to 31 is safe in any month before December of ``date.max.year``.
"""

from __future__ import annotations

from datetime import date, timedelta


def _first_of_next_month(year: int, month: int) -> date:
    if month == 12:
        return date(year + 1, 1, 1)
    return date(year, month + 1, 1)


def days_in_month(year: int, month: int) -> int:
    """Number of days in *month* of *year* (leap-year aware).

    Examples:
        >>> days_in_month(2025, 2)
        28
        >>> days_in_month(2024, 2)
        29
    """
    return (_first_of_next_month(year, month) - timedelta(days=1)).day


def resolve_day_in_month(year: int, month: int, target_day: int) -> date:
    """Date of *target_day* in the given month, clamped to the month's last day.

    Examples:
        >>> resolve_day_in_month(2025, 2, 31)
        datetime.date(2025, 2, 28)
        >>> resolve_day_in_month(2025, 4, 14)
        datetime.date(2025, 4, 14)
    """
    return date(year, month, min(target_day, days_in_month(year, month)))


def same_day_next_month(value: date) -> date:
    """Step to the same day number in the following month.

    When that day does not exist in the following month the result is the
    1st of that month, not its last day. This is a pointer step only; the
    occurrence date itself always comes from :func:`resolve_day_in_month`.

    Examples:
        >>> same_day_next_month(date(2025, 1, 15))
        datetime.date(2025, 2, 15)
        >>> same_day_next_month(date(2025, 1, 31))
        datetime.date(2025, 2, 1)
        >>> same_day_next_month(date(2025, 12, 31))
        datetime.date(2026, 1, 31)
    """
    first = _first_of_next_month(value.year, value.month)
    if value.day > days_in_month(first.year, first.month):
        return first
    return first.replace(day=value.day)
