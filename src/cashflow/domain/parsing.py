"""Parsing of human-entered amounts and dates."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

# Tried in order; the day-first local format wins over ISO.
DATE_FORMATS: tuple[str, ...] = ("%d.%m.%Y", "%Y-%m-%d")

MIN_DAY_OF_MONTH = 1
MAX_DAY_OF_MONTH = 31


def parse_amount(text: str) -> Decimal:
    """Parse an amount, ignoring spaces used as thousands separators.

    Examples:
        >>> parse_amount("22 158")
        Decimal('22158')
        >>> parse_amount("- 478")
        Decimal('-478')
    """
    cleaned = text.replace(" ", "")
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        value = None
    if value is None or not value.is_finite():
        msg = f"Invalid amount {text!r}. Use: 22158 or -478"
        raise ValueError(msg)
    return value


def parse_date(text: str) -> date:
    """Parse ``DD.MM.YYYY`` or ``YYYY-MM-DD``."""
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text.strip(), fmt).date()
        except ValueError:
            continue
    msg = f"Invalid date {text!r}. Use: DD.MM.YYYY or YYYY-MM-DD"
    raise ValueError(msg)


def validate_day_of_month(day: int) -> int:
    """Reject target days outside 1-31; shorter months are handled by clamping."""
    if not MIN_DAY_OF_MONTH <= day <= MAX_DAY_OF_MONTH:
        msg = f"Day must be between {MIN_DAY_OF_MONTH} and {MAX_DAY_OF_MONTH}, got {day}"
        raise ValueError(msg)
    return day
