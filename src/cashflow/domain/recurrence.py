"""Expansion of monthly recurring rules into dated occurrences."""

from __future__ import annotations

from datetime import date

from cashflow.domain.calendar import resolve_day_in_month, same_day_next_month
from cashflow.domain.models import Occurrence, RecurringRule, SourceKind


def expand(rule: RecurringRule, start_exclusive: date, end_inclusive: date) -> list[Occurrence]:
    """Materialize *rule* over the half-open interval ``(start_exclusive, end_inclusive]``.

    A month pointer starts at *start_exclusive* and walks forward one month
    at a time until it passes the month of *end_inclusive*. In each visited
    month the rule's day is clamped to the month length, so a day-31 rule
    lands on Feb 28 (or 29) rather than being skipped.

    Inactive rules yield nothing.
    """
    if not rule.active:
        return []

    end_month = (end_inclusive.year, end_inclusive.month)
    occurrences: list[Occurrence] = []
    pointer = start_exclusive

    while True:
        occurs_on = resolve_day_in_month(pointer.year, pointer.month, rule.day_of_month)
        if start_exclusive < occurs_on <= end_inclusive:
            occurrences.append(
                Occurrence(
                    date=occurs_on,
                    amount=rule.amount,
                    description=rule.description,
                    kind=SourceKind.RECURRING,
                    source_id=rule.id,
                    created_at=rule.created_at,
                )
            )

        pointer = same_day_next_month(pointer)
        if (pointer.year, pointer.month) > end_month:
            break

    return occurrences
