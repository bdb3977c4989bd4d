"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import date
from typing import Any, Protocol
from uuid import UUID

from cashflow.domain.ids import short_id
from cashflow.domain.models import OneTimeEntry, ProjectedTransaction, RecurringRule


class _Record(Protocol):
    @property
    def id(self) -> UUID: ...


def replace_record[T: _Record](records: tuple[T, ...], updated: T) -> tuple[T, ...]:
    """Swap the record sharing *updated*'s ID, keeping order."""
    return tuple(updated if r.id == updated.id else r for r in records)


def drop_record[T: _Record](records: tuple[T, ...], record_id: UUID) -> tuple[T, ...]:
    return tuple(r for r in records if r.id != record_id)


def today() -> date:
    """The local calendar date; the only place services read the clock."""
    return date.today()


def recurring_payload(rule: RecurringRule) -> dict[str, Any]:
    return {
        "id": str(rule.id),
        "short_id": short_id(rule.id),
        "description": rule.description,
        "amount": rule.amount,
        "day_of_month": rule.day_of_month,
        "active": rule.active,
        "created_at": rule.created_at,
    }


def one_time_payload(entry: OneTimeEntry) -> dict[str, Any]:
    return {
        "id": str(entry.id),
        "short_id": short_id(entry.id),
        "description": entry.description,
        "amount": entry.amount,
        "date": entry.date,
        "created_at": entry.created_at,
    }


def transaction_payload(txn: ProjectedTransaction) -> dict[str, Any]:
    return {
        "date": txn.date,
        "day_of_month": txn.day_of_month,
        "description": txn.description,
        "amount": txn.amount,
        "kind": str(txn.kind),
        "one_time": txn.is_one_time,
        "source_id": str(txn.source_id),
        "balance_after": txn.balance_after,
    }
