"""OneTimeService: single dated transactions."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from cashflow.domain.ids import IdLookupError, resolve_id
from cashflow.domain.models import OneTimeEntry
from cashflow.domain.parsing import parse_amount, parse_date
from cashflow.infrastructure.storage import StorageError
from cashflow.services._helpers import drop_record, one_time_payload, replace_record, today
from cashflow.services.base import BaseService
from cashflow.services.result import ServiceResult
from cashflow.services.telemetry import traced

logger = logging.getLogger(__name__)

_NOUN = "one-time transaction"


class OneTimeService(BaseService):
    """Create, list, edit, and delete one-time entries."""

    @traced
    def add(self, description: str, amount: str, on: str) -> ServiceResult:
        op = "one_time_add"
        try:
            value = parse_amount(amount)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_AMOUNT", str(exc))
        try:
            entry_date = parse_date(on)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_DATE", str(exc))

        entry = OneTimeEntry(description=description, amount=value, date=entry_date)
        try:
            with self._store.transaction() as txn:
                one_time = (*txn.ledger.one_time, entry)
                txn.stage(txn.ledger.model_copy(update={"one_time": one_time}))
        except StorageError as exc:
            return self._storage_failure(op, exc)

        logger.debug("Added one-time entry %s on %s", entry.id, entry.date)
        return ServiceResult(ok=True, op=op, data=one_time_payload(entry))

    @traced
    def list_entries(self, *, upcoming: bool = False, as_of: date | None = None) -> ServiceResult:
        """Entries sorted by date; *upcoming* keeps those on or after *as_of*."""
        op = "one_time_list"
        try:
            ledger = self._store.load()
        except StorageError as exc:
            return self._storage_failure(op, exc)

        entries = list(ledger.one_time)
        if upcoming:
            cutoff = as_of or today()
            entries = [e for e in entries if e.date >= cutoff]
        entries.sort(key=lambda e: (e.date, e.created_at))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "count": len(entries),
                "upcoming": upcoming,
                "items": [one_time_payload(e) for e in entries],
            },
        )

    @traced
    def edit(
        self,
        token: str,
        *,
        amount: str | None = None,
        on: str | None = None,
        description: str | None = None,
    ) -> ServiceResult:
        op = "one_time_edit"
        changes: dict[str, Any] = {}
        if amount is not None:
            try:
                changes["amount"] = parse_amount(amount)
            except ValueError as exc:
                return ServiceResult.failure(op, "INVALID_AMOUNT", str(exc))
        if on is not None:
            try:
                changes["date"] = parse_date(on)
            except ValueError as exc:
                return ServiceResult.failure(op, "INVALID_DATE", str(exc))
        if description is not None:
            changes["description"] = description
        if not changes:
            return ServiceResult.failure(
                op, "NO_CHANGES", "Nothing to update. Pass --amount, --date, or --description."
            )

        try:
            with self._store.transaction() as txn:
                current = self._find(txn.ledger.one_time, token)
                updated = current.model_copy(update=changes)
                one_time = replace_record(txn.ledger.one_time, updated)
                txn.stage(txn.ledger.model_copy(update={"one_time": one_time}))
        except IdLookupError as exc:
            return self._lookup_failure(op, exc)
        except StorageError as exc:
            return self._storage_failure(op, exc)

        data = one_time_payload(updated)
        data["fields_changed"] = sorted(
            k for k, v in changes.items() if getattr(current, k) != v
        )
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def delete(self, token: str) -> ServiceResult:
        op = "one_time_delete"
        try:
            with self._store.transaction() as txn:
                entry = self._find(txn.ledger.one_time, token)
                remaining = drop_record(txn.ledger.one_time, entry.id)
                txn.stage(txn.ledger.model_copy(update={"one_time": remaining}))
        except IdLookupError as exc:
            return self._lookup_failure(op, exc)
        except StorageError as exc:
            return self._storage_failure(op, exc)

        logger.debug("Deleted one-time entry %s", entry.id)
        return ServiceResult(ok=True, op=op, data=one_time_payload(entry))

    @staticmethod
    def _find(entries: tuple[OneTimeEntry, ...], token: str) -> OneTimeEntry:
        entry_id = resolve_id(token, (e.id for e in entries), noun=_NOUN)
        return next(e for e in entries if e.id == entry_id)
