"""RecurringService: monthly payment rules.

Pipeline for mutations: PARSE → RESOLVE ID → APPLY → SAVE → RESPOND
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from cashflow.domain.ids import IdLookupError, resolve_id
from cashflow.domain.models import RecurringRule
from cashflow.domain.parsing import parse_amount, validate_day_of_month
from cashflow.infrastructure.storage import StorageError
from cashflow.services._helpers import drop_record, recurring_payload, replace_record
from cashflow.services.base import BaseService
from cashflow.services.result import ServiceResult
from cashflow.services.telemetry import traced

logger = logging.getLogger(__name__)

_NOUN = "recurring transaction"


class RecurringService(BaseService):
    """Create, list, edit, toggle, and delete recurring rules."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def add(self, description: str, amount: str, day: int) -> ServiceResult:
        """Add an active rule paying *amount* on *day* of every month."""
        op = "recurring_add"
        try:
            value = parse_amount(amount)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_AMOUNT", str(exc))
        try:
            validate_day_of_month(day)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_DAY", str(exc))

        rule = RecurringRule(description=description, amount=value, day_of_month=day)
        try:
            with self._store.transaction() as txn:
                recurring = (*txn.ledger.recurring, rule)
                txn.stage(txn.ledger.model_copy(update={"recurring": recurring}))
        except StorageError as exc:
            return self._storage_failure(op, exc)

        logger.debug("Added recurring rule %s (%s)", rule.id, rule.description)
        return ServiceResult(ok=True, op=op, data=recurring_payload(rule))

    @traced
    def list_rules(self) -> ServiceResult:
        """All rules ordered by day of month (creation order within a day)."""
        op = "recurring_list"
        try:
            ledger = self._store.load()
        except StorageError as exc:
            return self._storage_failure(op, exc)

        rules = sorted(ledger.recurring, key=lambda r: (r.day_of_month, r.created_at))
        items = [recurring_payload(r) for r in rules]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "count": len(items),
                "active_count": sum(1 for r in rules if r.active),
                "monthly_total": sum((r.amount for r in rules if r.active), Decimal(0)),
                "items": items,
            },
        )

    @traced
    def edit(
        self,
        token: str,
        *,
        amount: str | None = None,
        day: int | None = None,
        description: str | None = None,
    ) -> ServiceResult:
        """Change any of amount, day, and description of one rule."""
        op = "recurring_edit"
        changes: dict[str, Any] = {}
        if amount is not None:
            try:
                changes["amount"] = parse_amount(amount)
            except ValueError as exc:
                return ServiceResult.failure(op, "INVALID_AMOUNT", str(exc))
        if day is not None:
            try:
                changes["day_of_month"] = validate_day_of_month(day)
            except ValueError as exc:
                return ServiceResult.failure(op, "INVALID_DAY", str(exc))
        if description is not None:
            changes["description"] = description
        if not changes:
            return ServiceResult.failure(
                op, "NO_CHANGES", "Nothing to update. Pass --amount, --day, or --description."
            )

        return self._update(op, token, changes)

    @traced
    def enable(self, token: str) -> ServiceResult:
        return self._update("recurring_enable", token, {"active": True})

    @traced
    def disable(self, token: str) -> ServiceResult:
        """Stop projecting a rule without deleting it."""
        return self._update("recurring_disable", token, {"active": False})

    @traced
    def delete(self, token: str) -> ServiceResult:
        """Remove a rule permanently."""
        op = "recurring_delete"
        try:
            with self._store.transaction() as txn:
                rule = self._find(txn.ledger.recurring, token)
                remaining = drop_record(txn.ledger.recurring, rule.id)
                txn.stage(txn.ledger.model_copy(update={"recurring": remaining}))
        except IdLookupError as exc:
            return self._lookup_failure(op, exc)
        except StorageError as exc:
            return self._storage_failure(op, exc)

        logger.debug("Deleted recurring rule %s", rule.id)
        return ServiceResult(ok=True, op=op, data=recurring_payload(rule))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _find(rules: tuple[RecurringRule, ...], token: str) -> RecurringRule:
        rule_id = resolve_id(token, (r.id for r in rules), noun=_NOUN)
        return next(r for r in rules if r.id == rule_id)

    def _update(self, op: str, token: str, changes: dict[str, Any]) -> ServiceResult:
        try:
            with self._store.transaction() as txn:
                current = self._find(txn.ledger.recurring, token)
                updated = current.model_copy(update=changes)
                recurring = replace_record(txn.ledger.recurring, updated)
                txn.stage(txn.ledger.model_copy(update={"recurring": recurring}))
        except IdLookupError as exc:
            return self._lookup_failure(op, exc)
        except StorageError as exc:
            return self._storage_failure(op, exc)

        fields_changed = sorted(k for k, v in changes.items() if getattr(current, k) != v)
        logger.debug("Updated recurring rule %s: %s", updated.id, fields_changed)
        data = recurring_payload(updated)
        data["fields_changed"] = fields_changed
        return ServiceResult(ok=True, op=op, data=data)
