"""Tests for shared service-layer helper functions."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

from cashflow.domain.models import ProjectedTransaction, SourceKind
from cashflow.services._helpers import (
    drop_record,
    recurring_payload,
    replace_record,
    today,
    transaction_payload,
)
from tests.conftest import rule


class TestRecordTuples:
    def test_replace_keeps_order(self) -> None:
        a, b, c = rule("A", 1, 1), rule("B", 2, 2), rule("C", 3, 3)
        updated = b.model_copy(update={"amount": Decimal(20)})
        assert replace_record((a, b, c), updated) == (a, updated, c)

    def test_replace_unknown_is_noop(self) -> None:
        a = rule("A", 1, 1)
        assert replace_record((a,), rule("X", 9, 9)) == (a,)

    def test_drop(self) -> None:
        a, b = rule("A", 1, 1), rule("B", 2, 2)
        assert drop_record((a, b), a.id) == (b,)


class TestPayloads:
    def test_today(self) -> None:
        assert isinstance(today(), date)

    def test_recurring_payload(self) -> None:
        r = rule("Netflix", -478, 14, active=False)
        payload = recurring_payload(r)
        assert payload["short_id"] == str(r.id)[:8]
        assert payload["day_of_month"] == 14
        assert payload["active"] is False

    def test_transaction_payload_flags_one_time(self) -> None:
        txn = ProjectedTransaction(
            date=date(2025, 12, 3),
            day_of_month=3,
            description="Car service",
            amount=Decimal("-6200"),
            kind=SourceKind.ONE_TIME,
            source_id=uuid4(),
            balance_after=Decimal("480"),
        )
        payload = transaction_payload(txn)
        assert payload["kind"] == "one-time"
        assert payload["one_time"] is True
        assert payload["balance_after"] == Decimal("480")
