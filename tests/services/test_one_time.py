"""Tests for OneTimeService."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from cashflow.infrastructure.storage import LedgerStore
from cashflow.services.one_time import OneTimeService
from tests.conftest import ANCHOR, at, entry, seed


@pytest.fixture
def svc(store: LedgerStore) -> OneTimeService:
    return OneTimeService(store)


class TestAdd:
    def test_add(self, svc: OneTimeService, store: LedgerStore) -> None:
        result = svc.add("Car service", "-6 200", "03.12.2025")
        assert result.ok, result.error
        assert result.op == "one_time_add"
        assert result.data["date"] == date(2025, 12, 3)
        assert result.data["amount"] == Decimal("-6200")
        (saved,) = store.load().one_time
        assert saved.description == "Car service"

    def test_add_iso_date(self, svc: OneTimeService) -> None:
        assert svc.add("Bonus", "12000", "2026-01-15").data["date"] == date(2026, 1, 15)

    def test_add_invalid_date(self, svc: OneTimeService) -> None:
        result = svc.add("Bonus", "12000", "15/01/2026")
        assert result.error is not None
        assert result.error.code == "INVALID_DATE"

    def test_add_invalid_amount(self, svc: OneTimeService) -> None:
        result = svc.add("Bonus", "twelve", "15.01.2026")
        assert result.error is not None
        assert result.error.code == "INVALID_AMOUNT"


class TestList:
    @pytest.fixture(autouse=True)
    def _entries(self, store: LedgerStore) -> None:
        seed(
            store,
            one_time=[
                entry("Later", -3, date(2025, 12, 24), created_at=at(1)),
                entry("Past", -1, date(2025, 11, 1), created_at=at(2)),
                entry("Today", -2, ANCHOR, created_at=at(3)),
            ],
        )

    def test_all_sorted_by_date(self, svc: OneTimeService) -> None:
        result = svc.list_entries()
        assert result.data["count"] == 3
        assert result.data["upcoming"] is False
        assert [i["description"] for i in result.data["items"]] == ["Past", "Today", "Later"]

    def test_upcoming_keeps_today(self, svc: OneTimeService) -> None:
        result = svc.list_entries(upcoming=True, as_of=ANCHOR)
        assert result.data["upcoming"] is True
        assert [i["description"] for i in result.data["items"]] == ["Today", "Later"]


class TestEditDelete:
    def test_edit_date(self, svc: OneTimeService, store: LedgerStore) -> None:
        added = svc.add("Car service", "-6200", "03.12.2025")
        result = svc.edit(added.data["short_id"], on="05.12.2025")
        assert result.ok, result.error
        assert result.data["date"] == date(2025, 12, 5)
        assert result.data["fields_changed"] == ["date"]
        assert store.load().one_time[0].date == date(2025, 12, 5)

    def test_edit_nothing(self, svc: OneTimeService) -> None:
        added = svc.add("Car service", "-6200", "03.12.2025")
        result = svc.edit(added.data["id"])
        assert result.error is not None
        assert result.error.code == "NO_CHANGES"

    def test_edit_unknown(self, svc: OneTimeService) -> None:
        result = svc.edit("12345678", amount="1")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert "one-time transaction" in result.error.message

    def test_delete(self, svc: OneTimeService, store: LedgerStore) -> None:
        added = svc.add("Car service", "-6200", "03.12.2025")
        result = svc.delete(added.data["id"])
        assert result.ok
        assert result.op == "one_time_delete"
        assert store.load().one_time == ()
