"""Tests for snapshot resolution, reconciliation, and projection."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from cashflow.domain.models import Ledger, SourceKind
from cashflow.domain.projection import (
    LAST_PROJECTABLE_DATE,
    NoBalanceAnchorError,
    build_projection,
    latest_snapshot,
    project_cashflow,
    projection_end,
    reconcile_balance,
    replay_history,
)
from tests.conftest import ANCHOR, at, entry, rule, snapshot


class TestLatestSnapshot:
    def test_latest_date_wins(self) -> None:
        older = snapshot(date(2025, 10, 1), 1000)
        newer = snapshot(date(2025, 11, 1), 2000)
        assert latest_snapshot([newer, older]) is newer

    def test_first_wins_on_tie(self) -> None:
        first = snapshot(date(2025, 11, 1), 1000)
        second = snapshot(date(2025, 11, 1), 2000)
        assert latest_snapshot([first, second]) is first

    def test_empty_raises(self) -> None:
        with pytest.raises(NoBalanceAnchorError) as exc_info:
            latest_snapshot([])
        assert exc_info.value.message == "No balance snapshots found."


class TestReconcileBalance:
    def test_anchor_on_snapshot_date_returns_snapshot(self) -> None:
        snap = snapshot(ANCHOR, 5000)
        ledger = Ledger(recurring=(rule("Rent", -1000, ANCHOR.day),), balance_snapshots=(snap,))
        assert reconcile_balance(ledger, snap, ANCHOR) == Decimal("5000")

    def test_anchor_before_snapshot_returns_snapshot(self) -> None:
        snap = snapshot(ANCHOR, 5000)
        ledger = Ledger(balance_snapshots=(snap,))
        assert reconcile_balance(ledger, snap, ANCHOR - timedelta(days=3)) == Decimal("5000")

    def test_recurring_on_anchor_is_included(self) -> None:
        snap = snapshot(ANCHOR - timedelta(days=5), 5000)
        ledger = Ledger(recurring=(rule("Rent", -1000, ANCHOR.day),), balance_snapshots=(snap,))
        assert reconcile_balance(ledger, snap, ANCHOR) == Decimal("4000")

    def test_recurring_on_snapshot_date_is_excluded(self) -> None:
        snap = snapshot(date(2025, 11, 10), 5000)
        ledger = Ledger(recurring=(rule("Rent", -1000, 10),), balance_snapshots=(snap,))
        assert reconcile_balance(ledger, snap, ANCHOR) == Decimal("5000")

    def test_one_time_window_is_exclusive_on_both_ends(self) -> None:
        snap = snapshot(date(2025, 11, 10), 5000)
        ledger = Ledger(
            one_time=(
                entry("On snapshot day", -1, date(2025, 11, 10)),
                entry("Between", -200, date(2025, 11, 15)),
                entry("On anchor", -30000, ANCHOR),
            ),
            balance_snapshots=(snap,),
        )
        assert reconcile_balance(ledger, snap, ANCHOR) == Decimal("4800")

    def test_inactive_rule_is_ignored(self) -> None:
        snap = snapshot(date(2025, 11, 1), 5000)
        ledger = Ledger(
            recurring=(rule("Gym", -900, 5, active=False),),
            balance_snapshots=(snap,),
        )
        assert reconcile_balance(ledger, snap, ANCHOR) == Decimal("5000")

    def test_history_spanning_several_months(self) -> None:
        snap = snapshot(date(2025, 8, 25), 10000)
        ledger = Ledger(
            recurring=(rule("Salary", 40000, 10), rule("Rent", -15000, 1)),
            balance_snapshots=(snap,),
        )
        # Sep, Oct, Nov salaries and rents
        assert reconcile_balance(ledger, snap, ANCHOR) == Decimal("85000")

    def test_reuses_replayed_rows(self) -> None:
        snap = snapshot(ANCHOR - timedelta(days=10), 5000)
        ledger = Ledger(recurring=(rule("Phone", -300, ANCHOR.day),), balance_snapshots=(snap,))
        rows = replay_history(ledger, snap, ANCHOR)
        assert reconcile_balance(ledger, snap, ANCHOR, replayed=rows) == Decimal("4700")
        assert reconcile_balance(ledger, snap, ANCHOR, replayed=[]) == Decimal("5000")


class TestReplayHistory:
    def test_rows_are_ordered_and_seeded_from_snapshot(self) -> None:
        snap = snapshot(date(2025, 11, 1), 1000)
        ledger = Ledger(
            recurring=(rule("Salary", 500, 10),),
            one_time=(entry("Dinner", -100, date(2025, 11, 5)),),
            balance_snapshots=(snap,),
        )
        rows = replay_history(ledger, snap, ANCHOR)
        assert [r.description for r in rows] == ["Dinner", "Salary"]
        assert [r.balance_after for r in rows] == [Decimal("900"), Decimal("1400")]

    def test_last_row_matches_reconciled_balance(self) -> None:
        snap = snapshot(date(2025, 10, 3), 1000)
        ledger = Ledger(
            recurring=(rule("Salary", 500, 10), rule("Phone", -300, 28)),
            one_time=(entry("Gift", 250, date(2025, 11, 2)),),
            balance_snapshots=(snap,),
        )
        rows = replay_history(ledger, snap, ANCHOR)
        assert rows[-1].balance_after == reconcile_balance(ledger, snap, ANCHOR)


class TestBuildProjection:
    def test_running_balance(self) -> None:
        ledger = Ledger(
            recurring=(rule("Salary", 40000, 25), rule("Rent", -15000, 1)),
        )
        rows = build_projection(ledger, Decimal("1000"), ANCHOR, 30)
        assert [(r.date, r.balance_after) for r in rows] == [
            (date(2025, 11, 25), Decimal("41000")),
            (date(2025, 12, 1), Decimal("26000")),
        ]

    def test_zero_horizon_without_anchor_entries_is_empty(self) -> None:
        ledger = Ledger(recurring=(rule("Rent", -1000, ANCHOR.day),))
        assert build_projection(ledger, Decimal("1000"), ANCHOR, 0) == []

    def test_negative_horizon_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            build_projection(Ledger(), Decimal("0"), ANCHOR, -1)

    def test_same_day_ties_follow_creation_time(self) -> None:
        ledger = Ledger(
            recurring=(rule("Later rule", -2, 25, created_at=at(9)),),
            one_time=(
                entry("Earliest", -1, date(2025, 11, 25), created_at=at(1)),
                entry("Latest", -3, date(2025, 11, 25), created_at=at(20)),
            ),
        )
        rows = build_projection(ledger, Decimal("100"), ANCHOR, 10)
        assert [r.description for r in rows] == ["Earliest", "Later rule", "Latest"]

    def test_day_of_month_is_the_clamped_day(self) -> None:
        ledger = Ledger(recurring=(rule("Savings", -5000, 31),))
        rows = build_projection(ledger, Decimal("0"), date(2026, 2, 1), 27)
        assert [(r.date, r.day_of_month) for r in rows] == [(date(2026, 2, 28), 28)]


class TestProjectCashflow:
    def test_no_snapshot_raises_regardless_of_ledger(self) -> None:
        ledger = Ledger(
            recurring=(rule("Salary", 40000, 10),),
            one_time=(entry("Bonus", 5000, ANCHOR),),
        )
        with pytest.raises(NoBalanceAnchorError):
            project_cashflow(ledger, ANCHOR, 30)

    def test_netflix_tomorrow(self) -> None:
        """Snapshot yesterday, Netflix due tomorrow: nothing to reconcile, one row."""
        anchor = date(2025, 11, 19)
        ledger = Ledger(
            recurring=(rule("Netflix", -478, 20),),
            balance_snapshots=(snapshot(anchor - timedelta(days=1), 22158),),
        )
        projection = project_cashflow(ledger, anchor, 30)
        assert projection.starting_balance == Decimal("22158")
        assert [(t.description, t.balance_after) for t in projection.upcoming] == [
            ("Netflix", Decimal("21680"))
        ]

    def test_netflix_on_anchor_day_is_folded_into_starting_balance(self) -> None:
        ledger = Ledger(
            recurring=(rule("Netflix", -478, ANCHOR.day),),
            balance_snapshots=(snapshot(ANCHOR - timedelta(days=1), 22158),),
        )
        projection = project_cashflow(ledger, ANCHOR, 30)
        assert projection.starting_balance == Decimal("21680")
        # Next month's charge is exactly 30 days out and still inside the window.
        assert [(t.date, t.balance_after) for t in projection.upcoming] == [
            (date(2025, 12, 20), Decimal("21202"))
        ]
        assert projection.upcoming[0].date.day == ANCHOR.day

    def test_one_time_on_anchor_is_listed_first(self) -> None:
        ledger = Ledger(
            recurring=(rule("Salary", 40000, 21),),
            one_time=(entry("Car service", -6200, ANCHOR),),
            balance_snapshots=(snapshot(ANCHOR - timedelta(days=3), 10000),),
        )
        projection = project_cashflow(ledger, ANCHOR, 5)
        assert projection.starting_balance == Decimal("10000")
        first = projection.upcoming[0]
        assert first.description == "Car service"
        assert first.kind is SourceKind.ONE_TIME
        assert first.balance_after == Decimal("3800")

    def test_identically_named_rules_stay_distinct(self) -> None:
        water = rule("Utilities", -2500, 1)
        power = rule("Utilities", -2940, 20)
        ledger = Ledger(
            recurring=(water, power),
            balance_snapshots=(snapshot(ANCHOR - timedelta(days=7), 10000),),
        )
        projection = project_cashflow(ledger, ANCHOR, 60)
        by_source = {t.source_id: t for t in projection.upcoming}
        assert set(by_source) == {water.id, power.id}
        for txn in projection.upcoming:
            expected = water if txn.source_id == water.id else power
            assert txn.amount == expected.amount
            assert txn.day_of_month == expected.day_of_month

    def test_conservation(self) -> None:
        ledger = Ledger(
            recurring=(
                rule("Salary", 45000, 10),
                rule("Rent", -18500, 1),
                rule("Savings", -5000, 31),
            ),
            one_time=(
                entry("Car service", -6200, date(2025, 12, 3)),
                entry("Bonus", 12000, date(2026, 1, 15)),
            ),
            balance_snapshots=(snapshot(date(2025, 11, 1), 22158),),
        )
        projection = project_cashflow(ledger, ANCHOR, 90)
        total = sum((t.amount for t in projection.upcoming), Decimal(0))
        assert projection.upcoming[-1].balance_after - projection.starting_balance == total

    def test_determinism(self) -> None:
        ledger = Ledger(
            recurring=(rule("A", -1, 25, created_at=at(2)), rule("B", -2, 25, created_at=at(1))),
            one_time=(entry("C", -3, date(2025, 11, 25), created_at=at(3)),),
            balance_snapshots=(snapshot(date(2025, 11, 1), 100),),
        )
        first = project_cashflow(ledger, ANCHOR, 30)
        second = project_cashflow(ledger, ANCHOR, 30)
        assert first == second
        assert [t.description for t in first.upcoming] == ["B", "A", "C"]

    def test_inactive_rule_never_contributes(self) -> None:
        ledger = Ledger(
            recurring=(rule("Gym", -900, 5, active=False), rule("Salary", 100, 25)),
            balance_snapshots=(snapshot(date(2025, 10, 1), 1000),),
        )
        projection = project_cashflow(ledger, ANCHOR, 60)
        assert projection.starting_balance == Decimal("1100")
        assert {t.description for t in projection.upcoming} == {"Salary"}
        assert all(t.description != "Gym" for t in projection.history)

    def test_empty_horizon_on_snapshot_date(self) -> None:
        ledger = Ledger(
            recurring=(rule("Rent", -1000, ANCHOR.day),),
            balance_snapshots=(snapshot(ANCHOR, 7777),),
        )
        projection = project_cashflow(ledger, ANCHOR, 0)
        assert projection.upcoming == ()
        assert projection.history == ()
        assert projection.starting_balance == Decimal("7777")
        assert projection.end_date == ANCHOR

    def test_zero_horizon_still_lists_one_time_on_anchor(self) -> None:
        ledger = Ledger(
            one_time=(entry("Parking fine", -500, ANCHOR),),
            balance_snapshots=(snapshot(ANCHOR, 1000),),
        )
        projection = project_cashflow(ledger, ANCHOR, 0)
        assert [t.balance_after for t in projection.upcoming] == [Decimal("500")]

    def test_starting_balance_is_the_reconciled_balance(self) -> None:
        snap = snapshot(date(2025, 9, 1), 20000)
        ledger = Ledger(
            recurring=(rule("Rent", -15000, 1), rule("Salary", 40000, 10)),
            one_time=(entry("Dentist", -1500, date(2025, 10, 15)),),
            balance_snapshots=(snap,),
        )
        projection = project_cashflow(ledger, ANCHOR, 30)
        assert projection.starting_balance == reconcile_balance(ledger, snap, ANCHOR)

    def test_huge_horizon_rejected(self) -> None:
        ledger = Ledger(balance_snapshots=(snapshot(ANCHOR, 1000),))
        with pytest.raises(ValueError, match="must end by"):
            project_cashflow(ledger, date(2025, 1, 2), 99_999_999)


class TestProjectionEnd:
    def test_end_date(self) -> None:
        assert projection_end(ANCHOR, 30) == date(2025, 12, 20)

    def test_zero_horizon_ends_on_anchor(self) -> None:
        assert projection_end(ANCHOR, 0) == ANCHOR

    def test_last_projectable_date_is_accepted(self) -> None:
        assert projection_end(LAST_PROJECTABLE_DATE, 0) == LAST_PROJECTABLE_DATE

    @pytest.mark.parametrize(
        "anchor,days",
        [
            (LAST_PROJECTABLE_DATE, 1),
            (date(2025, 1, 2), 99_999_999),
            (date.max, 0),
        ],
    )
    def test_out_of_range_window_rejected(self, anchor: date, days: int) -> None:
        with pytest.raises(ValueError, match="must end by"):
            projection_end(anchor, days)
