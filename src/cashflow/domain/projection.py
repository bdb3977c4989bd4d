"""Projection engine: snapshot reconciliation and running-balance projection.

Pipeline: LATEST SNAPSHOT → RECONCILE TO ANCHOR → PROJECT WINDOW

The anchor date ("today") splits the timeline in two, and the two
transaction kinds treat it differently:

- Recurring occurrences use ``(start, end]`` on both sides, so one that
  lands exactly on the anchor is folded into the starting balance and is
  not listed again.
- One-time entries use ``(snapshot, anchor)`` for reconciliation and
  ``[anchor, end]`` for projection, so one dated on the anchor is listed as
  the first upcoming row instead.

Every function here is pure: the ledger is read-only, and the anchor date
is always supplied by the caller.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import MAXYEAR, date, timedelta
from decimal import Decimal

from cashflow.domain.models import (
    BalanceSnapshot,
    Ledger,
    Occurrence,
    ProjectedTransaction,
    Projection,
)
from cashflow.domain.recurrence import expand

# Month expansion looks one month past the window end, so December of the
# last representable year is out of reach.
LAST_PROJECTABLE_DATE = date(MAXYEAR, 11, 30)


class NoBalanceAnchorError(LookupError):
    """Raised when the ledger holds no balance snapshot to project from."""

    def __init__(self, message: str = "No balance snapshots found.") -> None:
        super().__init__(message)
        self.message = message


# ── Snapshot ──────────────────────────────────────────────────────────


def latest_snapshot(snapshots: Iterable[BalanceSnapshot]) -> BalanceSnapshot:
    """Return the snapshot with the latest date.

    Ties keep the first snapshot encountered.
    """
    latest: BalanceSnapshot | None = None
    for snapshot in snapshots:
        if latest is None or snapshot.date > latest.date:
            latest = snapshot
    if latest is None:
        raise NoBalanceAnchorError
    return latest


# ── Occurrence selection ──────────────────────────────────────────────


def _recurring_between(
    ledger: Ledger, start_exclusive: date, end_inclusive: date
) -> list[Occurrence]:
    found: list[Occurrence] = []
    for rule in ledger.recurring:
        if rule.active:
            found.extend(expand(rule, start_exclusive, end_inclusive))
    return found


def _history_occurrences(
    ledger: Ledger, snapshot: BalanceSnapshot, anchor: date
) -> list[Occurrence]:
    """Everything between the snapshot and the anchor, in replay order."""
    if anchor <= snapshot.date:
        return []
    found = _recurring_between(ledger, snapshot.date, anchor)
    found.extend(
        Occurrence.from_one_time(entry)
        for entry in ledger.one_time
        if snapshot.date < entry.date < anchor
    )
    return sorted(found, key=lambda occ: occ.sort_key)


def _window_occurrences(ledger: Ledger, anchor: date, end: date) -> list[Occurrence]:
    """Everything inside the projection window, in projection order."""
    found = _recurring_between(ledger, anchor, end)
    found.extend(
        Occurrence.from_one_time(entry)
        for entry in ledger.one_time
        if anchor <= entry.date <= end
    )
    return sorted(found, key=lambda occ: occ.sort_key)


def _accumulate(occurrences: Sequence[Occurrence], seed: Decimal) -> list[ProjectedTransaction]:
    """Fold *occurrences* into rows carrying the running balance."""
    rows: list[ProjectedTransaction] = []
    running = seed
    for occ in occurrences:
        running += occ.amount
        rows.append(
            ProjectedTransaction(
                date=occ.date,
                day_of_month=occ.date.day,
                description=occ.description,
                amount=occ.amount,
                kind=occ.kind,
                source_id=occ.source_id,
                balance_after=running,
            )
        )
    return rows


# ── Reconciliation ────────────────────────────────────────────────────


def replay_history(
    ledger: Ledger, snapshot: BalanceSnapshot, anchor: date
) -> list[ProjectedTransaction]:
    """Rows applied between *snapshot* and *anchor*, seeded with the snapshot balance."""
    return _accumulate(_history_occurrences(ledger, snapshot, anchor), snapshot.balance)


def reconcile_balance(
    ledger: Ledger,
    snapshot: BalanceSnapshot,
    anchor: date,
    *,
    replayed: Sequence[ProjectedTransaction] | None = None,
) -> Decimal:
    """Balance as of *anchor*: the snapshot plus everything replayed since.

    Returns the snapshot balance untouched when *anchor* is on or before
    the snapshot date. Pass *replayed* when :func:`replay_history` has
    already run for the same arguments.
    """
    history = replay_history(ledger, snapshot, anchor) if replayed is None else replayed
    if not history:
        return snapshot.balance
    return history[-1].balance_after


# ── Projection ────────────────────────────────────────────────────────


def projection_end(anchor: date, horizon_days: int) -> date:
    """Last day of the window starting at *anchor*.

    Raises:
        ValueError: for a negative horizon, or a window ending after
            :data:`LAST_PROJECTABLE_DATE`.
    """
    if horizon_days < 0:
        msg = f"horizon_days must be non-negative, got {horizon_days}"
        raise ValueError(msg)
    try:
        end = anchor + timedelta(days=horizon_days)
    except OverflowError:
        end = date.max
    if end > LAST_PROJECTABLE_DATE:
        msg = f"Projection window must end by {LAST_PROJECTABLE_DATE.isoformat()}"
        raise ValueError(msg)
    return end


def build_projection(
    ledger: Ledger,
    current_balance: Decimal,
    anchor: date,
    horizon_days: int,
) -> list[ProjectedTransaction]:
    """Ordered rows for the window ``anchor .. anchor + horizon_days``."""
    end = projection_end(anchor, horizon_days)
    return _accumulate(_window_occurrences(ledger, anchor, end), current_balance)


def project_cashflow(ledger: Ledger, anchor: date, horizon_days: int) -> Projection:
    """Run the full pipeline for *ledger* as seen on *anchor*.

    Raises:
        NoBalanceAnchorError: if the ledger has no balance snapshot.
        ValueError: if the horizon is negative or runs past
            :data:`LAST_PROJECTABLE_DATE`.
    """
    end = projection_end(anchor, horizon_days)
    snapshot = latest_snapshot(ledger.balance_snapshots)
    history = replay_history(ledger, snapshot, anchor)
    starting_balance = reconcile_balance(ledger, snapshot, anchor, replayed=history)
    upcoming = build_projection(ledger, starting_balance, anchor, horizon_days)
    return Projection(
        snapshot=snapshot,
        anchor_date=anchor,
        end_date=end,
        starting_balance=starting_balance,
        history=tuple(history),
        upcoming=tuple(upcoming),
    )
