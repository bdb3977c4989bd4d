"""BalanceService: balance snapshots (the projection anchors)."""

from __future__ import annotations

import logging
from datetime import date

from cashflow.domain.models import BalanceSnapshot
from cashflow.domain.parsing import parse_amount, parse_date
from cashflow.domain.projection import NoBalanceAnchorError, latest_snapshot
from cashflow.infrastructure.storage import StorageError
from cashflow.services._helpers import today
from cashflow.services.base import BaseService
from cashflow.services.result import ServiceResult
from cashflow.services.telemetry import traced

logger = logging.getLogger(__name__)

NO_BALANCE_HINT = "Set your current balance first: cashflow balance set <amount>"


class BalanceService(BaseService):
    """Records and reports balance snapshots."""

    @traced
    def set_balance(self, amount: str, *, on: str | date | None = None) -> ServiceResult:
        """Record *amount* as the balance on *on* (default: today).

        A snapshot already dated *on* has its balance replaced instead of
        gaining a same-day sibling.
        """
        op = "balance_set"
        try:
            balance = parse_amount(amount)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_AMOUNT", str(exc))

        if on is None:
            snapshot_date = today()
        elif isinstance(on, date):
            snapshot_date = on
        else:
            try:
                snapshot_date = parse_date(on)
            except ValueError as exc:
                return ServiceResult.failure(op, "INVALID_DATE", str(exc))

        try:
            with self._store.transaction() as txn:
                snapshots = list(txn.ledger.balance_snapshots)
                index = next(
                    (i for i, s in enumerate(snapshots) if s.date == snapshot_date),
                    None,
                )
                if index is None:
                    snapshot = BalanceSnapshot(date=snapshot_date, balance=balance)
                    snapshots.append(snapshot)
                    action = "created"
                else:
                    snapshot = snapshots[index].model_copy(update={"balance": balance})
                    snapshots[index] = snapshot
                    action = "updated"
                txn.stage(txn.ledger.model_copy(update={"balance_snapshots": tuple(snapshots)}))
        except StorageError as exc:
            return self._storage_failure(op, exc)

        logger.debug("Balance %s for %s: %s", action, snapshot_date, balance)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": str(snapshot.id),
                "date": snapshot.date,
                "balance": snapshot.balance,
                "action": action,
            },
        )

    @traced
    def show(self) -> ServiceResult:
        """Report the authoritative (latest-dated) snapshot."""
        op = "balance_show"
        try:
            ledger = self._store.load()
        except StorageError as exc:
            return self._storage_failure(op, exc)

        try:
            snapshot = latest_snapshot(ledger.balance_snapshots)
        except NoBalanceAnchorError as exc:
            return ServiceResult.failure(
                op, "NO_BALANCE_ANCHOR", f"{exc.message} {NO_BALANCE_HINT}"
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": str(snapshot.id),
                "date": snapshot.date,
                "balance": snapshot.balance,
                "snapshot_count": len(ledger.balance_snapshots),
            },
        )
