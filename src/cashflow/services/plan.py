"""PlanService: reconcile the latest snapshot and project the balance forward.

Pipeline: LOAD → RECONCILE → PROJECT → SUMMARIZE
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from cashflow.domain.models import Projection
from cashflow.domain.projection import NoBalanceAnchorError, project_cashflow
from cashflow.infrastructure.storage import StorageError
from cashflow.services._helpers import today, transaction_payload
from cashflow.services.balance import NO_BALANCE_HINT
from cashflow.services.base import BaseService
from cashflow.services.result import ServiceResult
from cashflow.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

DEFAULT_DAYS = 30
DEFAULT_WARNING_THRESHOLD = Decimal("10000")


class PlanService(BaseService):
    """Builds the cashflow plan shown by ``cashflow plan``."""

    @traced
    def plan(
        self,
        days: int = DEFAULT_DAYS,
        *,
        show_past: bool = False,
        anchor: date | None = None,
        warning_threshold: Decimal = DEFAULT_WARNING_THRESHOLD,
    ) -> ServiceResult:
        """Project *days* ahead of *anchor* (default: today).

        ``history`` is only included with *show_past*; the upcoming rows
        and the low-balance summary are always present.
        """
        op = "plan"
        if days < 0:
            return ServiceResult.failure(
                op, "INVALID_DAYS", f"Days must be zero or more, got {days}"
            )
        anchor = anchor or today()

        with trace_span("load_ledger"):
            try:
                ledger = self._store.load()
            except StorageError as exc:
                return self._storage_failure(op, exc)

        with trace_span("project") as span:
            try:
                projection = project_cashflow(ledger, anchor, days)
            except NoBalanceAnchorError as exc:
                return ServiceResult.failure(
                    op, "NO_BALANCE_ANCHOR", f"{exc.message} {NO_BALANCE_HINT}"
                )
            except ValueError as exc:
                return ServiceResult.failure(
                    op,
                    "INVALID_DAYS",
                    str(exc),
                    {"days": days, "anchor_date": anchor.isoformat()},
                )
            if span:
                span.annotate("history", len(projection.history))
                span.annotate("upcoming", len(projection.upcoming))

        logger.debug(
            "Projected %d rows from %s (balance %s)",
            len(projection.upcoming),
            anchor,
            projection.starting_balance,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=_plan_payload(projection, days, show_past, warning_threshold),
        )


def _plan_payload(
    projection: Projection,
    days: int,
    show_past: bool,
    warning_threshold: Decimal,
) -> dict[str, Any]:
    upcoming = projection.upcoming
    min_balance, min_date = projection.starting_balance, projection.anchor_date
    for txn in upcoming:
        if txn.balance_after < min_balance:
            min_balance, min_date = txn.balance_after, txn.date
    final_balance = upcoming[-1].balance_after if upcoming else projection.starting_balance

    data: dict[str, Any] = {
        "snapshot": {
            "id": str(projection.snapshot.id),
            "date": projection.snapshot.date,
            "balance": projection.snapshot.balance,
        },
        "anchor_date": projection.anchor_date,
        "end_date": projection.end_date,
        "days": days,
        "starting_balance": projection.starting_balance,
        "upcoming": [transaction_payload(t) for t in upcoming],
        "final_balance": final_balance,
        "total_change": final_balance - projection.starting_balance,
        "min_balance": min_balance,
        "min_balance_date": min_date,
        "warning_threshold": warning_threshold,
        "below_threshold": min_balance < warning_threshold,
    }
    if show_past:
        data["history"] = [transaction_payload(t) for t in projection.history]
    return data
