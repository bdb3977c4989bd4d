"""Ledger value types and projection results.

All models are frozen. A :class:`Ledger` is handed to the projection engine
as an immutable snapshot; services build modified copies with
``model_copy(update=...)`` and hand them to the store.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SourceKind(StrEnum):
    """Where a materialized transaction came from."""

    RECURRING = "recurring"
    ONE_TIME = "one-time"


# --- Persisted records ---


class RecurringRule(BaseModel):
    """Monthly payment template (e.g. Netflix on the 14th).

    ``day_of_month`` is a target, not a calendar day: months shorter than
    the target resolve to their last day.
    """

    model_config = {"frozen": True}

    id: UUID = Field(default_factory=uuid4)
    description: str
    amount: Decimal
    day_of_month: int = Field(ge=1, le=31)
    active: bool = True
    created_at: datetime = Field(default_factory=_utcnow)


class OneTimeEntry(BaseModel):
    """A single dated transaction."""

    model_config = {"frozen": True}

    id: UUID = Field(default_factory=uuid4)
    description: str
    amount: Decimal
    date: date
    created_at: datetime = Field(default_factory=_utcnow)


class BalanceSnapshot(BaseModel):
    """Observed account balance as of a calendar date."""

    model_config = {"frozen": True}

    id: UUID = Field(default_factory=uuid4)
    date: date
    balance: Decimal
    created_at: datetime = Field(default_factory=_utcnow)


class Ledger(BaseModel):
    """Everything the user has recorded, as one immutable value."""

    model_config = {"frozen": True}

    recurring: tuple[RecurringRule, ...] = ()
    one_time: tuple[OneTimeEntry, ...] = ()
    balance_snapshots: tuple[BalanceSnapshot, ...] = ()


# --- Transient engine types ---


class Occurrence(BaseModel):
    """A recurring rule or one-time entry pinned to a concrete date."""

    model_config = {"frozen": True}

    date: date
    amount: Decimal
    description: str
    kind: SourceKind
    source_id: UUID
    created_at: datetime

    @classmethod
    def from_one_time(cls, entry: OneTimeEntry) -> Occurrence:
        return cls(
            date=entry.date,
            amount=entry.amount,
            description=entry.description,
            kind=SourceKind.ONE_TIME,
            source_id=entry.id,
            created_at=entry.created_at,
        )

    @property
    def sort_key(self) -> tuple[date, datetime]:
        """Chronological order; creation time breaks same-day ties."""
        return (self.date, self.created_at)


class ProjectedTransaction(BaseModel):
    """One row of a projection with the balance after applying it."""

    model_config = {"frozen": True}

    date: date
    day_of_month: int
    description: str
    amount: Decimal
    kind: SourceKind
    source_id: UUID
    balance_after: Decimal

    @property
    def is_one_time(self) -> bool:
        return self.kind is SourceKind.ONE_TIME


class Projection(BaseModel):
    """Result of :func:`cashflow.domain.projection.project_cashflow`.

    Attributes:
        snapshot: The authoritative (latest) balance snapshot.
        anchor_date: The "today" the projection was computed for.
        end_date: Last day of the projection window (inclusive).
        starting_balance: Snapshot balance reconciled forward to the anchor.
        history: Rows replayed between the snapshot and the anchor.
        upcoming: Rows inside the projection window.
    """

    model_config = {"frozen": True}

    snapshot: BalanceSnapshot
    anchor_date: date
    end_date: date
    starting_balance: Decimal
    history: tuple[ProjectedTransaction, ...] = ()
    upcoming: tuple[ProjectedTransaction, ...] = ()
