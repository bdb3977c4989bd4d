"""Shared pytest fixtures and test helpers for cashflow tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from datetime import UTC, date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from cashflow.domain.models import BalanceSnapshot, Ledger, OneTimeEntry, RecurringRule
from cashflow.infrastructure.storage import LedgerStore
from cashflow.services.telemetry import _current_span, disable_telemetry

# A fixed "today" for engine and service tests; nothing reads the wall clock.
ANCHOR = date(2025, 11, 20)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Directory holding the ledger file (created lazily by the store)."""
    return tmp_path / "data"


@pytest.fixture
def store(data_dir: Path) -> LedgerStore:
    return LedgerStore(data_dir)


@pytest.fixture(autouse=True)
def _isolated_env(
    tmp_path: Path, data_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None]:
    """Keep every test away from ``~/.cashflow`` and ``~/.cashflowrc``.

    The CLI reads ``CASHFLOW_DATA_DIR`` and ``CASHFLOW_CONFIG``; both point
    into the test's tmp directory. Telemetry state is reset afterwards
    because ``--verbose`` switches it on for the whole context, and so is
    the root logger, which every CLI invocation reconfigures.
    """
    for name in ("CASHFLOW_PLAN__DEFAULT_DAYS", "CASHFLOW_STORAGE__DATA_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CASHFLOW_DATA_DIR", str(data_dir))
    monkeypatch.setenv("CASHFLOW_CONFIG", str(tmp_path / "cashflowrc.toml"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    app_level = logging.getLogger("cashflow").level
    yield
    disable_telemetry()
    _current_span.set(None)
    # CliRunner streams are closed once invoke() returns
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("cashflow").setLevel(app_level)
    structlog.contextvars.clear_contextvars()


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def at(day: int, *, month: int = 1, year: int = 2025) -> datetime:
    """A deterministic ``created_at`` timestamp."""
    return datetime(year, month, day, 12, 0, tzinfo=UTC)


def rule(
    description: str, amount: str | int, day: int, *, active: bool = True, **kwargs: Any
) -> RecurringRule:
    return RecurringRule(
        description=description,
        amount=Decimal(amount),
        day_of_month=day,
        active=active,
        **kwargs,
    )


def entry(description: str, amount: str | int, on: date, **kwargs: Any) -> OneTimeEntry:
    return OneTimeEntry(description=description, amount=Decimal(amount), date=on, **kwargs)


def snapshot(on: date, balance: str | int, **kwargs: Any) -> BalanceSnapshot:
    return BalanceSnapshot(date=on, balance=Decimal(balance), **kwargs)


def seed(store: LedgerStore, **records: Any) -> Ledger:
    """Save a ledger built from ``recurring=``, ``one_time=``, ``balance_snapshots=``."""
    ledger = Ledger(**{k: tuple(v) for k, v in records.items()})
    store.save(ledger)
    return ledger
