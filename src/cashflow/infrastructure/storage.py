"""LedgerStore: YAML ledger file with atomic writes.

INVARIANT: The data file is the only source of truth. Every save writes
the complete ledger to a temporary sibling and renames it over the real
file, so a crash mid-write never leaves a half-written ledger behind.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from cashflow.domain.models import Ledger

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"


class StorageError(RuntimeError):
    """Raised when the ledger file cannot be read or written."""


def _new_yaml() -> YAML:
    """Create a fresh YAML instance (the YAML object is stateful)."""
    y = YAML()
    y.default_flow_style = False
    y.indent(mapping=2, sequence=4, offset=2)
    return y


def dump_ledger(ledger: Ledger) -> str:
    """Serialize *ledger* to YAML text (decimals and dates as strings)."""
    payload: dict[str, Any] = ledger.model_dump(mode="json")
    buf = StringIO()
    _new_yaml().dump(payload, buf)
    return buf.getvalue()


def parse_ledger(text: str) -> Ledger:
    """Parse YAML text into a :class:`Ledger`.

    Raises:
        StorageError: on malformed YAML or records that fail validation.
    """
    try:
        raw = _new_yaml().load(text)
    except YAMLError as exc:
        msg = f"Failed to parse ledger YAML: {exc}"
        raise StorageError(msg) from exc

    if raw is None:
        return Ledger()
    if not isinstance(raw, dict):
        msg = "Ledger file must contain a mapping at the top level"
        raise StorageError(msg)

    try:
        return Ledger.model_validate(
            {
                "recurring": list(raw.get("recurring") or []),
                "one_time": list(raw.get("one_time") or []),
                "balance_snapshots": list(raw.get("balance_snapshots") or []),
            }
        )
    except ValidationError as exc:
        msg = f"Invalid ledger record: {exc}"
        raise StorageError(msg) from exc


@dataclass
class LedgerTransaction:
    """Working copy of the ledger inside :meth:`LedgerStore.transaction`.

    Services stage a new ledger with :meth:`stage`; it is written only if the
    block exits normally.
    """

    ledger: Ledger
    dirty: bool = False

    def stage(self, ledger: Ledger) -> None:
        self.ledger = ledger
        self.dirty = True


class LedgerStore:
    """Loads and saves the ledger under a data directory."""

    def __init__(self, data_dir: Path, filename: str = "data.yaml") -> None:
        self.data_dir = data_dir
        self.path = data_dir / filename

    def load(self) -> Ledger:
        """Read the ledger; an absent file is an empty ledger (first run)."""
        if not self.path.exists():
            logger.debug("No ledger file at %s, starting empty", self.path)
            return Ledger()
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Failed to read data file {self.path}: {exc}"
            raise StorageError(msg) from exc
        return parse_ledger(text)

    def save(self, ledger: Ledger) -> None:
        """Write *ledger* via write-then-rename."""
        tmp_path = self.path.with_name(self.path.name + TMP_SUFFIX)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(dump_ledger(ledger), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            with suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            msg = f"Failed to write data file {self.path}: {exc}"
            raise StorageError(msg) from exc
        logger.debug(
            "Saved ledger to %s (%d recurring, %d one-time, %d snapshots)",
            self.path,
            len(ledger.recurring),
            len(ledger.one_time),
            len(ledger.balance_snapshots),
        )

    @contextmanager
    def transaction(self) -> Iterator[LedgerTransaction]:
        """Load, yield a working copy, and save it if anything was staged.

        An exception inside the block discards the staged ledger.
        """
        txn = LedgerTransaction(ledger=self.load())
        yield txn
        if txn.dirty:
            self.save(txn.ledger)

    def mtime(self) -> float | None:
        """Modification time of the data file, or None if it does not exist."""
        try:
            return self.path.stat().st_mtime
        except FileNotFoundError:
            return None
