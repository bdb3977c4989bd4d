"""ExportService: dump the ledger as JSON or CSV."""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path

from cashflow.domain.models import Ledger
from cashflow.infrastructure.storage import StorageError
from cashflow.services.base import BaseService
from cashflow.services.result import ServiceResult
from cashflow.services.telemetry import traced

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "csv")
CSV_HEADER = ("Type", "Description", "Amount", "Date/Day", "Active")


def ledger_to_json(ledger: Ledger) -> str:
    return json.dumps(ledger.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"


def ledger_to_csv(ledger: Ledger) -> str:
    """Recurring rules first, then one-time entries; snapshots are not exported."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for rule in ledger.recurring:
        active = "true" if rule.active else "false"
        writer.writerow(["recurring", rule.description, rule.amount, rule.day_of_month, active])
    for entry in ledger.one_time:
        writer.writerow(["one-time", entry.description, entry.amount, entry.date.isoformat(), ""])
    return buffer.getvalue()


_RENDERERS = {"json": ledger_to_json, "csv": ledger_to_csv}


class ExportService(BaseService):
    """Serializes the whole ledger for use outside cashflow."""

    @traced
    def export(self, fmt: str = "json", *, destination: Path | None = None) -> ServiceResult:
        """Render the ledger as *fmt*; write it to *destination* when given."""
        op = "export"
        render = _RENDERERS.get(fmt.lower())
        if render is None:
            return ServiceResult.failure(
                op,
                "INVALID_FORMAT",
                f"Unsupported format: {fmt}. Use 'json' or 'csv'",
                {"formats": list(EXPORT_FORMATS)},
            )

        try:
            ledger = self._store.load()
        except StorageError as exc:
            return self._storage_failure(op, exc)

        content = render(ledger)
        data = {
            "format": fmt.lower(),
            "recurring_count": len(ledger.recurring),
            "one_time_count": len(ledger.one_time),
            "content": content,
        }

        if destination is not None:
            try:
                destination.write_text(content, encoding="utf-8")
            except OSError as exc:
                return ServiceResult.failure(
                    op,
                    "STORAGE_ERROR",
                    f"Cannot write {destination}: {exc.strerror or exc}",
                    {"path": str(destination)},
                )
            logger.debug("Exported %s to %s", fmt, destination)
            data["path"] = str(destination)

        return ServiceResult(ok=True, op=op, data=data)
