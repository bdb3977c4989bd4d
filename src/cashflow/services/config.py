"""ConfigService: report and update the effective configuration."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from cashflow.config.discovery import default_config_path, expand_path, write_data_dir
from cashflow.config.settings import CashflowSettings
from cashflow.infrastructure.storage import LedgerStore
from cashflow.services.result import ServiceResult
from cashflow.services.telemetry import traced

logger = logging.getLogger(__name__)


class ConfigService:
    """Works on settings and the config file rather than the ledger."""

    def __init__(self, settings: CashflowSettings) -> None:
        self._settings = settings

    @traced
    def show(self) -> ServiceResult:
        s = self._settings
        config_file = s.config_path or default_config_path()
        mtime = LedgerStore(s.resolved_data_dir, filename=s.storage.filename).mtime()
        modified = None
        if mtime is not None:
            modified = datetime.fromtimestamp(mtime).isoformat(timespec="seconds")
        return ServiceResult(
            ok=True,
            op="config_show",
            data={
                "config_file": str(config_file),
                "config_exists": s.config_path is not None,
                "data_dir": str(s.resolved_data_dir),
                "data_dir_source": s.data_dir_source,
                "data_file": str(s.data_file),
                "data_file_exists": s.data_file.is_file(),
                "data_file_modified": modified,
                "plan": {
                    "default_days": s.plan.default_days,
                    "warning_threshold": s.plan.warning_threshold,
                },
                "display": s.display.model_dump(),
            },
        )

    @traced
    def set_data_dir(self, raw_path: str | Path) -> ServiceResult:
        """Store an absolute *raw_path* as ``[storage] data_dir``.

        The write goes to the file that was read, or to the default config
        location when none exists yet.
        """
        op = "config_set_data_dir"
        data_dir = expand_path(raw_path)
        config_file = self._settings.config_path or default_config_path()
        try:
            write_data_dir(config_file, data_dir)
        except OSError as exc:
            return ServiceResult.failure(
                op,
                "STORAGE_ERROR",
                f"Cannot write {config_file}: {exc.strerror or exc}",
                {"path": str(config_file)},
            )

        logger.debug("Data directory set to %s in %s", data_dir, config_file)
        warnings: list[str] = []
        if self._settings.data_dir_source in ("cli", "env"):
            warnings.append(
                f"Data directory is currently overridden by {self._settings.data_dir_source}; "
                "the new value applies once the override is removed."
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "data_dir": str(data_dir),
                "config_file": str(config_file),
                "exists": data_dir.is_dir(),
            },
            warnings=warnings,
        )
