"""AppContext: shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Opens the ledger store lazily and centralizes result
emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cashflow.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from cashflow.config.settings import CashflowSettings
    from cashflow.infrastructure.storage import LedgerStore
    from cashflow.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is created on first use so ``--help``, ``--version`` and
    ``config`` never touch the data directory.
    """

    def __init__(self, settings: CashflowSettings) -> None:
        self.settings = settings
        self._store: LedgerStore | None = None

        from cashflow.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            quiet=settings.quiet,
            log_json=settings.log_json,
            ledger=settings.data_file,
        )

        if settings.verbose:
            from cashflow.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> LedgerStore:
        """The ledger store (created lazily on first access)."""
        if self._store is None:
            from cashflow.infrastructure.storage import LedgerStore

            self._store = LedgerStore(
                self.settings.resolved_data_dir,
                filename=self.settings.storage.filename,
            )
        return self._store

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            display=self.settings.display,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
