"""Command: ledger export (JSON or CSV)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from cashflow.commands._base import CashflowCommand

if TYPE_CHECKING:
    from cashflow.commands._context import AppContext


@click.command(
    cls=CashflowCommand,
    examples="""\
  cashflow export
  cashflow export --format csv > cashflow.csv
  cashflow export -f json -o backup.json""",
)
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(["json", "csv"], case_sensitive=False),
    default="json",
    help="Output format.",
)
@click.option(
    "-o",
    "--output",
    "output_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (omit to print to stdout).",
)
@click.pass_obj
def export(app: AppContext, fmt: str, output_file: str | None) -> None:
    """Export all recurring and one-time transactions."""
    from cashflow.services.export import ExportService

    destination = Path(output_file) if output_file else None
    result = ExportService(app.store).export(fmt, destination=destination)

    if not result.ok or destination is not None or app.settings.json_output:
        app.emit(result)
        return

    # Pipe-friendly: raw content to stdout
    click.echo(result.data["content"], nl=False)
