"""Command: cashflow projection."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import click

from cashflow.commands._base import DATE, CashflowCommand

if TYPE_CHECKING:
    from cashflow.commands._context import AppContext


def run_plan(
    app: AppContext,
    days: int | None = None,
    *,
    show_past: bool = False,
    as_of: date | None = None,
) -> None:
    """Build and emit the plan; also the root command's default action."""
    from cashflow.services.plan import PlanService

    app.emit(
        PlanService(app.store).plan(
            days if days is not None else app.settings.plan.default_days,
            show_past=show_past,
            anchor=as_of,
            warning_threshold=app.settings.plan.warning_threshold,
        )
    )


@click.command(
    cls=CashflowCommand,
    examples="""\
  cashflow plan
  cashflow plan --days 60
  cashflow plan --past
  cashflow plan --as-of 01.12.2025 --days 14
  cashflow --json plan""",
)
@click.option(
    "-d",
    "--days",
    type=click.IntRange(min=0),
    default=None,
    help="Days to project ahead (default from config, 30).",
)
@click.option(
    "--past", "show_past", is_flag=True, help="Also list transactions since the snapshot."
)
@click.option("--as-of", type=DATE, default=None, help="Project as if today were this date.")
@click.pass_obj
def plan(app: AppContext, days: int | None, show_past: bool, as_of: date | None) -> None:
    """Show the projected balance for the coming days."""
    run_plan(app, days, show_past=show_past, as_of=as_of)
