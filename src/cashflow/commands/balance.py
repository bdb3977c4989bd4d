"""Command group: balance snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cashflow.commands._base import CashflowGroup

if TYPE_CHECKING:
    from cashflow.commands._context import AppContext


@click.group(
    cls=CashflowGroup,
    examples="""\
  cashflow balance set 22158
  cashflow balance set "22 158" --date 01.12.2025
  cashflow balance show""",
)
def balance() -> None:
    """Record or show the account balance."""


@balance.command(
    "set",
    context_settings={"ignore_unknown_options": True},
    examples="""\
  cashflow balance set 22158
  cashflow balance set 22 158
  cashflow balance set -478 --date 2025-12-01""",
)
@click.argument("amount", nargs=-1, required=True)
@click.option("--date", "on", default=None, help="Snapshot date, DD.MM.YYYY (default: today).")
@click.pass_obj
def set_balance(app: AppContext, amount: tuple[str, ...], on: str | None) -> None:
    """Set the balance as of today (or --date)."""
    from cashflow.services.balance import BalanceService

    app.emit(BalanceService(app.store).set_balance(" ".join(amount), on=on))


@balance.command("show")
@click.pass_obj
def show_balance(app: AppContext) -> None:
    """Show the latest balance snapshot."""
    from cashflow.services.balance import BalanceService

    app.emit(BalanceService(app.store).show())
