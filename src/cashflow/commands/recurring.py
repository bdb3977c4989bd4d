"""Command group: recurring monthly transactions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cashflow.commands._base import CashflowGroup

if TYPE_CHECKING:
    from cashflow.commands._context import AppContext
    from cashflow.services.recurring import RecurringService

_RECURRING_EXAMPLES = """\
  cashflow recurring add -d "Salary" -a 45000 --day 10
  cashflow rec add -d "Rent" -a -18500 --day 1
  cashflow recurring list
  cashflow recurring edit 3f2a9c1e --amount -19000
  cashflow recurring disable 3f2a9c1e
  cashflow rec del 3f2a9c1e"""


@click.group(
    cls=CashflowGroup,
    examples=_RECURRING_EXAMPLES,
    aliases={"del": "delete", "ls": "list"},
)
def recurring() -> None:
    """Manage transactions that repeat every month."""


def _service(app: AppContext) -> RecurringService:
    from cashflow.services.recurring import RecurringService

    return RecurringService(app.store)


@recurring.command(
    examples="""\
  cashflow recurring add -d "Salary" -a 45000 --day 10
  cashflow recurring add -d "Rent" -a "-18 500" --day 31"""
)
@click.option("-d", "--description", required=True, help="What the payment is for.")
@click.option("-a", "--amount", required=True, help="Signed amount; negative for expenses.")
@click.option("--day", type=int, required=True, help="Day of month (1-31).")
@click.pass_obj
def add(app: AppContext, description: str, amount: str, day: int) -> None:
    """Add a recurring transaction.

    Days past the end of a short month fall on its last day.
    """
    app.emit(_service(app).add(description, amount, day))


@recurring.command("list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List recurring transactions by day of month."""
    app.emit(_service(app).list_rules())


@recurring.command(
    examples="""\
  cashflow recurring edit 3f2a9c1e --amount -19000
  cashflow recurring edit 3f2a9c1e --day 15 --description Mortgage"""
)
@click.argument("record_id")
@click.option("-a", "--amount", default=None, help="New amount.")
@click.option("--day", type=int, default=None, help="New day of month.")
@click.option("-d", "--description", default=None, help="New description.")
@click.pass_obj
def edit(
    app: AppContext,
    record_id: str,
    amount: str | None,
    day: int | None,
    description: str | None,
) -> None:
    """Edit a recurring transaction by ID (or its first 8 characters)."""
    app.emit(_service(app).edit(record_id, amount=amount, day=day, description=description))


@recurring.command()
@click.argument("record_id")
@click.pass_obj
def enable(app: AppContext, record_id: str) -> None:
    """Include a disabled transaction in projections again."""
    app.emit(_service(app).enable(record_id))


@recurring.command()
@click.argument("record_id")
@click.pass_obj
def disable(app: AppContext, record_id: str) -> None:
    """Exclude a transaction from projections without deleting it."""
    app.emit(_service(app).disable(record_id))


@recurring.command()
@click.argument("record_id")
@click.pass_obj
def delete(app: AppContext, record_id: str) -> None:
    """Delete a recurring transaction."""
    app.emit(_service(app).delete(record_id))
