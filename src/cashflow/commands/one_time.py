"""Command group: one-time transactions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cashflow.commands._base import CashflowGroup

if TYPE_CHECKING:
    from cashflow.commands._context import AppContext
    from cashflow.services.one_time import OneTimeService


@click.group(
    "one-time",
    cls=CashflowGroup,
    examples="""\
  cashflow one-time add -d "Car service" -a -6200 --date 15.12.2025
  cashflow one list --upcoming
  cashflow one-time edit 9b41d7aa --date 20.12.2025
  cashflow one del 9b41d7aa""",
    aliases={"del": "delete", "ls": "list"},
)
def one_time() -> None:
    """Manage transactions that happen once."""


def _service(app: AppContext) -> OneTimeService:
    from cashflow.services.one_time import OneTimeService

    return OneTimeService(app.store)


@one_time.command()
@click.option("-d", "--description", required=True, help="What the payment is for.")
@click.option("-a", "--amount", required=True, help="Signed amount; negative for expenses.")
@click.option("--date", "on", required=True, help="DD.MM.YYYY or YYYY-MM-DD.")
@click.pass_obj
def add(app: AppContext, description: str, amount: str, on: str) -> None:
    """Add a one-time transaction."""
    app.emit(_service(app).add(description, amount, on))


@one_time.command("list")
@click.option("--upcoming", is_flag=True, help="Only transactions dated today or later.")
@click.pass_obj
def list_cmd(app: AppContext, upcoming: bool) -> None:
    """List one-time transactions by date."""
    app.emit(_service(app).list_entries(upcoming=upcoming))


@one_time.command()
@click.argument("record_id")
@click.option("-a", "--amount", default=None, help="New amount.")
@click.option("--date", "on", default=None, help="New date.")
@click.option("-d", "--description", default=None, help="New description.")
@click.pass_obj
def edit(
    app: AppContext,
    record_id: str,
    amount: str | None,
    on: str | None,
    description: str | None,
) -> None:
    """Edit a one-time transaction by ID (or its first 8 characters)."""
    app.emit(_service(app).edit(record_id, amount=amount, on=on, description=description))


@one_time.command()
@click.argument("record_id")
@click.pass_obj
def delete(app: AppContext, record_id: str) -> None:
    """Delete a one-time transaction."""
    app.emit(_service(app).delete(record_id))
