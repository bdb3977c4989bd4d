"""Command group: configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cashflow.commands._base import CashflowGroup

if TYPE_CHECKING:
    from cashflow.commands._context import AppContext


@click.group(
    "config",
    cls=CashflowGroup,
    examples="""\
  cashflow config show
  cashflow config set-data-dir ~/Dropbox/cashflow
  CASHFLOW_DATA_DIR=/tmp/cf cashflow config show""",
)
def config_cmd() -> None:
    """Show or change where cashflow keeps its data."""


@config_cmd.command("show")
@click.pass_obj
def show(app: AppContext) -> None:
    """Show the effective configuration and where it comes from."""
    from cashflow.services.config import ConfigService

    app.emit(ConfigService(app.settings).show())


@config_cmd.command("set-data-dir")
@click.argument("path", type=click.Path(file_okay=False))
@click.pass_obj
def set_data_dir(app: AppContext, path: str) -> None:
    """Store PATH as the data directory in the config file."""
    from cashflow.services.config import ConfigService

    app.emit(ConfigService(app.settings).set_data_dir(path))
