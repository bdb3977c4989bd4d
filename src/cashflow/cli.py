"""Root CLI group for cashflow with global flags and command registration."""

from __future__ import annotations

import click

from cashflow import __version__
from cashflow.commands import ROOT_ALIASES, register_commands
from cashflow.commands._base import CashflowGroup
from cashflow.commands._context import AppContext
from cashflow.config.settings import CashflowSettings


@click.group(
    cls=CashflowGroup,
    invoke_without_command=True,
    aliases=ROOT_ALIASES,
    examples="""\
  cashflow
  cashflow balance set 22158
  cashflow recurring add -d "Salary" -a 45000 --day 10
  cashflow one-time add -d "Car service" -a -6200 --date 15.12.2025
  cashflow plan --days 60 --past""",
)
@click.version_option(version=__version__, prog_name="cashflow")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Override the data directory.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    data_dir: str | None,
) -> None:
    """cashflow: monthly cashflow planner.

    Run without a command to see the plan for the next days.
    """
    settings = CashflowSettings.from_cli(
        config_path=config_path,
        data_dir=data_dir,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        from cashflow.commands.plan import run_plan

        run_plan(ctx.obj)


register_commands(cli)
