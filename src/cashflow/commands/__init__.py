"""Subcommand modules for cashflow.

Provides register_commands() which uses deferred imports to keep
``cashflow --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click

ROOT_ALIASES = {"rec": "recurring", "one": "one-time", "conf": "config"}


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from cashflow.commands.balance import balance
    from cashflow.commands.config_cmd import config_cmd
    from cashflow.commands.one_time import one_time
    from cashflow.commands.recurring import recurring

    cli.add_command(balance)
    cli.add_command(recurring)
    cli.add_command(one_time)
    cli.add_command(config_cmd)

    # --- Standalone commands ---
    from cashflow.commands.export import export
    from cashflow.commands.plan import plan

    cli.add_command(plan)
    cli.add_command(export)
