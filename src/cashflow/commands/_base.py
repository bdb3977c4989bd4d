"""Click base classes with ``--examples`` and command aliases.

``--examples`` prints usage examples and exits, which keeps ``--help``
short. ``CashflowGroup`` also resolves aliases such as ``rec`` for
``recurring`` and ``del`` for ``delete``. ``DATE`` parses the same date
formats the services accept.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import click


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class CashflowCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class CashflowGroup(click.Group):
    """Click Group with ``--examples`` and alias lookup.

    Subcommands default to :class:`CashflowCommand`, so ``examples=`` works
    without ``cls=`` on every command.
    """

    command_class = CashflowCommand

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        aliases: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        self.aliases: dict[str, str] = dict(aliases or {})
        if examples:
            _add_examples_option(self, examples)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        # Report the canonical name so usage and help text never show an alias.
        _, cmd, rest = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, rest


class DateParamType(click.ParamType):
    """``DD.MM.YYYY`` or ``YYYY-MM-DD`` on the command line."""

    name = "date"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> date:
        if isinstance(value, date):
            return value
        from cashflow.domain.parsing import parse_date

        try:
            return parse_date(str(value))
        except ValueError as exc:
            self.fail(str(exc), param, ctx)


DATE = DateParamType()
