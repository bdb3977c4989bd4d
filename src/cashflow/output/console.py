"""Rich Console factory and theme for cashflow output.

Consoles render into a StringIO buffer so renderers keep the
``format_result() -> str`` contract. Rich drops color codes on its own
when the output is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CASHFLOW_THEME = Theme(
    {
        "cf.ok": "bold green",
        "cf.error": "bold red",
        "cf.warning": "bold yellow",
        "cf.op": "bold cyan",
        "cf.key": "dim",
        "cf.id": "bold blue",
        "cf.income": "green",
        "cf.expense": "red",
        "cf.balance": "cyan",
        "cf.balance.low": "yellow",
        "cf.balance.negative": "bold red",
        "cf.history": "dim",
        "cf.one_time": "magenta",
        "cf.inactive": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=CASHFLOW_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
