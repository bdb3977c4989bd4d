"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from cashflow.config.models import DisplayConfig
from cashflow.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from cashflow.services.result import ServiceResult

ONE_TIME_MARKER = "*"


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    verbose: bool = False,
    display: DisplayConfig | None = None,
) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()
    display = display or DisplayConfig()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose, display=display)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["short_id"]) for item in items if "short_id" in item)
    if result.op == "plan":
        return str(result.data["starting_balance"])

    return f"OK: {result.op}"


def format_amount(amount: Decimal, display: DisplayConfig | None = None) -> str:
    """Whole units with grouped thousands and the currency suffix.

    Examples:
        >>> format_amount(Decimal("22158"))
        '22 158 Kč'
        >>> format_amount(Decimal("-478.60"))
        '-478 Kč'
    """
    display = display or DisplayConfig()
    whole = f"{int(abs(amount)):,}".replace(",", display.thousands_separator)
    sign = "-" if amount.is_signed() else ""
    return f"{sign}{whole} {display.currency}"


def format_date(value: date, display: DisplayConfig | None = None) -> str:
    display = display or DisplayConfig()
    return value.strftime(display.date_format)


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK/ERROR status line."""
    label = Text("OK", style="cf.ok")
    op = Text(f"  {result.op}", style="cf.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="cf.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="cf.id")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _amount_text(amount: Decimal, display: DisplayConfig) -> Text:
    style = "cf.expense" if amount < 0 else "cf.income"
    return Text(format_amount(amount, display), style=style)


def _balance_text(balance: Decimal, threshold: Decimal, display: DisplayConfig) -> Text:
    if balance < 0:
        style = "cf.balance.negative"
    elif balance < threshold:
        style = "cf.balance.low"
    else:
        style = "cf.balance"
    return Text(format_amount(balance, display), style=style)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"
    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {span_data.get('name', '?')}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})"
    console.print(line)
    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="cf.error")
    op = Text(f"  {result.op}", style="cf.op")
    console.print(label, op, Text(": "), msg, sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Plan ──────────────────────────────────────────────────────────────


def _transaction_row(
    table: Table,
    row: dict[str, Any],
    threshold: Decimal,
    display: DisplayConfig,
    *,
    past: bool = False,
) -> None:
    description = row["description"]
    if row["one_time"]:
        description = f"{description} {ONE_TIME_MARKER}"
    text_style = "cf.history" if past else ""
    table.add_row(
        Text(format_date(row["date"], display), style=text_style),
        Text(description, style=text_style),
        _amount_text(row["amount"], display),
        _balance_text(row["balance_after"], threshold, display),
    )


def _render_plan(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    display: DisplayConfig,
) -> None:
    """Render the projection table followed by the period summary."""
    d = result.data
    threshold: Decimal = d["warning_threshold"]
    upcoming: list[dict[str, Any]] = d["upcoming"]

    if not upcoming and not d.get("history"):
        console.print(f"No transactions scheduled for the next {d['days']} days.")
        console.print(
            "Current balance: ",
            _balance_text(d["starting_balance"], threshold, display),
            sep="",
        )
        if verbose:
            _render_meta(console, result)
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Date", no_wrap=True)
    table.add_column("Description")
    table.add_column("Amount", justify="right", no_wrap=True)
    table.add_column("Balance", justify="right", no_wrap=True)

    snapshot = d["snapshot"]
    table.add_row(
        Text(format_date(snapshot["date"], display), style="cf.history"),
        Text("Balance snapshot", style="bold dim"),
        "",
        Text(format_amount(snapshot["balance"], display), style="cf.balance"),
    )
    for row in d.get("history", []):
        _transaction_row(table, row, threshold, display, past=True)
    table.add_row(
        format_date(d["anchor_date"], display),
        Text("Current balance", style="bold"),
        "",
        Text(format_amount(d["starting_balance"], display), style="cf.balance"),
    )
    for row in upcoming:
        _transaction_row(table, row, threshold, display)

    console.print(table)
    console.print()

    if upcoming:
        console.print("Total change: ", _amount_text(d["total_change"], display), sep="")
    lowest = Text(
        format_amount(d["min_balance"], display),
        style="cf.balance.low" if d["below_threshold"] else "",
    )
    console.print(
        "Lowest balance: ",
        lowest,
        f" ({format_date(d['min_balance_date'], display)})",
        sep="",
    )
    if not upcoming:
        console.print(f"No transactions scheduled for the next {d['days']} days.")

    console.print()
    console.print(Text(f"{ONE_TIME_MARKER} = one-time transaction", style="dim"))
    if d["below_threshold"]:
        console.print(
            Text(
                f"Warning: balance drops below {format_amount(threshold, display)}",
                style="cf.warning",
            )
        )
    if verbose:
        _render_meta(console, result)


# ── Balance ───────────────────────────────────────────────────────────


def _render_balance(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    display: DisplayConfig,
) -> None:
    d = result.data
    if result.op == "balance_set":
        verb = "updated" if d.get("action") == "updated" else "set"
        console.print(
            Text(f"Balance {verb}: ", style="cf.ok"),
            Text(format_amount(d["balance"], display), style="cf.balance"),
            f" ({format_date(d['date'], display)})",
            sep="",
        )
    else:
        console.print(
            "Balance: ",
            Text(format_amount(d["balance"], display), style="cf.balance"),
            f" as of {format_date(d['date'], display)}",
            sep="",
        )
        if verbose:
            _field(console, "snapshots", d.get("snapshot_count", 0))
    if verbose:
        _render_meta(console, result)


# ── Recurring / one-time ──────────────────────────────────────────────


def _render_recurring_list(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    display: DisplayConfig,
) -> None:
    items: list[dict[str, Any]] = result.data.get("items", [])
    if not items:
        console.print("No recurring transactions. Add one with: cashflow recurring add")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="cf.id", no_wrap=True)
    table.add_column("Day", justify="right")
    table.add_column("Description")
    table.add_column("Amount", justify="right", no_wrap=True)
    table.add_column("Active")
    if verbose:
        table.add_column("Created", style="dim")

    for item in items:
        row: list[Any] = [
            item["short_id"],
            str(item["day_of_month"]),
            Text(item["description"], style="" if item["active"] else "cf.inactive"),
            _amount_text(item["amount"], display),
            "yes" if item["active"] else Text("no", style="cf.inactive"),
        ]
        if verbose:
            row.append(str(item["created_at"]))
        table.add_row(*row)

    console.print(table)
    console.print(
        f"\n{result.data.get('count', len(items))} rules, "
        f"monthly total {format_amount(result.data.get('monthly_total', Decimal(0)), display)}"
    )


def _render_one_time_list(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    display: DisplayConfig,
) -> None:
    items: list[dict[str, Any]] = result.data.get("items", [])
    if not items:
        scope = "upcoming " if result.data.get("upcoming") else ""
        console.print(f"No {scope}one-time transactions.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="cf.id", no_wrap=True)
    table.add_column("Date", no_wrap=True)
    table.add_column("Description")
    table.add_column("Amount", justify="right", no_wrap=True)
    if verbose:
        table.add_column("Created", style="dim")

    for item in items:
        row: list[Any] = [
            item["short_id"],
            format_date(item["date"], display),
            item["description"],
            _amount_text(item["amount"], display),
        ]
        if verbose:
            row.append(str(item["created_at"]))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} transactions")


def _render_record(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    display: DisplayConfig,
) -> None:
    """Render add/edit/enable/disable/delete of a single record."""
    _status_line(console, result)
    d = result.data
    _field(console, "id", d.get("short_id", d.get("id")))
    _field(console, "description", d["description"])
    _field(console, "amount", format_amount(d["amount"], display))
    if "day_of_month" in d:
        _field(console, "day", d["day_of_month"])
        _field(console, "active", "yes" if d["active"] else "no")
    if "date" in d:
        _field(console, "date", format_date(d["date"], display))
    if d.get("fields_changed"):
        _field(console, "fields_changed", ", ".join(d["fields_changed"]))
    if verbose:
        _render_meta(console, result)


# ── Export / config ───────────────────────────────────────────────────


def _render_export(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    display: DisplayConfig,
) -> None:
    """Render export results with output path and counts."""
    _status_line(console, result)
    d = result.data
    for key in ("path", "format", "recurring_count", "one_time_count"):
        if key in d:
            _field(console, key, d[key])
    if verbose:
        _render_meta(console, result)


def _render_config(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    display: DisplayConfig,
) -> None:
    d = result.data
    exists = "" if d["config_exists"] else " (not created yet)"
    console.print(Text("Configuration", style="bold"))
    _field(console, "config file", f"{d['config_file']}{exists}")
    _field(console, "data dir", f"{d['data_dir']} (from {d['data_dir_source']})")
    _field(console, "data file", d["data_file"])
    _field(console, "last modified", d["data_file_modified"] or "never (no ledger yet)")
    _field(console, "default days", d["plan"]["default_days"])
    _field(
        console,
        "warning threshold",
        format_amount(d["plan"]["warning_threshold"], display),
    )
    _field(console, "currency", d["display"]["currency"])
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    display: DisplayConfig,
) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":"), default=str))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "plan": _render_plan,
    # Balance
    "balance_set": _render_balance,
    "balance_show": _render_balance,
    # Recurring
    "recurring_add": _render_record,
    "recurring_edit": _render_record,
    "recurring_enable": _render_record,
    "recurring_disable": _render_record,
    "recurring_delete": _render_record,
    "recurring_list": _render_recurring_list,
    # One-time
    "one_time_add": _render_record,
    "one_time_edit": _render_record,
    "one_time_delete": _render_record,
    "one_time_list": _render_one_time_list,
    # Export / config
    "export": _render_export,
    "config_show": _render_config,
}
