"""Output-mode dispatch for ServiceResult.

Three modes, checked in order: ``--json`` (the full result as JSON),
``--quiet`` (ids or a one-line status), and the default rich rendering.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from cashflow.config.models import DisplayConfig

if TYPE_CHECKING:
    from cashflow.services.result import ServiceResult


class OutputSettings(BaseModel):
    """How the CLI wants a result presented."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    display: DisplayConfig = Field(default_factory=DisplayConfig)


def format_result(
    result: ServiceResult,
    *,
    settings: OutputSettings | None = None,
    json_output: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        settings: Output mode; when given, *json_output* is ignored.
        json_output: Shorthand for ``OutputSettings(json_output=True)``.
    """
    if settings is None:
        settings = OutputSettings(json_output=json_output)

    if settings.json_output:
        return result.model_dump_json(indent=2)

    from cashflow.output.renderers import render_quiet, render_result

    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose, display=settings.display)
