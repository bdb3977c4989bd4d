"""structlog configuration for cashflow.

Diagnostics go to stderr so stdout stays clean for plan tables and
``--json`` payloads. Two renderers:
- Human (default): colored console output
- JSON (--log-json): one object per line, money and dates as plain strings

Every event carries the ledger file it concerns, bound once per
invocation through structlog's contextvars.
"""

from __future__ import annotations

import logging
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any
from uuid import UUID

import structlog

# Libraries that log below WARNING on their own.
_NOISY_LOGGERS = ("ruamel", "ruamel.yaml")


def _app_level(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def _ledger_values(
    _logger: Any, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Render amounts, dates, record ids and paths as plain strings.

    ``Decimal("-478.50")`` becomes ``"-478.50"`` rather than its repr, so
    JSON log lines match the values in ``--json`` output.
    """
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = format(value, "f")
        elif isinstance(value, date):
            event_dict[key] = value.isoformat()
        elif isinstance(value, (UUID, Path)):
            event_dict[key] = str(value)
    return event_dict


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
    ledger: Path | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level output. When False, only WARNING+.
        quiet: Only ERROR+ from cashflow loggers. Ignored when *verbose*.
        log_json: Use JSON renderer instead of console renderer.
        ledger: Data file bound to every event as ``ledger``.
    """
    structlog.contextvars.clear_contextvars()
    if ledger is not None:
        structlog.contextvars.bind_contextvars(ledger=str(ledger))

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _ledger_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("cashflow").setLevel(_app_level(verbose=verbose, quiet=quiet))
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
