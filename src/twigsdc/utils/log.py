"""structlog configuration shared by the plugin, runtime and CLI."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LEVEL_ENV = "TWIGSDC_LOG_LEVEL"
FORMAT_ENV = "TWIGSDC_LOG_FORMAT"
FORMATS = {"console", "json"}

_configured = False


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # sys.stderr is looked up per call so redirected streams are honoured.
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog; explicit arguments override the environment."""

    global _configured
    level_name = (level or os.getenv(LEVEL_ENV, "INFO")).upper()
    numeric = logging.getLevelName(level_name)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    fmt = (fmt or os.getenv(FORMAT_ENV, "console")).lower()
    if fmt not in FORMATS:
        fmt = "console"

    renderer: Any
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
    _configured = True


def get_logger(name: str) -> Any:
    if not _configured:
        configure_logging()
    return structlog.get_logger(name)
