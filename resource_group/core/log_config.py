"""Structured logging setup.

The library only emits events through ``structlog.get_logger``; applications
that want the default rendering call ``configure_logging()`` once at startup.
"""

import logging
import sys
from typing import Optional

import structlog

from resource_group.core.config import Settings, get_settings


def build_processors(json_output: bool) -> list:
    """Processor chain shared by console and JSON output."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(),
    ]


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog from settings."""
    settings = settings or get_settings()

    # JSON whenever output is not an interactive terminal
    json_output = settings.LOG_JSON or not sys.stdout.isatty()

    structlog.configure(
        processors=build_processors(json_output),
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.LOG_LEVEL)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


__all__ = ["build_processors", "configure_logging"]
