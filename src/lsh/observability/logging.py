"""Structured logging for lsh.

Provides structured logging using structlog with JSON output when
requested and pretty-printed console output otherwise. Logs go to stderr
so they never interleave with rendered tables on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from lsh.core.config import GeneralSettings

_configured: bool = False


def _configure_defaults() -> None:
    """Install the quiet configuration used until setup_logging runs.

    Events below WARNING are dropped and the rest go through the standard
    library, so embedding lsh as a library never prints debug events.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def setup_logging(settings: GeneralSettings) -> None:
    """Configure structured logging.

    Args:
        settings: General application settings including log level and format.
    """
    global _configured  # noqa: PLW0603

    if _configured:
        return

    log_level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    renderer: structlog.types.Processor
    if settings.json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    _configured = True


def reset_logging() -> None:
    """Reset logging configuration. Useful for testing."""
    global _configured  # noqa: PLW0603
    _configured = False
    structlog.reset_defaults()
    _configure_defaults()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger.

    Args:
        name: Optional logger name. Defaults to the calling module.

    Returns:
        A bound structlog logger.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


def bind_context(**kwargs: object) -> None:
    """Bind key-value pairs to the logging context.

    These values will be included in all subsequent log entries
    from the current context (e.g., for the duration of one pipeline).

    Args:
        **kwargs: Key-value pairs to bind to the context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    """Remove specific keys from the logging context.

    Args:
        *keys: Keys to remove from the context.
    """
    structlog.contextvars.unbind_contextvars(*keys)


if not structlog.is_configured():
    _configure_defaults()
