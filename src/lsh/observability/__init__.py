"""Structured logging."""

from lsh.observability.logging import (
    bind_context,
    clear_context,
    get_logger,
    reset_logging,
    setup_logging,
    unbind_context,
)

__all__ = [
    "bind_context",
    "clear_context",
    "get_logger",
    "reset_logging",
    "setup_logging",
    "unbind_context",
]
