"""Observability module for logging."""

from sapoci_connect.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
    parse_log_level,
)


__all__ = [
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
    "get_logger",
    "parse_log_level",
]
