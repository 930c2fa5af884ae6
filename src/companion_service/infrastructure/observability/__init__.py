"""Observability: structured logging, log context and error tracking."""
from .context import log_context, clear_context, get_request_id, set_request_id
from .logging import configure_logging, get_logger

__all__ = [
    "log_context",
    "clear_context",
    "get_request_id",
    "set_request_id",
    "configure_logging",
    "get_logger",
]
