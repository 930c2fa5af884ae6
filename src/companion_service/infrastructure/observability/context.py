"""
Log context management and request ID tracking.

Values bound here are merged into every structlog entry emitted in the
same context (request, task).

Usage:
    from companion_service.infrastructure.observability.context import log_context

    with log_context(user_id="user_123", companion_id=str(companion.id)):
        logger.info("Bookmark added")  # Includes user_id and companion_id
"""
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Optional

import structlog

# Set by RequestIDMiddleware for the duration of a request
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    """Current request ID, if any."""
    return request_id_var.get()


def set_request_id(request_id: Optional[str]) -> None:
    request_id_var.set(request_id)


def add_request_id_to_log(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Structlog processor adding ``request_id`` to every entry made during a request."""
    request_id = get_request_id()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    return event_dict


@contextmanager
def log_context(**kwargs: Any):
    """
    Context manager for adding context to logs.

    All key-value pairs are included in every log entry made within the
    block and removed on exit.

    Example:
        >>> with log_context(user_id="123", operation="create_companion"):
        ...     logger.info("Starting operation")  # Includes user_id and operation
        >>> logger.info("Outside context")  # Does not
    """
    structlog.contextvars.bind_contextvars(**kwargs)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*kwargs.keys())


def clear_context() -> None:
    """Clear all bound log context (called at the start of each request)."""
    structlog.contextvars.clear_contextvars()
