"""
Structured logging configuration.

Use ``get_logger(__name__)`` from this module, not print() or logging.getLogger().
"""
from typing import Optional

import structlog

from companion_service.config.settings import get_settings
from companion_service.infrastructure.observability.context import add_request_id_to_log


def console_renderer_with_colors():
    """Console renderer with colors for local development."""
    return structlog.dev.ConsoleRenderer(
        colors=True,
        pad_event_to=25,
        exception_formatter=structlog.dev.plain_traceback,
    )


def json_renderer():
    """JSON renderer for production."""
    return structlog.processors.JSONRenderer()


def configure_logging() -> None:
    """
    Configure structured logging.

    This sets up:
    - Context variable merging (for log_context usage)
    - Request ID tracking
    - ISO timestamps and log level
    - Exception formatting
    - JSON formatting for production or colored console for development
    """
    settings = get_settings()

    if settings.log_format == "json":
        renderer = json_renderer()
    else:
        renderer = console_renderer_with_colors()

    processors = [
        # Merge context variables (allows log_context to work)
        structlog.contextvars.merge_contextvars,
        add_request_id_to_log,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a logger instance with structured logging support.

    Usage:
        >>> from companion_service.infrastructure.observability.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Companion created", companion_id="...", author="user_123")
    """
    return structlog.get_logger(name)
