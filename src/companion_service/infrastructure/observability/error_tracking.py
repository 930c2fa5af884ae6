"""
Sentry error tracking integration.

Usage:
    from companion_service.infrastructure.observability.error_tracking import (
        init_sentry,
        capture_exception,
    )

    # Initialize at startup
    init_sentry(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment,
        release=settings.app_version,
    )
"""

import logging
from typing import Any, Optional

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from companion_service.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

# Sensitive header names to filter
SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "x-api-key",
}


def _should_ignore_error(event: dict, hint: dict) -> Optional[dict]:
    """
    Drop expected client errors.

    AppError subclasses carry ``status_code``; anything below 500 is a
    caller mistake (bad filter, missing identity, quota refusal) and is not
    reported.
    """
    if "exc_info" in hint:
        exc_type, exc_value, tb = hint["exc_info"]

        status_code = getattr(exc_value, "status_code", None)
        if status_code is not None and 400 <= status_code < 500:
            return None

        if exc_type.__name__ in ("ValidationError", "RequestValidationError"):
            return None

    return event


def _filter_sensitive_data(event: dict, hint: dict) -> dict:
    """Mask session tokens and cookies from the request headers."""
    if "request" in event and "headers" in event["request"]:
        headers = event["request"]["headers"]
        event["request"]["headers"] = {
            key: "[Filtered]" if key.lower() in SENSITIVE_HEADERS else value
            for key, value in headers.items()
        }
    return event


def _before_send(event: dict, hint: dict) -> Optional[dict]:
    event = _should_ignore_error(event, hint)
    if event is None:
        return None
    return _filter_sensitive_data(event, hint)


def init_sentry(
    dsn: Optional[str] = None,
    environment: Optional[str] = None,
    release: Optional[str] = None,
    sample_rate: float = 1.0,
    traces_sample_rate: float = 0.1,
) -> bool:
    """
    Initialize the Sentry SDK.

    Args:
        dsn: Sentry DSN. If None, Sentry is disabled.
        environment: Environment name (e.g., "prod", "staging")
        release: Release version
        sample_rate: Error sampling rate (0.0 to 1.0)
        traces_sample_rate: Performance tracing sample rate (0.0 to 1.0)

    Returns:
        True if Sentry was initialized, False otherwise
    """
    if not dsn:
        logger.info("Sentry DSN not provided. Error tracking disabled.")
        return False

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            release=release,
            integrations=[
                FastApiIntegration(
                    transaction_style="endpoint",
                    failed_request_status_codes={*range(500, 600)},
                ),
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
                SqlalchemyIntegration(),
            ],
            sample_rate=sample_rate,
            traces_sample_rate=traces_sample_rate,
            before_send=_before_send,
            attach_stacktrace=True,
            send_default_pii=False,
            max_breadcrumbs=50,
        )
    except Exception as e:
        logger.error("Failed to initialize Sentry", error=str(e))
        return False

    logger.info(
        "Sentry initialized",
        environment=environment,
        release=release,
        sample_rate=sample_rate,
        traces_sample_rate=traces_sample_rate,
    )
    return True


def capture_exception(error: Exception, extra: Optional[dict[str, Any]] = None) -> Optional[str]:
    """
    Send an exception to Sentry with optional extra context.

    A no-op (returns None) when Sentry was never initialized.

    Returns:
        Sentry event ID, if the event was sent
    """
    with sentry_sdk.new_scope() as scope:
        for key, value in (extra or {}).items():
            scope.set_extra(key, value)
        return sentry_sdk.capture_exception(error)
