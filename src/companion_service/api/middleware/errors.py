"""
Error handling for FastAPI.

This module provides:
- Exception handlers for all AppError subclasses
- Structured error responses with error codes and request IDs
- Validation error handling with field-level details (400)
- Sentry reporting and traceback logging for 5xx errors
- Production-safe messages for unexpected errors

Usage:
    from fastapi import FastAPI
    from companion_service.api.middleware.errors import register_error_handlers

    app = FastAPI()
    register_error_handlers(app)
"""

import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from companion_service.api.schemas.errors import ErrorCode, ErrorDetail, FieldError
from companion_service.config.settings import get_settings
from companion_service.domain.exceptions import AppError, StoreError
from companion_service.infrastructure.observability.error_tracking import capture_exception
from companion_service.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

# Friendlier wording for common pydantic error types
_VALIDATION_MESSAGES = {
    "missing": "This field is required",
    "string_type": "Must be a valid string",
    "string_too_short": "Must not be empty",
    "int_parsing": "Must be a valid integer",
    "int_type": "Must be a valid integer",
    "greater_than_equal": "Must be at least 1",
    "enum": "Must be one of the allowed values",
}


def _get_request_id(request: Request) -> str:
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return str(uuid.uuid4())


def _create_error_response(
    error_code: ErrorCode,
    message: str,
    request_id: str,
    status_code: int,
    details: Optional[list[FieldError]] = None,
    context: Optional[dict[str, Any]] = None,
    suggested_action: Optional[str] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    error_detail = ErrorDetail(
        code=error_code,
        message=message,
        details=details,
        context=context,
    )

    content: dict[str, Any] = {
        "error": error_detail.model_dump(mode="json", exclude_none=True),
        "request_id": request_id,
    }
    if suggested_action:
        content["suggested_action"] = suggested_action

    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _report_server_error(request: Request, error: Exception, request_id: str) -> None:
    """Log with traceback and forward to Sentry."""
    logger.error(
        "Server error",
        path=request.url.path,
        method=request.method,
        error_type=type(error).__name__,
        error=str(error),
        exc_info=error,
    )
    capture_exception(
        error,
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Register all error handlers for the FastAPI application.

    Example:
        >>> app = FastAPI()
        >>> register_error_handlers(app)
    """
    settings = get_settings()

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        request_id = _get_request_id(request)

        if exc.status_code >= 500:
            _report_server_error(request, exc, request_id)
        elif exc.status_code in (401, 403):
            logger.warning(
                "Authentication/Authorization error",
                path=request.url.path,
                method=request.method,
                error_code=exc.error_code.value,
            )

        message = exc.message
        context = exc.details or None
        # The store message can reveal schema details
        if settings.is_production and isinstance(exc, StoreError):
            message = exc.default_message
            context = None

        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None

        return _create_error_response(
            error_code=exc.error_code,
            message=message,
            request_id=request_id,
            status_code=exc.status_code,
            context=context,
            suggested_action=exc.suggested_action,
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        request_id = _get_request_id(request)

        field_errors = []
        for error in exc.errors():
            error_type = error.get("type", "")
            field_errors.append(
                FieldError(
                    field=".".join(str(loc) for loc in error.get("loc", [])),
                    message=_VALIDATION_MESSAGES.get(error_type, error.get("msg", "Validation error")),
                    code=error_type.upper(),
                    value=error.get("input"),
                )
            )

        logger.info(
            "Validation error",
            path=request.url.path,
            method=request.method,
            field_count=len(field_errors),
        )

        return _create_error_response(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="Request validation failed",
            request_id=request_id,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=field_errors,
            suggested_action="Please check your input and ensure all required fields are provided correctly",
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = _get_request_id(request)
        _report_server_error(request, exc, request_id)

        message = "An unexpected error occurred"
        context = None
        if not settings.is_production:
            context = {"exception_type": type(exc).__name__, "exception_message": str(exc)}

        return _create_error_response(
            error_code=ErrorCode.INTERNAL_ERROR,
            message=message,
            request_id=request_id,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            context=context,
            suggested_action="Please try again later. If the problem persists, contact support",
        )
