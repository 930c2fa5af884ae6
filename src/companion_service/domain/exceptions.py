"""
Exception hierarchy for the companion service.

Every exception raised deliberately by the service inherits from AppError,
which carries:
- error_code: Machine-readable error code (from ErrorCode enum)
- status_code: HTTP status code for API responses
- message: Human-readable error message
- details: Optional dictionary with additional context
- suggested_action: Optional user-friendly suggestion for resolution

Usage:
    from companion_service.domain.exceptions import StoreError, CompanionNotFound

    raise CompanionNotFound(details={"companion_id": str(companion_id)})

    raise StoreError.from_store_error(exc, operation="insert companion")
"""

from typing import Any, Optional
from companion_service.api.schemas.errors import ErrorCode


class AppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        error_code: Machine-readable error code (from ErrorCode enum)
        status_code: HTTP status code (default: 500)
        message: Human-readable error message
        details: Optional dictionary with additional error context
        suggested_action: Optional user-friendly suggestion for resolution
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    default_message: str = "An unexpected error occurred"
    default_suggested_action: Optional[str] = None

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        suggested_action: Optional[str] = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Custom error message (uses default_message if not provided)
            details: Additional context about the error
            suggested_action: User-friendly suggestion (uses default_suggested_action if not provided)
        """
        self.message = message or self.default_message
        self.details = details or {}
        self.suggested_action = suggested_action or self.default_suggested_action
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"error_code={self.error_code.value}, "
            f"status_code={self.status_code}, "
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )


# ========================================
# Authentication Errors (401)
# ========================================


class AuthError(AppError):
    """No resolved identity for an operation that requires one."""

    status_code = 401
    error_code = ErrorCode.UNAUTHORIZED
    default_message = "Authentication required"
    default_suggested_action = "Please sign in and try again"


class TokenExpired(AuthError):
    """Session token has expired."""

    error_code = ErrorCode.TOKEN_EXPIRED
    default_message = "Session token has expired"
    default_suggested_action = "Please refresh your session or sign in again"


class TokenInvalid(AuthError):
    """Session token failed verification."""

    error_code = ErrorCode.TOKEN_INVALID
    default_message = "Session token is invalid"
    default_suggested_action = "Please sign in again to obtain a valid session"


# ========================================
# Authorization Errors (403)
# ========================================


class CompanionLimitReached(AppError):
    """Caller's entitlement does not allow another companion."""

    status_code = 403
    error_code = ErrorCode.COMPANION_LIMIT_REACHED
    default_message = "You have reached the companion limit for your plan"
    default_suggested_action = "Upgrade your plan to create more companions"


# ========================================
# Validation Errors (400)
# ========================================


class ValidationError(AppError):
    """Request validation failed."""

    status_code = 400
    error_code = ErrorCode.VALIDATION_ERROR
    default_message = "Request validation failed"
    default_suggested_action = "Please check your input and try again"


class InvalidParameter(ValidationError):
    """Invalid query or path parameter."""

    error_code = ErrorCode.INVALID_PARAMETER
    default_message = "Invalid parameter provided"
    default_suggested_action = "Please check the parameter values and try again"


# ========================================
# Resource Errors (404)
# ========================================


class NotFound(AppError):
    """Resource not found."""

    status_code = 404
    error_code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"
    default_suggested_action = "Please check the resource ID and try again"


class CompanionNotFound(NotFound):
    """Companion not found."""

    error_code = ErrorCode.COMPANION_NOT_FOUND
    default_message = "Companion not found"
    default_suggested_action = "Please verify the companion ID or pick one from the library"


# ========================================
# Data Store Errors (500)
# ========================================


class StoreError(AppError):
    """
    The data store rejected a read or write.

    The store's own message is preserved in ``message`` so callers can
    surface it unchanged.
    """

    status_code = 500
    error_code = ErrorCode.DATABASE_ERROR
    default_message = "Data store operation failed"
    default_suggested_action = "Please try again later. If the problem persists, contact support"

    @classmethod
    def from_store_error(cls, exc: Exception, operation: str | None = None) -> "StoreError":
        """
        Wrap a driver/ORM exception, keeping the store's message.

        SQLAlchemy wraps DBAPI errors; the original driver message lives on
        ``exc.orig`` when present.
        """
        store_message = str(getattr(exc, "orig", None) or exc)
        details: dict[str, Any] = {"error_type": type(exc).__name__}
        if operation:
            details["operation"] = operation
        return cls(message=store_message, details=details)


class ServiceUnavailable(AppError):
    """Service temporarily unavailable."""

    status_code = 503
    error_code = ErrorCode.SERVICE_UNAVAILABLE
    default_message = "Service temporarily unavailable"
    default_suggested_action = "The service is temporarily unavailable. Please try again in a few moments"
