"""Error response schemas and error codes."""

from enum import Enum
from typing import Any
from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """
    Standard error codes for API responses.

    Codes are grouped by the HTTP status they are normally returned with.
    """

    # ===== Validation Errors (400) =====
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed (400)"""

    INVALID_PARAMETER = "INVALID_PARAMETER"
    """Invalid query parameter or path parameter (400)"""

    # ===== Authentication Errors (401) =====
    UNAUTHORIZED = "UNAUTHORIZED"
    """Authentication required (401)"""

    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    """Session token has expired (401)"""

    TOKEN_INVALID = "TOKEN_INVALID"
    """Session token is invalid (401)"""

    # ===== Authorization Errors (403) =====
    COMPANION_LIMIT_REACHED = "COMPANION_LIMIT_REACHED"
    """Caller's plan does not allow another companion (403)"""

    # ===== Not Found Errors (404) =====
    NOT_FOUND = "NOT_FOUND"
    """Resource not found (404)"""

    COMPANION_NOT_FOUND = "COMPANION_NOT_FOUND"
    """Companion not found (404)"""

    # ===== Server Errors (500) =====
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """Internal server error (500)"""

    DATABASE_ERROR = "DATABASE_ERROR"
    """Data store rejected the operation (500)"""

    # ===== Service Unavailable (503) =====
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    """Service temporarily unavailable (503)"""


class FieldError(BaseModel):
    """
    Detailed error information for a specific field.

    Used in validation errors to provide field-level error details.
    """

    model_config = {"str_strip_whitespace": True}

    field: str = Field(
        ...,
        description="Field name or path (e.g., 'name', 'body.duration')",
        examples=["name", "body.duration"]
    )
    message: str = Field(
        ...,
        description="Human-readable error message for this field",
        examples=["This field is required", "Input should be greater than or equal to 1"]
    )
    code: str | None = Field(
        default=None,
        description="Optional machine-readable error code for this field",
        examples=["MISSING", "GREATER_THAN_EQUAL"]
    )
    value: Any | None = Field(
        default=None,
        description="The invalid value that was provided",
        examples=["", 0]
    )


class ErrorDetail(BaseModel):
    """
    Detailed error information.

    Carries the machine-readable code, a human-readable message and,
    for validation failures, one FieldError per offending field.
    """

    model_config = {"str_strip_whitespace": True}

    code: ErrorCode = Field(
        ...,
        description="Machine-readable error code",
        examples=[ErrorCode.VALIDATION_ERROR, ErrorCode.COMPANION_NOT_FOUND]
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Request validation failed", "Companion not found"]
    )
    details: list[FieldError] | None = Field(
        default=None,
        description="Field-level error details (primarily for validation errors)",
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Additional error context (e.g., companion id, store message)",
        examples=[{"companion_id": "6f1c..."}]
    )
