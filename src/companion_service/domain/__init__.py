"""Domain rules, catalogs and exceptions."""

from companion_service.domain.exceptions import (
    AppError,
    AuthError,
    TokenExpired,
    TokenInvalid,
    CompanionLimitReached,
    ValidationError,
    InvalidParameter,
    NotFound,
    CompanionNotFound,
    StoreError,
    ServiceUnavailable,
)
from companion_service.domain.entitlements import (
    EntitlementPredicate,
    CreationQuota,
    PRO_PLAN,
    THREE_COMPANION_LIMIT,
    TEN_COMPANION_LIMIT,
    resolve_companion_cap,
    is_within_cap,
)
from companion_service.domain.filters import (
    CompanionFilter,
    NoFilter,
    SubjectOnly,
    TopicOnly,
    SubjectAndTopic,
    build_companion_filter,
)

__all__ = [
    # Exceptions
    "AppError",
    "AuthError",
    "TokenExpired",
    "TokenInvalid",
    "CompanionLimitReached",
    "ValidationError",
    "InvalidParameter",
    "NotFound",
    "CompanionNotFound",
    "StoreError",
    "ServiceUnavailable",
    # Entitlements
    "EntitlementPredicate",
    "CreationQuota",
    "PRO_PLAN",
    "THREE_COMPANION_LIMIT",
    "TEN_COMPANION_LIMIT",
    "resolve_companion_cap",
    "is_within_cap",
    # Search filters
    "CompanionFilter",
    "NoFilter",
    "SubjectOnly",
    "TopicOnly",
    "SubjectAndTopic",
    "build_companion_filter",
]
