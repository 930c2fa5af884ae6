"""
Authentication: caller identity and entitlements.

Basic Usage:
    >>> from companion_service.auth import create_identity_provider
    >>> provider = create_identity_provider(get_settings())
    >>> identity = provider.resolve_identity(token)
    >>> identity.has_entitlement(PRO_PLAN)
"""

from .schemas import Identity
from .providers import (
    IIdentityProvider,
    AnonymousIdentityProvider,
    ClerkIdentityProvider,
    create_identity_provider,
)
from .dependencies import (
    get_identity_provider,
    get_optional_identity,
    get_current_identity,
)

__all__ = [
    "Identity",
    "IIdentityProvider",
    "AnonymousIdentityProvider",
    "ClerkIdentityProvider",
    "create_identity_provider",
    "get_identity_provider",
    "get_optional_identity",
    "get_current_identity",
]
