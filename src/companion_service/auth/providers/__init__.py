"""
Identity provider factory.

Creates the provider selected by ``AUTH_PROVIDER``.
"""

from companion_service.config.settings import Settings
from companion_service.infrastructure.observability.logging import get_logger

from .base import AnonymousIdentityProvider, IIdentityProvider
from .clerk import ClerkIdentityProvider

logger = get_logger(__name__)


def create_identity_provider(settings: Settings) -> IIdentityProvider:
    """
    Instantiate the configured identity provider.

    Raises:
        ValueError: If the selected provider is misconfigured
    """
    if settings.auth_provider == "clerk":
        return ClerkIdentityProvider(
            jwks_url=settings.auth_jwks_url or "",
            issuer=settings.auth_issuer,
            authorized_parties=settings.auth_authorized_parties,
            jwks_cache_ttl=settings.auth_jwks_cache_ttl,
            leeway_seconds=settings.auth_leeway_seconds,
        )

    logger.warning("Authentication disabled - all requests are anonymous")
    return AnonymousIdentityProvider()


__all__ = [
    "IIdentityProvider",
    "AnonymousIdentityProvider",
    "ClerkIdentityProvider",
    "create_identity_provider",
]
