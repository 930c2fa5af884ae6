"""
Abstract base class for identity providers.

A provider turns the bearer token of a request into an Identity. It owns
token verification and entitlement claim parsing; the rest of the service
only ever sees the resulting Identity.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..schemas import Identity


class IIdentityProvider(ABC):
    """Interface every identity provider implements."""

    @abstractmethod
    def resolve_identity(self, token: Optional[str]) -> Optional[Identity]:
        """
        Resolve the caller behind ``token``.

        Args:
            token: Bearer token from the request, or None when absent

        Returns:
            Identity, or None when the request carries no token

        Raises:
            TokenExpired: If the token has expired
            TokenInvalid: If the token fails verification
            ServiceUnavailable: If verification keys cannot be fetched
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Provider name (e.g. 'clerk')."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider={self.get_provider_name()})"


class AnonymousIdentityProvider(IIdentityProvider):
    """
    Provider used when authentication is disabled.

    Every request is anonymous: reads work, operations that need an
    identity are refused.
    """

    def resolve_identity(self, token: Optional[str]) -> Optional[Identity]:
        return None

    def get_provider_name(self) -> str:
        return "none"
