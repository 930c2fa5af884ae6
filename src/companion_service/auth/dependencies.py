"""
FastAPI identity dependencies.

Usage:
    >>> from fastapi import Depends, APIRouter
    >>> from companion_service.auth.dependencies import get_current_identity
    >>>
    >>> @router.post("/companions")
    >>> async def create(identity: Identity = Depends(get_current_identity)):
    ...     return {"author": identity.user_id}

Tests replace ``get_optional_identity`` through ``app.dependency_overrides``;
``get_current_identity`` builds on it, so one override covers both.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.concurrency import run_in_threadpool

from companion_service.domain.exceptions import AuthError

from .providers import IIdentityProvider
from .schemas import Identity

# Security scheme for OpenAPI documentation
bearer_scheme = HTTPBearer(auto_error=False)


def get_identity_provider(request: Request) -> IIdentityProvider:
    """The provider created at startup and stored on ``app.state``."""
    provider = getattr(request.app.state, "identity_provider", None)
    if provider is None:
        raise RuntimeError("Identity provider not configured")
    return provider


async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    provider: IIdentityProvider = Depends(get_identity_provider),
) -> Optional[Identity]:
    """
    Resolve the caller, or None for anonymous requests.

    A token that is present but fails verification is still an error.
    """
    token = credentials.credentials if credentials else None
    # JWKS fetches use blocking I/O
    return await run_in_threadpool(provider.resolve_identity, token)


async def get_current_identity(
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    """
    Resolve the caller, refusing anonymous requests.

    Raises:
        AuthError: If the request carries no identity
    """
    if identity is None:
        raise AuthError()
    return identity
