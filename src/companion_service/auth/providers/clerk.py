"""
Clerk session token provider.

Verifies RS256 session JWTs against the instance JWKS (cached with a TTL)
and reads billing entitlements from the compact claims Clerk adds to
session tokens:

    pla  active plan, scoped:            "u:pro"
    fea  enabled features, comma list:   "u:3_companion_limit,u:voice"

Scope prefixes ("u:" user, "o:" organization) are stripped.
"""

from typing import Any, Iterable, Optional

import jwt
import requests
from cachetools import TTLCache

from companion_service.domain.exceptions import ServiceUnavailable, TokenExpired, TokenInvalid
from companion_service.infrastructure.observability.logging import get_logger

from ..schemas import Identity
from .base import IIdentityProvider

logger = get_logger(__name__)


def _strip_scope(value: str) -> str:
    _, sep, slug = value.partition(":")
    return slug if sep else value


def parse_plan_claim(claim: Any) -> Optional[str]:
    """
    Plan slug from the ``pla`` claim.

    Example:
        >>> parse_plan_claim("u:pro")
        'pro'
    """
    if not isinstance(claim, str) or not claim.strip():
        return None
    return _strip_scope(claim.strip()) or None


def parse_feature_claim(claim: Any) -> frozenset[str]:
    """
    Feature slugs from the ``fea`` claim.

    Accepts the comma separated string form as well as a JSON list.

    Example:
        >>> sorted(parse_feature_claim("u:3_companion_limit, u:voice"))
        ['3_companion_limit', 'voice']
    """
    if isinstance(claim, str):
        items: Iterable[Any] = claim.split(",")
    elif isinstance(claim, (list, tuple)):
        items = claim
    else:
        return frozenset()

    return frozenset(
        _strip_scope(item.strip())
        for item in items
        if isinstance(item, str) and item.strip()
    )


def identity_from_claims(claims: dict[str, Any]) -> Identity:
    """Build an Identity from verified session token claims."""
    subject = claims.get("sub")
    if not subject:
        raise TokenInvalid(details={"reason": "missing subject"})

    return Identity(
        user_id=subject,
        plan=parse_plan_claim(claims.get("pla")),
        features=parse_feature_claim(claims.get("fea")),
        session_id=claims.get("sid"),
    )


class ClerkIdentityProvider(IIdentityProvider):
    """
    Identity provider for Clerk session tokens.

    Example:
        >>> provider = ClerkIdentityProvider(
        ...     jwks_url="https://example.clerk.accounts.dev/.well-known/jwks.json",
        ...     issuer="https://example.clerk.accounts.dev",
        ... )
        >>> identity = provider.resolve_identity(token)
    """

    def __init__(
        self,
        jwks_url: str,
        issuer: Optional[str] = None,
        authorized_parties: Optional[list[str]] = None,
        jwks_cache_ttl: int = 3600,
        leeway_seconds: int = 5,
    ) -> None:
        if not jwks_url:
            raise ValueError("Clerk provider requires a JWKS URL (AUTH_JWKS_URL)")

        self.jwks_url = jwks_url
        self.issuer = issuer
        self.authorized_parties = set(authorized_parties or [])
        self.leeway_seconds = leeway_seconds
        self._jwks_cache: TTLCache = TTLCache(maxsize=1, ttl=jwks_cache_ttl)

        logger.info("Initialized Clerk identity provider", issuer=issuer)

    def get_provider_name(self) -> str:
        return "clerk"

    def _get_jwks(self, refresh: bool = False) -> dict[str, Any]:
        cache_key = "jwks"
        if not refresh and cache_key in self._jwks_cache:
            return self._jwks_cache[cache_key]

        try:
            logger.debug("Fetching JWKS", url=self.jwks_url)
            response = requests.get(self.jwks_url, timeout=10)
            response.raise_for_status()
            jwks = response.json()
        except requests.RequestException as e:
            logger.error("Failed to fetch JWKS", error=str(e))
            raise ServiceUnavailable(
                "Identity provider keys unavailable",
                details={"provider": "clerk"},
            ) from e

        self._jwks_cache[cache_key] = jwks
        return jwks

    def _get_signing_key(self, kid: str) -> Any:
        """Public key for ``kid``; refetches once to pick up rotated keys."""
        for refresh in (False, True):
            for key in self._get_jwks(refresh=refresh).get("keys", []):
                if key.get("kid") == kid:
                    return jwt.PyJWK(key).key

        raise TokenInvalid(details={"reason": f"no signing key with kid {kid}"})

    def resolve_identity(self, token: Optional[str]) -> Optional[Identity]:
        if not token:
            return None

        try:
            header = jwt.get_unverified_header(token)
            kid = header.get("kid")
            if not kid:
                raise TokenInvalid(details={"reason": "token header has no kid"})

            claims = jwt.decode(
                token,
                self._get_signing_key(kid),
                algorithms=["RS256"],
                issuer=self.issuer,
                leeway=self.leeway_seconds,
                options={"require": ["exp", "iat", "sub"], "verify_aud": False},
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Session token expired")
            raise TokenExpired() from e
        except jwt.InvalidTokenError as e:
            logger.warning("Invalid session token", error=str(e))
            raise TokenInvalid(details={"reason": str(e)}) from e

        azp = claims.get("azp")
        if self.authorized_parties and azp not in self.authorized_parties:
            logger.warning("Session token from unauthorized party", azp=azp)
            raise TokenInvalid(details={"reason": "unauthorized party"})

        return identity_from_claims(claims)
