"""
Pydantic models for caller identity and entitlements.

An Identity is resolved per request from the session token and never
stored. Plan and features are kept as bare slugs ("pro",
"3_companion_limit"); the provider strips any scope prefix.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from companion_service.domain.entitlements import EntitlementPredicate


class Identity(BaseModel):
    """
    The resolved caller.

    Example:
        >>> identity = Identity(user_id="user_2abc", plan="pro")
        >>> identity.has_entitlement(PRO_PLAN)
        True
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    user_id: str = Field(..., min_length=1, description="Stable user identifier (token subject)")
    plan: Optional[str] = Field(default=None, description="Active subscription plan slug")
    features: frozenset[str] = Field(default_factory=frozenset, description="Enabled feature slugs")
    session_id: Optional[str] = Field(default=None, description="Provider session identifier")

    def has_entitlement(self, predicate: EntitlementPredicate) -> bool:
        """Answer a plan or feature predicate for this caller."""
        if predicate.kind == "plan":
            return self.plan == predicate.slug
        return predicate.slug in self.features
