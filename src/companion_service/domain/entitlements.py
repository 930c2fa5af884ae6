"""
Entitlement predicates and the companion creation quota.

Entitlements are resolved by the identity provider on every request and
never stored. A predicate is either a subscription plan or a named feature;
the identity answers ``has_entitlement(predicate)``.

Quota tiers, checked in order:
    plan "pro"                   unlimited
    feature "3_companion_limit"  3 companions
    feature "10_companion_limit" 10 companions
    anything else                0 companions
"""

from dataclasses import dataclass
from typing import Callable, Literal, Optional


@dataclass(frozen=True)
class EntitlementPredicate:
    """A plan or feature the identity provider can be asked about."""

    kind: Literal["plan", "feature"]
    slug: str

    def __str__(self) -> str:
        return f"{self.kind}:{self.slug}"


PRO_PLAN = EntitlementPredicate(kind="plan", slug="pro")
THREE_COMPANION_LIMIT = EntitlementPredicate(kind="feature", slug="3_companion_limit")
TEN_COMPANION_LIMIT = EntitlementPredicate(kind="feature", slug="10_companion_limit")

# Ordered: the first matching feature decides the cap.
COMPANION_LIMIT_FEATURES: tuple[tuple[EntitlementPredicate, int], ...] = (
    (THREE_COMPANION_LIMIT, 3),
    (TEN_COMPANION_LIMIT, 10),
)


def resolve_companion_cap(
    has_entitlement: Callable[[EntitlementPredicate], bool],
) -> Optional[int]:
    """
    Resolve how many companions an identity may author.

    Args:
        has_entitlement: Entitlement predicate of the caller

    Returns:
        None for an unlimited plan, otherwise the numeric cap (0 when no
        entitlement is recognized)
    """
    if has_entitlement(PRO_PLAN):
        return None

    for predicate, cap in COMPANION_LIMIT_FEATURES:
        if has_entitlement(predicate):
            return cap

    return 0


def is_within_cap(cap: Optional[int], authored_count: int) -> bool:
    """Return True when one more companion fits under ``cap``."""
    if cap is None:
        return True
    return authored_count < cap


@dataclass(frozen=True)
class CreationQuota:
    """
    Outcome of a creation quota check.

    ``limit`` and ``used`` are None for unlimited plans; authored companions
    are not counted in that case.
    """

    allowed: bool
    limit: Optional[int]
    used: Optional[int]

    @property
    def unlimited(self) -> bool:
        return self.limit is None
