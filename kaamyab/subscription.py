"""Subscription tier definitions and effective subscription state.

Single source of truth for the four-tier structure (Standard, Student,
Pro, Business) and its PKR pricing. ``get_effective_subscription`` is a
read-only view over stored profile data: expiry and grace periods are
tracked and reported but do not yet restrict access.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from .models import SubscriptionState, SubscriptionTier, UserProfile, parse_timestamp, utc_now


@dataclass(slots=True, frozen=True)
class TierDefinition:
    """Display and pricing metadata for a tier."""

    id: SubscriptionTier
    name: str
    tagline: str
    price_monthly_pkr: Optional[int]  # None = free
    price_yearly_pkr: Optional[int]
    features: List[str] = field(default_factory=list)
    highlighted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id.value,
            "name": self.name,
            "tagline": self.tagline,
            "price_monthly_pkr": self.price_monthly_pkr,
            "price_yearly_pkr": self.price_yearly_pkr,
            "features": list(self.features),
            "highlighted": self.highlighted,
        }


# Lowest to highest
TIER_HIERARCHY: List[SubscriptionTier] = [
    SubscriptionTier.STANDARD,
    SubscriptionTier.STUDENT,
    SubscriptionTier.PRO,
    SubscriptionTier.BUSINESS,
]

TIER_DEFINITIONS: Dict[SubscriptionTier, TierDefinition] = {
    SubscriptionTier.STANDARD: TierDefinition(
        id=SubscriptionTier.STANDARD,
        name="Standard",
        tagline="Core planning and execution",
        price_monthly_pkr=None,
        price_yearly_pkr=None,
        features=[
            "Core planning and execution",
            "Timers, defer, partial progress",
            "End-of-day closure",
            "Calm re-entry",
        ],
    ),
    SubscriptionTier.STUDENT: TierDefinition(
        id=SubscriptionTier.STUDENT,
        name="Student",
        tagline="Focused learning support",
        price_monthly_pkr=299,
        price_yearly_pkr=2499,
        features=[
            "Everything in Standard",
            "No ads",
            "Extended plan history (30 plans)",
            "Basic execution insights",
        ],
    ),
    SubscriptionTier.PRO: TierDefinition(
        id=SubscriptionTier.PRO,
        name="Pro",
        tagline="Strategic depth and analysis",
        price_monthly_pkr=999,
        price_yearly_pkr=7999,
        features=[
            "Strategic planning mode",
            "Strategy overview, risks, assumptions",
            "Execution insights & diagnosis",
            "Plan history comparison",
            "PDF export",
            "Style & pattern analysis",
            "No ads",
        ],
        highlighted=True,
    ),
    SubscriptionTier.BUSINESS: TierDefinition(
        id=SubscriptionTier.BUSINESS,
        name="Business",
        tagline="Professional team planning",
        price_monthly_pkr=2499,
        price_yearly_pkr=19999,
        features=[
            "Everything in Pro",
            "Multi-plan comparison",
            "Long-term pattern tracking",
            "Scenario-aware analysis",
            "Professional sharing & exports",
            "Higher usage caps",
        ],
    ),
}

WARNING_WINDOW_DAYS = 7


def coerce_tier(tier: Union[str, SubscriptionTier, None]) -> SubscriptionTier:
    """Map a stored tier string onto a known tier; unknown values rank as standard."""
    if isinstance(tier, SubscriptionTier):
        return tier
    try:
        return SubscriptionTier((tier or "").strip().lower())
    except ValueError:
        return SubscriptionTier.STANDARD


def tier_includes_access(user_tier: Union[str, SubscriptionTier], required_tier: Union[str, SubscriptionTier]) -> bool:
    """Higher tiers include access to all lower tier features."""
    user_index = TIER_HIERARCHY.index(coerce_tier(user_tier))
    required_index = TIER_HIERARCHY.index(coerce_tier(required_tier))
    return user_index >= required_index


def get_tier_definition(tier: Union[str, SubscriptionTier]) -> TierDefinition:
    return TIER_DEFINITIONS[coerce_tier(tier)]


def get_tier_display_name(tier: Union[str, SubscriptionTier, None]) -> str:
    return TIER_DEFINITIONS[coerce_tier(tier)].name


def format_pkr_price(amount: Optional[int]) -> str:
    if amount is None:
        return "Free"
    return f"PKR {amount:,}"


@dataclass(slots=True, frozen=True)
class EffectiveSubscription:
    """Resolved view of a profile's subscription."""

    tier: str
    state: str
    is_paid: bool
    in_grace: bool
    is_active: bool
    days_remaining: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier,
            "state": self.state,
            "is_paid": self.is_paid,
            "in_grace": self.in_grace,
            "is_active": self.is_active,
            "days_remaining": self.days_remaining,
        }


@dataclass(slots=True, frozen=True)
class SubscriptionWarning:
    type: Optional[str]
    message: Optional[str]

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"type": self.type, "message": self.message}


def _profile_value(profile: Union[UserProfile, Mapping[str, Any], None], name: str) -> Any:
    if profile is None:
        return None
    if isinstance(profile, UserProfile):
        return getattr(profile, name)
    return profile.get(name)


def get_effective_subscription(
    profile: Union[UserProfile, Mapping[str, Any], None],
    now: Optional[datetime] = None,
) -> EffectiveSubscription:
    """Calculate the current subscription status from stored profile data.

    Missing tier and state default to standard/active. All paid tiers are
    considered active for now; expiry and grace are reported but not
    enforced.
    """
    now = now or utc_now()
    tier = (_profile_value(profile, "subscription_tier") or SubscriptionTier.STANDARD.value)
    state = (_profile_value(profile, "subscription_state") or SubscriptionState.ACTIVE.value)
    tier = tier.value if isinstance(tier, SubscriptionTier) else str(tier).strip().lower()
    state = state.value if isinstance(state, SubscriptionState) else str(state).strip().lower()
    expires_at = parse_timestamp(_profile_value(profile, "subscription_expires_at"))
    grace_ends_at = parse_timestamp(_profile_value(profile, "grace_ends_at"))

    days_remaining: Optional[int] = None
    if expires_at is not None and expires_at > now:
        days_remaining = math.ceil((expires_at - now).total_seconds() / 86400)

    in_grace = state == SubscriptionState.GRACE and grace_ends_at is not None and grace_ends_at > now
    is_paid = tier != SubscriptionTier.STANDARD

    return EffectiveSubscription(
        tier=tier,
        state=state,
        is_paid=is_paid,
        in_grace=in_grace,
        is_active=is_paid,
        days_remaining=days_remaining,
    )


def get_subscription_warning(effective: EffectiveSubscription) -> SubscriptionWarning:
    """Warn on a grace period or an approaching expiration."""
    if effective.in_grace:
        return SubscriptionWarning(type="grace", message="Payment pending")

    days = effective.days_remaining
    if days is not None and 0 < days <= WARNING_WINDOW_DAYS:
        return SubscriptionWarning(
            type="expiring",
            message=f"Expires in {days} day{'' if days == 1 else 's'}",
        )

    return SubscriptionWarning(type=None, message=None)
