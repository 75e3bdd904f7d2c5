"""Build resolver inputs from stored profiles.

The resolver expects fully-populated inputs. This module applies the
documented defaults to missing profile fields and coerces values the
resolver should never see.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .access import resolve_strategic_access
from .models import (
    AccessInput,
    AccessLevel,
    AccessResult,
    EmailDomainType,
    SubscriptionState,
    SubscriptionTier,
    UserProfile,
)

logger = logging.getLogger("kaamyab.adapter")

REASON_NOT_AUTHENTICATED = "Not authenticated"

DEFAULT_TIER = SubscriptionTier.STANDARD.value
DEFAULT_STATE = SubscriptionState.ACTIVE.value
DEFAULT_EMAIL_DOMAIN_TYPE = EmailDomainType.STANDARD.value

_KNOWN_TIERS = {tier.value for tier in SubscriptionTier}
_KNOWN_DOMAIN_TYPES = {domain_type.value for domain_type in EmailDomainType}

ProfileLike = Union[UserProfile, Mapping[str, Any]]


def _field(profile: ProfileLike, name: str) -> Any:
    if isinstance(profile, UserProfile):
        return getattr(profile, name)
    return profile.get(name)


def _normalize(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value.value if isinstance(value, (SubscriptionTier, SubscriptionState, EmailDomainType)) else value)
    text = text.strip().lower()
    return text or None


def build_access_input(profile: ProfileLike) -> AccessInput:
    """Turn a profile (dataclass or stored mapping) into an AccessInput."""
    tier = _normalize(_field(profile, "subscription_tier")) or DEFAULT_TIER
    if tier not in _KNOWN_TIERS:
        # Forward-compatible: unknown tiers resolve as paid
        logger.warning(f"Unrecognized subscription tier '{tier}' treated as paid")

    state = _normalize(_field(profile, "subscription_state")) or DEFAULT_STATE

    domain_type = _normalize(_field(profile, "email_domain_type")) or DEFAULT_EMAIL_DOMAIN_TYPE
    if domain_type not in _KNOWN_DOMAIN_TYPES:
        logger.warning(f"Unrecognized email domain type '{domain_type}' coerced to '{DEFAULT_EMAIL_DOMAIN_TYPE}'")
        domain_type = DEFAULT_EMAIL_DOMAIN_TYPE

    return AccessInput(
        subscription_tier=tier,
        subscription_state=state,
        strategic_trial_used=bool(_field(profile, "strategic_trial_used") or False),
        email_domain_type=domain_type,
    )


def unauthenticated_result() -> AccessResult:
    return AccessResult(
        level=AccessLevel.NONE,
        reason=REASON_NOT_AUTHENTICATED,
        can_regenerate=False,
        can_view_full_plan=False,
    )


def resolve_profile_access(profile: Optional[ProfileLike]) -> AccessResult:
    """Resolve access for a profile, defaulting to no access without one."""
    if profile is None:
        return unauthenticated_result()
    return resolve_strategic_access(build_access_input(profile))
