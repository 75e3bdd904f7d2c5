"""Strategic access resolver.

Decides a user's access level for Strategic Planning from subscription
and trial facts supplied by the caller:

- active paid subscription: full access
- disposable email domain: one-time preview at most
- unused strategic trial: preview
- otherwise: none

Rules are evaluated in that order and the first match wins. The
functions here are pure; defaulting of missing profile fields and
persisting the trial flag belong to the caller (see ``kaamyab.adapter``
and ``kaamyab.store``).
"""

from __future__ import annotations

from .models import (
    AccessInput,
    AccessLevel,
    AccessResult,
    EmailDomainType,
    SubscriptionState,
    SubscriptionTier,
)


REASON_ACTIVE_SUBSCRIPTION = "Active subscription"
REASON_DISPOSABLE_EMAIL = "Strategic planning works best with a stable account and ongoing history."
REASON_TRIAL_AVAILABLE = "Strategic trial available"
REASON_UPGRADE_REQUIRED = "Upgrade to Pro for unlimited strategic planning."

PREVIEW_MESSAGE = "To refine this strategy, Kaamyab needs to learn how you actually work."


def _restricted(level: AccessLevel, reason: str) -> AccessResult:
    return AccessResult(
        level=level,
        reason=reason,
        can_regenerate=False,
        can_view_full_plan=False,
    )


def is_paid_active(access_input: AccessInput) -> bool:
    """Paid tier (anything but standard) on an active subscription."""
    return (
        access_input.subscription_tier != SubscriptionTier.STANDARD
        and access_input.subscription_state == SubscriptionState.ACTIVE
    )


def resolve_strategic_access(access_input: AccessInput) -> AccessResult:
    """Resolve the strategic planning access level for one user.

    Any tier other than ``"standard"`` counts as paid, including tiers this
    release does not know about.
    """
    # Paid status overrides trial and email signals
    if is_paid_active(access_input):
        return AccessResult(
            level=AccessLevel.FULL,
            reason=REASON_ACTIVE_SUBSCRIPTION,
            can_regenerate=True,
            can_view_full_plan=True,
        )

    # Throwaway addresses are capped at the one-time preview
    if access_input.email_domain_type == EmailDomainType.DISPOSABLE:
        level = AccessLevel.NONE if access_input.strategic_trial_used else AccessLevel.PREVIEW
        return _restricted(level, REASON_DISPOSABLE_EMAIL)

    if not access_input.strategic_trial_used:
        return _restricted(AccessLevel.PREVIEW, REASON_TRIAL_AVAILABLE)

    return _restricted(AccessLevel.NONE, REASON_UPGRADE_REQUIRED)


def get_strategic_access_message(result: AccessResult) -> str:
    """Calm, non-accusatory copy for an access state."""
    if result.level == AccessLevel.FULL:
        return ""
    if result.level == AccessLevel.PREVIEW:
        return PREVIEW_MESSAGE
    return result.reason


def can_access_strategic_planning(access_input: AccessInput) -> bool:
    """Check if the user can reach strategic planning at all."""
    return resolve_strategic_access(access_input).level != AccessLevel.NONE
