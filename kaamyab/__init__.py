"""Kaamyab strategic access control."""

from .access import (
    can_access_strategic_planning,
    get_strategic_access_message,
    resolve_strategic_access,
)
from .adapter import build_access_input, resolve_profile_access
from .email_domains import classify_email_domain
from .models import (
    AccessInput,
    AccessLevel,
    AccessResult,
    EmailDomainType,
    SubscriptionState,
    SubscriptionTier,
    UserProfile,
)
from .service import StrategicAccessService
from .store import ProfileStore

__all__ = [
    "AccessInput",
    "AccessLevel",
    "AccessResult",
    "EmailDomainType",
    "ProfileStore",
    "StrategicAccessService",
    "SubscriptionState",
    "SubscriptionTier",
    "UserProfile",
    "build_access_input",
    "can_access_strategic_planning",
    "classify_email_domain",
    "get_strategic_access_message",
    "resolve_profile_access",
    "resolve_strategic_access",
]
