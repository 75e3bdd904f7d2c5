"""Data models for Kaamyab strategic access control.

This module contains the value types passed between the profile store,
the input adapter and the access resolver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class AccessLevel(str, Enum):
    """How much of Strategic Planning a user may use."""

    NONE = "none"
    PREVIEW = "preview"
    FULL = "full"


class SubscriptionTier(str, Enum):
    """Known product tiers, lowest to highest."""

    STANDARD = "standard"
    STUDENT = "student"
    PRO = "pro"
    BUSINESS = "business"


class SubscriptionState(str, Enum):
    """Subscription lifecycle states."""

    ACTIVE = "active"
    TRIAL = "trial"
    GRACE = "grace"
    CANCELED = "canceled"
    EXPIRED = "expired"


class EmailDomainType(str, Enum):
    STANDARD = "standard"
    DISPOSABLE = "disposable"
    ENTERPRISE = "enterprise"


def utc_now() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _utc_timestamp() -> str:
    return utc_now().isoformat(timespec="seconds") + "Z"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as stored in profiles.

    A trailing ``Z`` is accepted. Returns naive UTC datetimes so they
    compare with :func:`utc_now`.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = (parsed - parsed.utcoffset()).replace(tzinfo=None)
    return parsed


@dataclass(slots=True, frozen=True)
class AccessInput:
    """Facts the resolver decides on, already defaulted by the caller.

    ``subscription_tier`` and ``subscription_state`` are plain strings so
    that tiers unknown to this release still flow through; the members of
    :class:`SubscriptionTier` and :class:`SubscriptionState` compare equal
    to their string values.
    """

    subscription_tier: str
    subscription_state: str
    strategic_trial_used: bool
    email_domain_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subscription_tier": _plain(self.subscription_tier),
            "subscription_state": _plain(self.subscription_state),
            "strategic_trial_used": self.strategic_trial_used,
            "email_domain_type": _plain(self.email_domain_type),
        }


@dataclass(slots=True, frozen=True)
class AccessResult:
    """Strategic access decision returned to the caller."""

    level: AccessLevel
    reason: str
    can_regenerate: bool
    can_view_full_plan: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "level": self.level.value,
            "reason": self.reason,
            "can_regenerate": self.can_regenerate,
            "can_view_full_plan": self.can_view_full_plan,
        }


@dataclass(slots=True)
class UserProfile:
    """Stored profile fields that strategic access depends on."""

    user_id: str
    email: str
    subscription_tier: Optional[str] = None
    subscription_state: Optional[str] = None
    strategic_trial_used: bool = False
    email_domain_type: Optional[str] = None
    email_verified_at: Optional[str] = None
    strategic_calls_lifetime: int = 0
    strategic_last_call_at: Optional[str] = None
    subscription_expires_at: Optional[str] = None
    grace_ends_at: Optional[str] = None
    created_at: str = field(default_factory=_utc_timestamp)
    updated_at: str = field(default_factory=_utc_timestamp)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "user_id": self.user_id,
            "email": self.email,
            "subscription_tier": self.subscription_tier,
            "subscription_state": self.subscription_state,
            "strategic_trial_used": self.strategic_trial_used,
            "email_domain_type": self.email_domain_type,
            "email_verified_at": self.email_verified_at,
            "strategic_calls_lifetime": self.strategic_calls_lifetime,
            "strategic_last_call_at": self.strategic_last_call_at,
            "subscription_expires_at": self.subscription_expires_at,
            "grace_ends_at": self.grace_ends_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        """Create from dictionary representation."""
        return cls(
            user_id=data["user_id"],
            email=data.get("email", ""),
            subscription_tier=data.get("subscription_tier"),
            subscription_state=data.get("subscription_state"),
            strategic_trial_used=bool(data.get("strategic_trial_used", False)),
            email_domain_type=data.get("email_domain_type"),
            email_verified_at=data.get("email_verified_at"),
            strategic_calls_lifetime=int(data.get("strategic_calls_lifetime") or 0),
            strategic_last_call_at=data.get("strategic_last_call_at"),
            subscription_expires_at=data.get("subscription_expires_at"),
            grace_ends_at=data.get("grace_ends_at"),
            created_at=data.get("created_at", _utc_timestamp()),
            updated_at=data.get("updated_at", _utc_timestamp()),
        )

    def touch(self) -> None:
        self.updated_at = _utc_timestamp()

    def validate(self) -> List[str]:
        """Validate the profile and return any issues."""
        issues = []

        if not self.user_id:
            issues.append("User ID is required")
        if self.strategic_calls_lifetime < 0:
            issues.append(f"Strategic call count cannot be negative, got: {self.strategic_calls_lifetime}")
        for name in ("email_verified_at", "strategic_last_call_at", "subscription_expires_at", "grace_ends_at"):
            value = getattr(self, name)
            try:
                parse_timestamp(value)
            except ValueError:
                issues.append(f"Invalid timestamp for {name}: {value}")

        return issues


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value
