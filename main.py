"""MCP server exposing Kaamyab strategic access tools."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from kaamyab import (
    StrategicAccessService,
    can_access_strategic_planning,
    classify_email_domain,
    get_strategic_access_message,
    resolve_strategic_access,
)
from kaamyab.adapter import build_access_input
from kaamyab.features import FEATURE_REGISTRY, get_feature_definition, has_feature_access
from kaamyab.kaamyab_logging import setup_logging
from kaamyab.subscription import (
    TIER_DEFINITIONS,
    TIER_HIERARCHY,
    format_pkr_price,
)

mcp = FastMCP("kaamyab-access")


def _resolve_root(root: Optional[str]) -> Path:
    if root:
        resolved = Path(root).expanduser().resolve()
        if not resolved.exists():
            raise ValueError(f"Provided root '{root}' does not exist.")
        return resolved

    env_root = os.getenv("KAAMYAB_DATA_ROOT")
    if env_root:
        env_path = Path(env_root).expanduser().resolve()
        if not env_path.exists():
            raise ValueError(
                f"Environment variable KAAMYAB_DATA_ROOT points to '{env_root}', which does not exist."
            )
        return env_path

    return Path.cwd().resolve()


def _service(root: Optional[str]) -> StrategicAccessService:
    return StrategicAccessService(_resolve_root(root))


@mcp.tool(name="resolve_strategic_access")
def resolve_access(
    subscription_tier: Optional[str] = None,
    subscription_state: Optional[str] = None,
    strategic_trial_used: bool = False,
    email_domain_type: Optional[str] = None,
) -> Dict[str, Any]:
    """Resolve strategic planning access from raw subscription and trial facts.
    Missing fields take their defaults: tier 'standard', state 'active', email domain type 'standard'."""

    access_input = build_access_input({
        "subscription_tier": subscription_tier,
        "subscription_state": subscription_state,
        "strategic_trial_used": strategic_trial_used,
        "email_domain_type": email_domain_type,
    })
    result = resolve_strategic_access(access_input)
    return {
        "input": access_input.to_dict(),
        "access": result.to_dict(),
        "message": get_strategic_access_message(result),
        "can_access": can_access_strategic_planning(access_input),
    }


@mcp.tool()
def get_strategic_access(user_id: str, root: Optional[str] = None) -> Dict[str, Any]:
    """Evaluate strategic planning access for a stored user, with a subscription summary."""

    return _service(root).evaluate(user_id)


@mcp.tool()
def consume_strategic_preview(user_id: str, root: Optional[str] = None) -> Dict[str, Any]:
    """Record a strategic generation for the user.
    Consumes the one-time preview when that is the user's only access; refuses users without access."""

    return _service(root).consume_strategic_generation(user_id)


@mcp.tool()
def can_save_strategic_plan(user_id: str, root: Optional[str] = None) -> Dict[str, Any]:
    """Check whether a strategic plan may be saved for the user."""

    return _service(root).plan_save_status(user_id)


@mcp.tool()
def register_profile(
    user_id: str,
    email: str,
    subscription_tier: Optional[str] = None,
    subscription_state: Optional[str] = None,
    root: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a stored profile. The email domain is classified on registration."""

    service = _service(root)
    try:
        profile = service.store.create_profile(
            user_id,
            email,
            subscription_tier=subscription_tier,
            subscription_state=subscription_state,
        )
    except ValueError as e:
        return {
            "error": str(e),
            "suggestion": "Use get_strategic_access for existing profiles or pick a different user id",
        }

    return {
        "profile": profile.to_dict(),
        "next_suggested_step": "get_strategic_access",
        "message": f"Profile '{user_id}' registered as {profile.email_domain_type} email domain.",
    }


@mcp.tool()
def update_subscription(
    user_id: str,
    tier: Optional[str] = None,
    state: Optional[str] = None,
    expires_at: Optional[str] = None,
    grace_ends_at: Optional[str] = None,
    root: Optional[str] = None,
) -> Dict[str, Any]:
    """Update a stored user's subscription tier, state, expiry or grace period."""

    service = _service(root)
    try:
        profile = service.store.update_subscription(
            user_id,
            tier=tier,
            state=state,
            expires_at=expires_at,
            grace_ends_at=grace_ends_at,
        )
    except KeyError:
        return {"error": f"Profile '{user_id}' not found", "suggestion": "Call register_profile first"}
    except ValueError as e:
        return {"error": str(e), "suggestion": "Timestamps must be ISO-8601, e.g. 2026-01-31T00:00:00Z"}

    return {"profile": profile.to_dict(), "access": service.evaluate(user_id)}


@mcp.tool()
def classify_email(email: str) -> Dict[str, str]:
    """Classify an email address as standard, disposable or enterprise."""

    return {"email": email, "email_domain_type": classify_email_domain(email).value}


@mcp.tool()
def get_subscription_summary(user_id: str, root: Optional[str] = None) -> Dict[str, Any]:
    """Return the effective subscription and any warning for a stored user."""

    return _service(root).subscription_summary(user_id)


@mcp.tool()
def check_feature_access(feature_id: str, tier: Optional[str] = None) -> Dict[str, Any]:
    """Check whether a tier unlocks a feature from the registry."""

    feature = get_feature_definition(feature_id)
    return {
        "feature_id": feature_id,
        "tier": tier or "standard",
        "has_access": has_feature_access(feature_id, tier),
        "feature": feature.to_dict() if feature else None,
    }


@mcp.resource("kaamyab://tiers")
def resource_tiers():
    """Resource view listing tiers with prices and features."""

    lines = ["Kaamyab Tiers"]
    for tier in TIER_HIERARCHY:
        definition = TIER_DEFINITIONS[tier]
        lines.append("")
        lines.append(f"- {definition.name}: {definition.tagline}")
        lines.append(
            f"  Monthly: {format_pkr_price(definition.price_monthly_pkr)}"
            f" / Yearly: {format_pkr_price(definition.price_yearly_pkr)}"
        )
        for feature in definition.features:
            lines.append(f"  * {feature}")

    return "\n".join(lines)


@mcp.resource("kaamyab://features")
def resource_features():
    """Resource view listing every registered feature and its minimum tier."""

    lines = ["Kaamyab Features"]
    for feature in FEATURE_REGISTRY.values():
        lines.append(f"- {feature.id} ({feature.tier.value}): {feature.description}")

    return "\n".join(lines)


if __name__ == "__main__":
    log_file = os.getenv("KAAMYAB_LOG_FILE")
    setup_logging(
        log_level=os.getenv("KAAMYAB_LOG_LEVEL", "INFO").upper(),
        log_file=Path(log_file) if log_file else None,
    )
    mcp.run(transport="stdio")
