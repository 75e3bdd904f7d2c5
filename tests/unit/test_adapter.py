"""Unit tests for the profile-to-input adapter."""

import logging

from kaamyab.adapter import (
    REASON_NOT_AUTHENTICATED,
    build_access_input,
    resolve_profile_access,
)
from kaamyab.models import AccessLevel, SubscriptionTier, UserProfile


class TestBuildAccessInput:
    """Test cases for build_access_input defaults and coercions."""

    def test_empty_mapping_gets_documented_defaults(self):
        """Test defaults for a profile with nothing filled in."""
        access_input = build_access_input({})

        assert access_input.subscription_tier == "standard"
        assert access_input.subscription_state == "active"
        assert access_input.strategic_trial_used is False
        assert access_input.email_domain_type == "standard"

    def test_empty_strings_count_as_missing(self):
        access_input = build_access_input({
            "subscription_tier": "",
            "subscription_state": "  ",
            "email_domain_type": "",
        })

        assert access_input.subscription_tier == "standard"
        assert access_input.subscription_state == "active"
        assert access_input.email_domain_type == "standard"

    def test_values_are_normalised(self):
        """Test that case and whitespace do not change the decision."""
        access_input = build_access_input({
            "subscription_tier": " PRO ",
            "subscription_state": "Active",
            "strategic_trial_used": True,
            "email_domain_type": "Disposable",
        })

        assert access_input.subscription_tier == "pro"
        assert access_input.subscription_state == "active"
        assert access_input.email_domain_type == "disposable"

    def test_unknown_email_domain_type_is_coerced(self, caplog):
        """Test that unknown domain types become standard with a warning."""
        with caplog.at_level(logging.WARNING, logger="kaamyab.adapter"):
            access_input = build_access_input({"email_domain_type": "corporate"})

        assert access_input.email_domain_type == "standard"
        assert "corporate" in caplog.text

    def test_unknown_tier_passes_through_with_warning(self, caplog):
        """Test that unknown tiers are kept (and so resolve as paid)."""
        with caplog.at_level(logging.WARNING, logger="kaamyab.adapter"):
            access_input = build_access_input({"subscription_tier": "lifetime"})

        assert access_input.subscription_tier == "lifetime"
        assert "lifetime" in caplog.text

    def test_accepts_user_profile(self):
        profile = UserProfile(
            user_id="u1",
            email="a@gmail.com",
            subscription_tier=SubscriptionTier.BUSINESS,
            strategic_trial_used=True,
        )

        access_input = build_access_input(profile)

        assert access_input.subscription_tier == "business"
        assert access_input.subscription_state == "active"
        assert access_input.strategic_trial_used is True

    def test_null_trial_flag_means_unused(self):
        assert build_access_input({"strategic_trial_used": None}).strategic_trial_used is False


class TestResolveProfileAccess:
    """Test cases for resolve_profile_access."""

    def test_no_profile_means_no_access(self):
        """Test the unauthenticated fallback."""
        result = resolve_profile_access(None)

        assert result.level == AccessLevel.NONE
        assert result.reason == REASON_NOT_AUTHENTICATED
        assert result.can_regenerate is False
        assert result.can_view_full_plan is False

    def test_new_profile_gets_preview(self):
        result = resolve_profile_access({"subscription_tier": None, "strategic_trial_used": False})
        assert result.level == AccessLevel.PREVIEW

    def test_missing_state_defaults_to_active_for_paid(self):
        """Test that a paid tier without a state resolves as active."""
        result = resolve_profile_access({"subscription_tier": "pro"})
        assert result.level == AccessLevel.FULL

    def test_unknown_domain_type_does_not_trigger_disposable_gate(self):
        result = resolve_profile_access({"strategic_trial_used": False, "email_domain_type": "weird"})
        assert result.reason == "Strategic trial available"
