"""Unit tests for Kaamyab models.

This module tests the enums, the access value types, and the stored
profile's serialization and validation.
"""

from datetime import datetime

import pytest

from kaamyab.models import (
    AccessInput,
    AccessLevel,
    AccessResult,
    EmailDomainType,
    SubscriptionState,
    SubscriptionTier,
    UserProfile,
    parse_timestamp,
    utc_now,
)


class TestEnums:
    """Test cases for the str-valued enums."""

    def test_members_compare_equal_to_strings(self):
        """Test that enum members equal their wire strings."""
        assert AccessLevel.PREVIEW == "preview"
        assert SubscriptionTier.STANDARD == "standard"
        assert SubscriptionState.ACTIVE == "active"
        assert EmailDomainType.DISPOSABLE == "disposable"

    def test_lookup_by_value(self):
        assert SubscriptionTier("business") is SubscriptionTier.BUSINESS
        with pytest.raises(ValueError):
            SubscriptionTier("platinum")


class TestAccessTypes:
    """Test cases for AccessInput and AccessResult."""

    def test_access_input_to_dict_unwraps_enums(self):
        """Test that enum members serialize as plain strings."""
        access_input = AccessInput(
            subscription_tier=SubscriptionTier.PRO,
            subscription_state="active",
            strategic_trial_used=True,
            email_domain_type=EmailDomainType.ENTERPRISE,
        )

        assert access_input.to_dict() == {
            "subscription_tier": "pro",
            "subscription_state": "active",
            "strategic_trial_used": True,
            "email_domain_type": "enterprise",
        }

    def test_access_result_to_dict(self):
        result = AccessResult(AccessLevel.FULL, "Active subscription", True, True)

        assert result.to_dict() == {
            "level": "full",
            "reason": "Active subscription",
            "can_regenerate": True,
            "can_view_full_plan": True,
        }

    def test_access_result_is_immutable(self):
        """Test that results cannot be altered after the decision."""
        result = AccessResult(AccessLevel.NONE, "x", False, False)

        with pytest.raises(AttributeError):
            result.level = AccessLevel.FULL


class TestUserProfile:
    """Test cases for UserProfile."""

    def test_defaults(self):
        profile = UserProfile(user_id="u1", email="a@gmail.com")

        assert profile.strategic_trial_used is False
        assert profile.strategic_calls_lifetime == 0
        assert profile.subscription_tier is None
        assert profile.created_at.endswith("Z")

    def test_round_trip_through_dict(self):
        """Test to_dict/from_dict with populated fields."""
        profile = UserProfile(
            user_id="u1",
            email="a@acme.io",
            subscription_tier="pro",
            subscription_state="grace",
            strategic_trial_used=True,
            email_domain_type="enterprise",
            strategic_calls_lifetime=4,
            grace_ends_at="2026-11-01T00:00:00Z",
        )

        assert UserProfile.from_dict(profile.to_dict()) == profile

    def test_from_dict_fills_missing_fields(self):
        """Test loading a sparse stored record."""
        profile = UserProfile.from_dict({"user_id": "u2"})

        assert profile.email == ""
        assert profile.strategic_trial_used is False
        assert profile.strategic_calls_lifetime == 0

    def test_validate_valid_profile(self):
        assert UserProfile(user_id="u1", email="a@gmail.com").validate() == []

    def test_validate_reports_issues(self):
        """Test that every problem is reported."""
        profile = UserProfile(
            user_id="",
            email="a@gmail.com",
            strategic_calls_lifetime=-1,
            subscription_expires_at="next tuesday",
        )

        issues = profile.validate()

        assert "User ID is required" in issues
        assert any("negative" in issue for issue in issues)
        assert any("subscription_expires_at" in issue for issue in issues)

    def test_touch_updates_timestamp(self):
        profile = UserProfile(user_id="u1", email="a@gmail.com", updated_at="2020-01-01T00:00:00Z")
        profile.touch()
        assert profile.updated_at != "2020-01-01T00:00:00Z"


class TestParseTimestamp:
    """Test cases for parse_timestamp."""

    def test_empty_values(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None

    def test_zulu_suffix(self):
        assert parse_timestamp("2026-03-01T12:00:00Z") == datetime(2026, 3, 1, 12, 0, 0)

    def test_offset_is_converted_to_utc(self):
        """Test that offsets are normalised to naive UTC."""
        assert parse_timestamp("2026-03-01T17:00:00+05:00") == datetime(2026, 3, 1, 12, 0, 0)

    def test_naive_value_kept(self):
        assert parse_timestamp("2026-03-01T12:00:00") == datetime(2026, 3, 1, 12, 0, 0)

    def test_invalid_value_raises(self):
        with pytest.raises(ValueError):
            parse_timestamp("not a date")

    def test_utc_now_is_naive_and_comparable(self):
        now = utc_now()

        assert now.tzinfo is None
        assert parse_timestamp(now.isoformat() + "Z") == now
