"""
Integration tests for the MCP server tools.

These tests call the tool functions registered on the FastMCP server
directly, against a temporary data root, and follow a user from
registration through the one-time preview to an upgrade.
"""

import pytest

import main


@pytest.fixture
def data_root(tmp_path):
    return str(tmp_path)


class TestStatelessTools:
    """Tools that do not touch the profile store."""

    def test_resolve_strategic_access_defaults(self):
        """Given no arguments, the caller-side defaults produce a trial preview."""
        result = main.resolve_access()

        assert result["input"] == {
            "subscription_tier": "standard",
            "subscription_state": "active",
            "strategic_trial_used": False,
            "email_domain_type": "standard",
        }
        assert result["access"]["level"] == "preview"
        assert result["can_access"] is True

    def test_resolve_strategic_access_paid(self):
        result = main.resolve_access(subscription_tier="pro", strategic_trial_used=True)

        assert result["access"]["level"] == "full"
        assert result["message"] == ""

    def test_resolve_strategic_access_coerces_unknown_domain_type(self):
        result = main.resolve_access(strategic_trial_used=True, email_domain_type="temporary")

        assert result["input"]["email_domain_type"] == "standard"
        assert result["access"]["reason"] == "Upgrade to Pro for unlimited strategic planning."

    def test_classify_email(self):
        assert main.classify_email("x@guerrillamail.com")["email_domain_type"] == "disposable"

    def test_check_feature_access(self):
        locked = main.check_feature_access("strategic-planning")
        unlocked = main.check_feature_access("strategic-planning", tier="pro")

        assert locked["has_access"] is False
        assert locked["tier"] == "standard"
        assert unlocked["has_access"] is True
        assert unlocked["feature"]["name"] == "Strategic Planning"

    def test_resources(self):
        tiers = main.resource_tiers()
        features = main.resource_features()

        assert "Pro: Strategic depth and analysis" in tiers
        assert "PKR 999" in tiers
        assert "strategic-planning (pro)" in features


class TestProfileLifecycle:
    """Registration, preview consumption and upgrade through the tools."""

    def test_full_lifecycle(self, data_root):
        registered = main.register_profile("u1", "founder@gmail.com", root=data_root)
        assert registered["profile"]["email_domain_type"] == "standard"

        assert main.get_strategic_access("u1", root=data_root)["level"] == "preview"
        assert main.can_save_strategic_plan("u1", root=data_root)["allowed"] is True

        consumed = main.consume_strategic_preview("u1", root=data_root)
        assert consumed["consumed_trial"] is True

        after_trial = main.get_strategic_access("u1", root=data_root)
        assert after_trial["level"] == "none"
        assert after_trial["message"] == "Upgrade to Pro for unlimited strategic planning."
        assert main.can_save_strategic_plan("u1", root=data_root)["allowed"] is False

        upgraded = main.update_subscription("u1", tier="pro", state="active", root=data_root)
        assert upgraded["access"]["level"] == "full"
        assert main.consume_strategic_preview("u1", root=data_root)["allowed"] is True

        summary = main.get_subscription_summary("u1", root=data_root)
        assert summary["effective_subscription"]["is_paid"] is True

    def test_duplicate_registration(self, data_root):
        main.register_profile("u1", "a@gmail.com", root=data_root)

        result = main.register_profile("u1", "a@gmail.com", root=data_root)

        assert "already exists" in result["error"]

    def test_missing_profile_errors(self, data_root):
        assert "not found" in main.update_subscription("ghost", tier="pro", root=data_root)["error"]
        assert "not found" in main.get_subscription_summary("ghost", root=data_root)["error"]

    def test_bad_timestamp_is_reported(self, data_root):
        main.register_profile("u1", "a@gmail.com", root=data_root)

        result = main.update_subscription("u1", expires_at="whenever", root=data_root)

        assert "error" in result

    def test_disposable_user_is_capped(self, data_root):
        main.register_profile("u2", "x@yopmail.com", subscription_tier="pro", subscription_state="expired", root=data_root)

        assert main.consume_strategic_preview("u2", root=data_root)["allowed"] is True
        assert main.consume_strategic_preview("u2", root=data_root)["allowed"] is False

    def test_invalid_user_id_is_reported(self, data_root):
        saved = main.can_save_strategic_plan("../evil", root=data_root)
        summary = main.get_subscription_summary("../evil", root=data_root)

        assert saved["allowed"] is False
        assert "Invalid user id" in saved["error"]
        assert "Invalid user id" in summary["error"]

    def test_corrupt_profile_is_reported(self, data_root, tmp_path):
        main.register_profile("u3", "a@gmail.com", root=data_root)
        (tmp_path / ".kaamyab" / "profiles" / "u3.json").write_text("{oops", encoding="utf-8")

        assert "corrupt" in main.can_save_strategic_plan("u3", root=data_root)["error"]
        assert "corrupt" in main.get_subscription_summary("u3", root=data_root)["error"]
        assert "error" in main.get_strategic_access("u3", root=data_root)


class TestRootResolution:
    """Data root selection for tools."""

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(ValueError, match="does not exist"):
            main.get_strategic_access("u1", root=str(tmp_path / "missing"))

    def test_environment_root(self, tmp_path, monkeypatch):
        monkeypatch.setenv("KAAMYAB_DATA_ROOT", str(tmp_path))

        main.register_profile("u1", "a@gmail.com")

        assert (tmp_path / ".kaamyab" / "profiles" / "u1.json").exists()

    def test_bad_environment_root(self, tmp_path, monkeypatch):
        monkeypatch.setenv("KAAMYAB_DATA_ROOT", str(tmp_path / "nope"))

        with pytest.raises(ValueError, match="KAAMYAB_DATA_ROOT"):
            main.get_strategic_access("u1")
