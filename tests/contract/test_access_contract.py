"""
Contract tests for the strategic access resolver.

The resolver must be total over every combination of tier, state, trial
flag and email domain type, and its result flags must always agree with
the decided level.
"""

import itertools

import pytest

from kaamyab.access import can_access_strategic_planning, resolve_strategic_access
from kaamyab.models import AccessInput, AccessLevel

TIERS = ["standard", "pro", "platinum"]  # free, known paid, unknown
STATES = ["active", "expired"]
TRIAL_FLAGS = [True, False]
DOMAIN_TYPES = ["standard", "disposable", "enterprise"]

ALL_INPUTS = [
    AccessInput(
        subscription_tier=tier,
        subscription_state=state,
        strategic_trial_used=trial_used,
        email_domain_type=domain_type,
    )
    for tier, state, trial_used, domain_type in itertools.product(TIERS, STATES, TRIAL_FLAGS, DOMAIN_TYPES)
]


def _paid_and_active(access_input):
    return access_input.subscription_tier != "standard" and access_input.subscription_state == "active"


def test_input_grid_covers_all_combinations():
    """Contract: the grid spans 3 x 2 x 2 x 3 combinations."""
    assert len(ALL_INPUTS) == 36


@pytest.mark.parametrize("access_input", ALL_INPUTS)
class TestResolverContract:
    """Properties that hold for every input."""

    def test_total(self, access_input):
        """Given any valid input, a level from the closed set is returned."""
        result = resolve_strategic_access(access_input)
        assert result.level in {AccessLevel.NONE, AccessLevel.PREVIEW, AccessLevel.FULL}
        assert isinstance(result.reason, str) and result.reason

    def test_paid_overrides_everything(self, access_input):
        """Given an active paid subscription, access is full regardless of other fields."""
        if _paid_and_active(access_input):
            assert resolve_strategic_access(access_input).level == AccessLevel.FULL

    def test_disposable_cap(self, access_input):
        """Given a disposable email and no active paid tier, access is never full."""
        if access_input.email_domain_type == "disposable" and not _paid_and_active(access_input):
            assert resolve_strategic_access(access_input).level != AccessLevel.FULL

    def test_flags_match_level(self, access_input):
        """Full access and both capability flags always go together."""
        result = resolve_strategic_access(access_input)
        full = result.level == AccessLevel.FULL
        assert result.can_regenerate is full
        assert result.can_view_full_plan is full

    def test_predicate_agrees_with_resolver(self, access_input):
        """can_access_strategic_planning is exactly level != none."""
        expected = resolve_strategic_access(access_input).level != AccessLevel.NONE
        assert can_access_strategic_planning(access_input) is expected

    def test_idempotent(self, access_input):
        """Repeated calls yield structurally identical results."""
        assert resolve_strategic_access(access_input) == resolve_strategic_access(access_input)

    def test_input_untouched(self, access_input):
        """The resolver only reads its input."""
        before = access_input.to_dict()
        resolve_strategic_access(access_input)
        assert access_input.to_dict() == before
