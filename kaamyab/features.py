"""Product feature registry.

Maps every feature to the minimum tier that unlocks it. No payments and
no paywalls live here, only clarity about what exists where.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .models import SubscriptionTier
from .subscription import get_tier_display_name, tier_includes_access


class FeatureCategory(str, Enum):
    PLANNING = "planning"
    EXECUTION = "execution"
    INSIGHTS = "insights"
    EXPORT = "export"


@dataclass(slots=True, frozen=True)
class FeatureDefinition:
    """A feature and its tier requirement."""

    id: str
    name: str
    tier: SubscriptionTier
    category: FeatureCategory
    description: str
    value_explanation: str  # plain factual explanation, no sales copy
    previewable: bool  # show a read-only preview when locked

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "tier": self.tier.value,
            "tier_name": get_tier_display_name(self.tier),
            "category": self.category.value,
            "description": self.description,
            "value_explanation": self.value_explanation,
            "previewable": self.previewable,
        }


_STANDARD = SubscriptionTier.STANDARD
_STUDENT = SubscriptionTier.STUDENT
_PRO = SubscriptionTier.PRO
_BUSINESS = SubscriptionTier.BUSINESS

_FEATURES = [
    # Standard features, fully accessible to all users
    FeatureDefinition("standard-planning", "Standard Planning", _STANDARD, FeatureCategory.PLANNING,
                      "Create and manage task-focused plans",
                      "Create plans with tasks organized by week.", False),
    FeatureDefinition("task-execution", "Task Execution", _STANDARD, FeatureCategory.EXECUTION,
                      "Execute tasks with timers and tracking",
                      "Track time spent on tasks with built-in timers.", False),
    FeatureDefinition("today-workflow", "Today Workflow", _STANDARD, FeatureCategory.EXECUTION,
                      "Daily focus and task management",
                      "Focus on today's tasks with a dedicated view.", False),
    FeatureDefinition("basic-insights", "Execution Insights", _STANDARD, FeatureCategory.INSIGHTS,
                      "Basic execution patterns and feedback",
                      "See how you execute your tasks over time.", False),
    FeatureDefinition("scenario-tagging", "Scenario Tagging", _STANDARD, FeatureCategory.PLANNING,
                      "Tag tasks with context scenarios",
                      "Add context to your plans with scenario tags.", False),
    FeatureDefinition("calibration-insights", "Calibration Insights", _STANDARD, FeatureCategory.INSIGHTS,
                      "Estimation accuracy feedback",
                      "Track how accurate your time estimates are.", False),
    FeatureDefinition("progress-proof-current", "Progress Proof (Current Plan)", _STANDARD, FeatureCategory.INSIGHTS,
                      "Track progress on your current plan",
                      "See tangible proof of your progress on the current plan.", False),

    # Student
    FeatureDefinition("plan-history-list", "Plan History", _STUDENT, FeatureCategory.INSIGHTS,
                      "View past completed plans",
                      "Access your history of completed plans to track long-term progress.", True),

    # Pro
    FeatureDefinition("strategic-planning", "Strategic Planning", _PRO, FeatureCategory.PLANNING,
                      "Advanced planning with context discovery",
                      "Strategic planning identifies assumptions, risks, and blind spots before you start.", True),
    FeatureDefinition("strategic-discovery", "Strategic Discovery", _PRO, FeatureCategory.PLANNING,
                      "AI-guided context discovery flow",
                      "Answer guided questions to uncover hidden context and constraints.", False),
    FeatureDefinition("strategy-overview", "Strategy Overview", _PRO, FeatureCategory.PLANNING,
                      "High-level strategy and risk analysis",
                      "See a high-level view of your strategy, assumptions, and risks.", True),
    FeatureDefinition("strategic-blind-spots", "Strategic Blind Spots", _PRO, FeatureCategory.INSIGHTS,
                      "AI-identified potential issues",
                      "Discover potential blind spots and risks you may have missed.", True),
    FeatureDefinition("deeper-diagnosis", "Deeper Execution Diagnosis", _PRO, FeatureCategory.INSIGHTS,
                      "Advanced pattern analysis",
                      "Execution diagnosis highlights recurring inefficiencies over time.", True),
    FeatureDefinition("historical-comparisons", "Historical Comparisons", _PRO, FeatureCategory.INSIGHTS,
                      "Multi-plan progress comparisons",
                      "Compare your current plan with past plans to see trends.", True),
    FeatureDefinition("next-cycle-guidance", "Next-Cycle Guidance", _PRO, FeatureCategory.INSIGHTS,
                      "Data-backed planning recommendations",
                      "Get suggestions for your next plan based on your execution history.", True),
    FeatureDefinition("scenario-patterns", "Long-term Scenario Patterns", _PRO, FeatureCategory.INSIGHTS,
                      "Cross-plan scenario analysis",
                      "See how different scenarios affect your execution patterns over time.", True),
    FeatureDefinition("progress-pdf-export", "Progress PDF Export", _PRO, FeatureCategory.EXPORT,
                      "Export progress reports as PDF",
                      "Exports generate professional progress reports for sharing.", False),
    FeatureDefinition("strategic-review-export", "Strategic Review Export", _PRO, FeatureCategory.EXPORT,
                      "Export professional plan and insights summary as PDF",
                      "Create professional summaries of your strategic plans and insights.", False),
    FeatureDefinition("share-review", "Share Review", _PRO, FeatureCategory.EXPORT,
                      "Generate shareable read-only review links",
                      "Share your progress with others via secure read-only links.", False),
    FeatureDefinition("advisor-view", "Advisor View", _PRO, FeatureCategory.EXPORT,
                      "Professional read-only view for mentors and advisors",
                      "Create read-only links for mentors to review your progress.", False),
    FeatureDefinition("external-feedback", "External Feedback", _PRO, FeatureCategory.INSIGHTS,
                      "Collect structured feedback from reviewers",
                      "Gather structured feedback from people who review your shared plans.", False),
    FeatureDefinition("plan-comparison", "Plan Comparison", _PRO, FeatureCategory.INSIGHTS,
                      "Compare current plan with past plans",
                      "Compare your current plan with past plans to see trends.", True),
    FeatureDefinition("comparison-insights", "Comparative Insights", _PRO, FeatureCategory.INSIGHTS,
                      "AI-generated observational insights across plans",
                      "Get AI-generated observations comparing your plans over time.", True),
    FeatureDefinition("pattern-signals", "Pattern Signals", _PRO, FeatureCategory.INSIGHTS,
                      "Cross-plan pattern detection",
                      "Detect recurring patterns across multiple plans.", True),
    FeatureDefinition("planning-style-profile", "Planning Style Profile", _PRO, FeatureCategory.INSIGHTS,
                      "Personal planning style derived from behavior",
                      "See patterns in how you approach planning based on your history.", True),
    FeatureDefinition("manual-task-add", "Add Tasks Manually", _PRO, FeatureCategory.PLANNING,
                      "Add new tasks directly to your plan",
                      "Add new tasks to your plan without regenerating.", False),
    FeatureDefinition("task-split", "Split Tasks", _PRO, FeatureCategory.PLANNING,
                      "Split existing tasks into smaller parts",
                      "Break down large tasks into smaller, manageable pieces.", False),

    # Business
    FeatureDefinition("multi-plan-comparison", "Multi-Plan Comparison", _BUSINESS, FeatureCategory.INSIGHTS,
                      "Compare multiple plans simultaneously",
                      "Compare multiple plans side-by-side to identify trends.", True),
    FeatureDefinition("long-term-patterns", "Long-term Pattern Tracking", _BUSINESS, FeatureCategory.INSIGHTS,
                      "Track patterns across extended time periods",
                      "Track execution patterns over months and years.", True),
    FeatureDefinition("professional-exports", "Professional Exports", _BUSINESS, FeatureCategory.EXPORT,
                      "Enhanced export options for teams",
                      "Create professional exports suitable for team and stakeholder reporting.", False),
]

FEATURE_REGISTRY: Dict[str, FeatureDefinition] = {feature.id: feature for feature in _FEATURES}


def get_feature_definition(feature_id: str) -> Optional[FeatureDefinition]:
    return FEATURE_REGISTRY.get(feature_id)


def is_pro_feature(feature_id: str) -> bool:
    """Check if a feature requires a paid tier (not Standard)."""
    feature = FEATURE_REGISTRY.get(feature_id)
    return feature is not None and feature.tier != SubscriptionTier.STANDARD


def has_feature_access(feature_id: str, user_tier: Union[str, SubscriptionTier, None]) -> bool:
    """Check if ``user_tier`` unlocks ``feature_id``.

    Unknown features default to accessible. Unknown tiers rank as standard.
    """
    feature = FEATURE_REGISTRY.get(feature_id)
    if feature is None:
        return True
    return tier_includes_access(user_tier or SubscriptionTier.STANDARD, feature.tier)


def get_features_by_tier(tier: Union[str, SubscriptionTier]) -> List[FeatureDefinition]:
    return [feature for feature in FEATURE_REGISTRY.values() if feature.tier == tier]


def get_features_by_category(category: Union[str, FeatureCategory]) -> List[FeatureDefinition]:
    return [feature for feature in FEATURE_REGISTRY.values() if feature.category == category]
