"""Strategic access service.

Composes the profile store, the input adapter and the resolver into the
operations callers actually perform: evaluate a user's access, consume a
strategic generation (server-side owner of the trial transition), and
guard the saving of strategic plans. Results are plain dict payloads.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .access import get_strategic_access_message, is_paid_active, resolve_strategic_access
from .adapter import build_access_input, unauthenticated_result
from .models import AccessLevel, AccessResult, UserProfile
from .store import ProfileStore
from .subscription import get_effective_subscription, get_subscription_warning
from .kaamyab_logging import (
    log_access_decision,
    log_error_with_context,
    log_operation,
    log_performance,
)

logger = logging.getLogger("kaamyab.service")

_user_locks: Dict[tuple, threading.Lock] = {}
_user_locks_guard = threading.Lock()


def _user_lock(profiles_dir: Path, user_id: str) -> threading.Lock:
    """Lock serializing read-modify-write cycles for one stored profile."""
    key = (str(profiles_dir), user_id)
    with _user_locks_guard:
        lock = _user_locks.get(key)
        if lock is None:
            lock = _user_locks[key] = threading.Lock()
        return lock


class StrategicAccessService:
    """Evaluate and act on strategic planning access for stored users."""

    def __init__(self, root: Path | str):
        self.store = ProfileStore(root)

    def _access_payload(self, result: AccessResult) -> Dict[str, Any]:
        payload = result.to_dict()
        payload["message"] = get_strategic_access_message(result)
        payload["can_access"] = result.level != AccessLevel.NONE
        return payload

    def _resolve(self, user_id: str) -> tuple[Optional[UserProfile], AccessResult]:
        profile = self.store.load_profile(user_id)
        if profile is None:
            return None, unauthenticated_result()
        return profile, resolve_strategic_access(build_access_input(profile))

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    @log_performance("evaluate_access")
    def evaluate(self, user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Resolve access for ``user_id`` together with its subscription summary."""
        try:
            profile, result = self._resolve(user_id)
            if profile is not None:
                effective = get_effective_subscription(profile, now=now)
                summary = effective.to_dict()
                warning = get_subscription_warning(effective).to_dict()
            else:
                summary = warning = None
        except ValueError as e:
            log_error_with_context(e, {"operation": "evaluate_access", "user_id": user_id})
            return {
                "user_id": user_id,
                "error": f"Failed to evaluate strategic access: {e}",
                "suggestion": "Check that the user id is valid and the stored profile is readable",
            }

        log_access_decision(user_id, result.level.value, result.reason)

        payload = self._access_payload(result)
        payload["user_id"] = user_id
        payload["effective_subscription"] = summary
        payload["warning"] = warning
        return payload

    def subscription_summary(self, user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Effective subscription and any expiry or grace warning for a stored user."""
        try:
            profile = self.store.load_profile(user_id)
            if profile is None:
                return {"error": f"Profile '{user_id}' not found", "suggestion": "Call register_profile first"}
            effective = get_effective_subscription(profile, now=now)
        except ValueError as e:
            log_error_with_context(e, {"operation": "subscription_summary", "user_id": user_id})
            return {
                "user_id": user_id,
                "error": f"Failed to read subscription: {e}",
                "suggestion": "Check that the user id is valid and the stored profile is readable",
            }

        return {
            "user_id": user_id,
            "effective_subscription": effective.to_dict(),
            "warning": get_subscription_warning(effective).to_dict(),
        }

    # ------------------------------------------------------------------
    # Trial consumption
    # ------------------------------------------------------------------

    def _refusal(self, user_id: str, result: AccessResult, error: str, suggestion: str) -> Dict[str, Any]:
        return {
            "user_id": user_id,
            "allowed": False,
            "consumed_trial": False,
            "access": self._access_payload(result),
            "error": error,
            "suggestion": suggestion,
        }

    @log_performance("consume_strategic_generation")
    def consume_strategic_generation(self, user_id: str) -> Dict[str, Any]:
        """Record one strategic generation, consuming the preview if that is all the user has.

        Users with no access are turned away without touching the store.
        Generations for the same user are serialized so the preview is
        granted at most once.
        """
        try:
            with log_operation("consume_strategic_generation", user_id=user_id):
                with _user_lock(self.store.profiles_dir, user_id):
                    return self._consume(user_id)
        except (KeyError, ValueError, OSError) as e:
            log_error_with_context(e, {"operation": "consume_strategic_generation", "user_id": user_id})
            return {
                "user_id": user_id,
                "allowed": False,
                "consumed_trial": False,
                "error": f"Failed to record strategic generation: {e}",
                "suggestion": "Register the profile with register_profile before generating",
            }

    def _consume(self, user_id: str) -> Dict[str, Any]:
        profile, result = self._resolve(user_id)

        if result.level == AccessLevel.NONE:
            logger.info(f"Strategic generation refused for {user_id}: {result.reason}")
            return self._refusal(
                user_id, result, result.reason, "Upgrade to a paid tier to keep using strategic planning"
            )

        consumed_trial = False
        if result.level == AccessLevel.PREVIEW:
            consumed_trial = self.store.mark_strategic_trial_used(user_id)
            if not consumed_trial:
                logger.warning(f"Strategic preview for {user_id} was already consumed")
                return self._refusal(
                    user_id,
                    result,
                    "Strategic preview already used",
                    "Upgrade to a paid tier to keep using strategic planning",
                )
        updated = self.store.record_strategic_call(user_id)

        return {
            "user_id": user_id,
            "allowed": True,
            "consumed_trial": consumed_trial,
            "access": self._access_payload(result),
            "strategic_calls_lifetime": updated.strategic_calls_lifetime,
            "message": get_strategic_access_message(result),
        }

    # ------------------------------------------------------------------
    # Plan save guard
    # ------------------------------------------------------------------

    def can_save_strategic_plan(self, user_id: str) -> bool:
        """Whether a strategic plan may be stored for ``user_id``.

        Paid and active users always may; others only while their trial is
        unused. Unknown users may not. Raises ValueError for invalid ids
        and unreadable profiles.
        """
        profile = self.store.load_profile(user_id)
        if profile is None:
            return False

        access_input = build_access_input(profile)
        return is_paid_active(access_input) or not access_input.strategic_trial_used

    def plan_save_status(self, user_id: str) -> Dict[str, Any]:
        """Payload form of :meth:`can_save_strategic_plan`."""
        try:
            allowed = self.can_save_strategic_plan(user_id)
        except ValueError as e:
            log_error_with_context(e, {"operation": "can_save_strategic_plan", "user_id": user_id})
            return {
                "user_id": user_id,
                "allowed": False,
                "error": f"Failed to check strategic plan save: {e}",
                "suggestion": "Check that the user id is valid and the stored profile is readable",
            }
        return {"user_id": user_id, "allowed": allowed}
