"""File-backed profile store.

Keeps one JSON document per user under ``<root>/.kaamyab/profiles`` and
owns the writes that strategic access depends on: subscription updates,
the one-way strategic trial flag and the strategic call counter.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional

from .email_domains import classify_email_domain
from .models import UserProfile, utc_now
from .kaamyab_logging import (
    log_error_with_context,
    log_operation,
    log_performance,
    log_profile_event,
    log_trial_consumed,
)

logger = logging.getLogger("kaamyab.store")

_USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")


class ProfileStore:
    """Manage stored user profiles within a data root."""

    STORAGE_DIR_ENV = "KAAMYAB_STORAGE_DIR"
    DEFAULT_STORAGE_DIR = ".kaamyab"

    def __init__(self, root: Path | str):
        """Initialize the store, creating its directories if needed."""
        self.root = Path(root).expanduser().resolve()
        storage_name = os.getenv(self.STORAGE_DIR_ENV) or self.DEFAULT_STORAGE_DIR

        self.base_dir = self.root / storage_name
        self.profiles_dir = self.base_dir / "profiles"

        try:
            self.profiles_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log_error_with_context(e, {"operation": "store_init", "root": str(self.root)})
            raise RuntimeError(f"Could not initialize profile store at {self.root}: {e}") from e

        logger.debug(f"Profile store initialized at {self.base_dir}")

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _profile_path(self, user_id: str) -> Path:
        if not user_id or not _USER_ID_PATTERN.match(user_id):
            raise ValueError(f"Invalid user id: '{user_id}'")
        return self.profiles_dir / f"{user_id}.json"

    def profile_exists(self, user_id: str) -> bool:
        return self._profile_path(user_id).exists()

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    @log_performance("create_profile")
    def create_profile(
        self,
        user_id: str,
        email: str,
        *,
        subscription_tier: Optional[str] = None,
        subscription_state: Optional[str] = None,
        email_verified_at: Optional[str] = None,
    ) -> UserProfile:
        """Create a profile, classifying the email domain on the way in."""
        path = self._profile_path(user_id)
        if path.exists():
            raise ValueError(f"Profile '{user_id}' already exists")

        profile = UserProfile(
            user_id=user_id,
            email=email,
            subscription_tier=subscription_tier,
            subscription_state=subscription_state,
            email_domain_type=classify_email_domain(email).value,
            email_verified_at=email_verified_at,
        )

        with log_operation("create_profile", user_id=user_id):
            self._write(profile)

        log_profile_event("created", user_id, email_domain_type=profile.email_domain_type)
        return profile

    def load_profile(self, user_id: str) -> Optional[UserProfile]:
        """Load a profile, or None if it does not exist."""
        path = self._profile_path(user_id)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return UserProfile.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            log_error_with_context(e, {"operation": "load_profile", "user_id": user_id, "path": str(path)})
            raise ValueError(f"Profile '{user_id}' is corrupt: {e}") from e

    def save_profile(self, profile: UserProfile) -> Path:
        issues = profile.validate()
        if issues:
            raise ValueError(f"Invalid profile '{profile.user_id}': {'; '.join(issues)}")
        profile.touch()
        return self._write(profile)

    def list_profiles(self) -> List[str]:
        """Return the ids of all stored profiles."""
        return sorted(path.stem for path in self.profiles_dir.glob("*.json"))

    def delete_profile(self, user_id: str) -> bool:
        path = self._profile_path(user_id)
        if not path.exists():
            return False
        path.unlink()
        log_profile_event("deleted", user_id)
        return True

    # ------------------------------------------------------------------
    # Access-related updates
    # ------------------------------------------------------------------

    def _require(self, user_id: str) -> UserProfile:
        profile = self.load_profile(user_id)
        if profile is None:
            raise KeyError(f"Profile '{user_id}' not found")
        return profile

    @log_performance("update_subscription")
    def update_subscription(
        self,
        user_id: str,
        *,
        tier: Optional[str] = None,
        state: Optional[str] = None,
        expires_at: Optional[str] = None,
        grace_ends_at: Optional[str] = None,
    ) -> UserProfile:
        """Update the subscription fields that were provided."""
        profile = self._require(user_id)

        if tier is not None:
            profile.subscription_tier = tier
        if state is not None:
            profile.subscription_state = state
        if expires_at is not None:
            profile.subscription_expires_at = expires_at
        if grace_ends_at is not None:
            profile.grace_ends_at = grace_ends_at

        self.save_profile(profile)
        log_profile_event(
            "updated",
            user_id,
            subscription_tier=profile.subscription_tier,
            subscription_state=profile.subscription_state,
        )
        return profile

    @log_performance("mark_strategic_trial_used")
    def mark_strategic_trial_used(self, user_id: str) -> bool:
        """Flip the strategic trial flag to used.

        Idempotent: returns True only for the unused -> used transition.
        The flag never flips back.
        """
        profile = self._require(user_id)
        if profile.strategic_trial_used:
            logger.debug(f"Strategic trial already used for {user_id}")
            return False

        profile.strategic_trial_used = True
        self.save_profile(profile)
        log_trial_consumed(user_id)
        return True

    def record_strategic_call(self, user_id: str) -> UserProfile:
        """Count one strategic generation and stamp its time."""
        profile = self._require(user_id)
        profile.strategic_calls_lifetime += 1
        profile.strategic_last_call_at = utc_now().isoformat(timespec="seconds") + "Z"
        self.save_profile(profile)
        return profile

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write(self, profile: UserProfile) -> Path:
        path = self._profile_path(profile.user_id)
        fd, tmp_name = tempfile.mkstemp(dir=self.profiles_dir, prefix=f".{profile.user_id}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(profile.to_dict(), handle, indent=2)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return path
