"""Settings Store - Persistence for the user's profile settings."""

import logging
import threading
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from ..core.models import ProfileSettings, UserProfile
from .storage import KeyValueStore, StorageError


logger = logging.getLogger(__name__)

SETTINGS_KEY = "user_profile_v1"


class ProfileSettingsStore:
    """Reads and writes ProfileSettings as a single JSON document.

    update() is a load-modify-save and runs under a lock, so a health sync
    and a profile edit arriving together keep each other's fields.
    """

    def __init__(self, storage: KeyValueStore) -> None:
        self._storage = storage
        self._lock = threading.Lock()

    def _read(self) -> ProfileSettings:
        payload = self._storage.get(SETTINGS_KEY)
        if payload is None:
            return ProfileSettings()
        try:
            return ProfileSettings.model_validate_json(payload)
        except ValidationError as e:
            logger.warning("Discarding unreadable settings: %s", str(e))
            return ProfileSettings()

    def load(self) -> ProfileSettings:
        """Fetch settings, falling back to defaults when missing or unreadable."""
        try:
            return self._read()
        except StorageError:
            logger.warning("Settings unavailable, using defaults")
            return ProfileSettings()

    def save(self, settings: ProfileSettings) -> bool:
        """Persist settings.

        Args:
            settings: Settings to save

        Returns:
            True if successful
        """
        logger.info("Saving profile settings")
        return self._storage.set(SETTINGS_KEY, settings.model_dump_json())

    def update(self, **fields: Any) -> ProfileSettings | None:
        """Change some fields and save.

        Fields passed as None are left unchanged. Stored settings are never
        replaced by defaults: if they cannot be read, nothing is written.

        Returns:
            Updated settings if saved, None otherwise

        Raises:
            ValidationError: If a field value is invalid
        """
        with self._lock:
            try:
                stored = self._read()
            except StorageError:
                logger.error("Skipping settings update: stored settings unreadable")
                return None

            current = stored.model_dump()
            current.update({k: v for k, v in fields.items() if v is not None})
            current["updated_at"] = datetime.utcnow()
            settings = ProfileSettings.model_validate(current)

            if self.save(settings):
                return settings
            return None

    def profile(self) -> UserProfile:
        """Build a fresh profile snapshot from the stored settings."""
        return self.load().to_profile()
