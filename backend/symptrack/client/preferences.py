"""Single process-wide holder for user preferences.

Loaded once at startup from the local cache and saved whenever a value
changes. Views read through :meth:`PreferenceStore.get` instead of touching
storage themselves.
"""
import logging
from typing import Literal

from pydantic import BaseModel, ValidationError

from symptrack.client.local_cache import LocalCache, StorageKey
from symptrack.core.errors import LocalStorageError

logger = logging.getLogger(__name__)


class Preferences(BaseModel):
    offline_mode: bool = True
    theme: Literal["light", "dark"] = "dark"
    high_contrast: bool = False
    large_text: bool = False
    screen_reader_optimized: bool = False


class PreferenceStore:
    def __init__(self, cache: LocalCache) -> None:
        self._cache = cache
        self._current = Preferences()
        self._loaded = False

    async def load(self) -> Preferences:
        """Read saved preferences; unreadable or invalid data falls back to defaults."""
        try:
            raw = await self._cache.get_item(StorageKey.preferences)
            self._current = Preferences.model_validate(raw) if raw else Preferences()
        except (LocalStorageError, ValidationError) as exc:
            logger.warning("Using default preferences, saved ones unreadable: %s", exc)
            self._current = Preferences()
        self._loaded = True
        return self._current

    def get(self) -> Preferences:
        return self._current

    @property
    def offline_mode(self) -> bool:
        return self._current.offline_mode

    async def update(self, **changes) -> Preferences:
        """Apply and persist changes.

        Raises:
            ValidationError: if a value is invalid; nothing is saved.
            LocalStorageError: if saving fails; the in-memory value is kept
                unchanged.
        """
        updated = Preferences.model_validate({**self._current.model_dump(), **changes})
        if updated == self._current:
            return self._current
        await self._cache.set_item(StorageKey.preferences, updated.model_dump())
        self._current = updated
        logger.info("Preferences updated: %s", sorted(changes))
        return self._current

    async def reset(self) -> Preferences:
        """Save and apply the default preferences.

        Raises:
            LocalStorageError: if saving fails; the in-memory value is kept.
        """
        defaults = Preferences()
        await self._cache.set_item(StorageKey.preferences, defaults.model_dump())
        self._current = defaults
        logger.info("Preferences reset to defaults")
        return self._current
