"""
Store adapter implementations.

Provides in-memory and Django cache implementations of StorePort.
"""

import copy
import logging
from typing import Any, Dict, Optional

from asgiref.sync import sync_to_async

from core.infrastructure.store import StorePort

logger = logging.getLogger(__name__)


class InMemoryStore(StorePort):
    """
    Dict-backed store.

    Values are deep-copied on the way in and out so callers can never
    mutate persisted state through a shared reference.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    async def set(self, key: str, value: Any) -> None:
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = copy.deepcopy(value)
        logger.debug("Store set: %s", key)

    def snapshot(self) -> Dict[str, Any]:
        """Return a copy of everything currently stored."""
        return copy.deepcopy(self._data)


class DjangoCacheStore(StorePort):
    """
    Django cache adapter implementing StorePort.

    Uses Django's cache framework. With the file-based backend configured
    in dev and prod settings, state survives process restarts. Entries
    are written without expiry.
    """

    def __init__(self, alias: str = "default"):
        """
        Initialize the adapter.

        Args:
            alias: Name of the cache in settings.CACHES
        """
        self.alias = alias

    @property
    def _cache(self):
        from django.core.cache import caches

        return caches[self.alias]

    async def get(self, key: str, default: Any = None) -> Any:
        """
        Get a value from the cache.

        Args:
            key: Store key
            default: Value returned when the key is absent

        Returns:
            Stored value or default
        """
        try:
            value = await sync_to_async(self._cache.get)(key, default)
            logger.debug("Store get: %s (hit=%s)", key, value is not default)
            return value
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error reading from store: %s", e, exc_info=True)
            return default

    async def set(self, key: str, value: Any) -> None:
        """
        Set a value in the cache.

        Args:
            key: Store key
            value: Value to persist (None removes the key)
        """
        try:
            if value is None:
                await sync_to_async(self._cache.delete)(key)
                logger.debug("Store delete: %s", key)
            else:
                await sync_to_async(self._cache.set)(key, value, timeout=None)
                logger.debug("Store set: %s", key)
        except Exception as e:
            logger.error("Error writing to store: %s", e, exc_info=True)
            raise
