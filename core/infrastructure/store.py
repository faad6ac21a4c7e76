"""
Persistent key/value store abstraction (port).

This module defines the store interface that the license state
repository persists through. Implementations can use the host's
durable storage, Django's cache framework, or plain memory.
"""
from abc import ABC, abstractmethod
from typing import Any


class StorePort(ABC):
    """
    Abstract persistent store port.

    Values must be JSON-compatible (dicts, lists, strings, numbers,
    booleans, None). Setting a key to None removes it.
    """

    @abstractmethod
    async def get(self, key: str, default: Any = None) -> Any:
        """
        Get a value from the store.

        Args:
            key: Store key
            default: Value returned when the key is absent

        Returns:
            Stored value or default
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """
        Set a value in the store.

        Args:
            key: Store key
            value: Value to persist (None removes the key)
        """
        pass
