"""
Abstract Key-Value Store Interface

DESIGN DECISION: The tracker persists into named text slots, one per
collection. We define an abstract interface for that byte store so we can:
1. Keep data as JSON files on disk for everyday use
2. Use in-memory storage for testing
3. Keep repositories decoupled from where the bytes live

The interface is intentionally tiny. Serialization, defaults and error
reporting belong to the StoreAdapter that sits on top of it.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for a key-value text store.

    Implementations may raise StorageError (or any other exception) on
    failure; callers go through StoreAdapter, which never lets them escape.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the text stored under a key.

        Returns:
            The stored text, or None if the key has never been written
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store text under a key, replacing any previous value.

        On failure the previous value must be left untouched.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete a key. Removing a missing key is not an error."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Delete every key."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List the keys currently stored, sorted."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class QuotaExceededError(StorageError):
    """A write would take the store over its size limit."""
    pass
