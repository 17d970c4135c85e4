"""
Storage Services Package

Provides the abstract key-value store interface, its in-memory and
JSON-file implementations, and the StoreAdapter that repositories use.
"""

from programme_tracker.services.storage.interface import (
    KeyValueStore,
    QuotaExceededError,
    StorageError,
)
from programme_tracker.services.storage.memory import InMemoryStore
from programme_tracker.services.storage.json_files import JsonFileStore
from programme_tracker.services.storage.adapter import StoreAdapter

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "QuotaExceededError",
    "StorageError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
    "StoreAdapter",
]
