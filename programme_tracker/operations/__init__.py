"""Mutation operations package."""

from programme_tracker.operations.errors import (
    ExportError,
    NotFoundError,
    OperationError,
    OutOfRangeError,
    StorageError,
    ValidationError,
)
from programme_tracker.operations.mutations import MutationService

__all__ = [
    "ExportError",
    "MutationService",
    "NotFoundError",
    "OperationError",
    "OutOfRangeError",
    "StorageError",
    "ValidationError",
]
