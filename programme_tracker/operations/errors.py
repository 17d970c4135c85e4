"""
Operation Errors

Every error a mutation, report or import can raise derives from
OperationError. The application facade catches OperationError at its
boundary and turns it into a notification; nothing here is fatal.
"""

from typing import Optional

from programme_tracker.models.validation import ValidationIssue, ValidationResult
from programme_tracker.services.storage import StorageError as StoreBackendError


class OperationError(Exception):
    """Base exception for user-facing operations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(OperationError):
    """Input is missing, malformed, or collides with an existing record."""

    def __init__(self, message: str, result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.result = result

    @property
    def issues(self) -> list[ValidationIssue]:
        return list(self.result.issues) if self.result else []


class NotFoundError(OperationError):
    """The targeted record does not exist."""
    pass


class OutOfRangeError(NotFoundError):
    """A positional target lies outside the collection."""

    def __init__(self, message: str, index: int, length: int):
        super().__init__(message)
        self.index = index
        self.length = length


class StorageError(OperationError, StoreBackendError):
    """
    A validated change could not be written.

    The in-memory collection keeps the change until the next reload,
    but it is not durable.
    """

    def __init__(self, message: str, key: str):
        super().__init__(message)
        self.key = key


class ExportError(OperationError):
    """A report or backup could not be produced or read."""
    pass
