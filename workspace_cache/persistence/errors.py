"""Typed exception hierarchy for persistence errors.

This module defines all custom exceptions raised by the serializer, the
storage backends and the migration engine. All exceptions inherit from
PersistenceError so the store adapter can catch them in one place and
include descriptive messages with context to help with debugging.
"""

from typing import Optional

from ..errors import WorkspaceCacheError


class PersistenceError(WorkspaceCacheError):
    """Base exception for all persistence errors."""
    pass


class StoreReadError(PersistenceError):
    """Raised when a backend cannot read a stored record."""

    def __init__(self, key: str, reason: Optional[str] = None):
        message = f"Failed to read record '{key}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.key = key
        self.reason = reason


class StoreWriteError(PersistenceError):
    """Raised when a backend cannot write or delete a stored record."""

    def __init__(self, key: str, operation: str, reason: Optional[str] = None):
        message = f"Store operation '{operation}' failed for record '{key}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.key = key
        self.operation = operation
        self.reason = reason


class QuotaExceededError(PersistenceError):
    """Raised when a record would not fit in the store's capacity."""

    def __init__(self, key: str, size_bytes: int, quota_bytes: int):
        super().__init__(
            f"Record '{key}' is {size_bytes} bytes, exceeding the {quota_bytes} byte quota"
        )
        self.key = key
        self.size_bytes = size_bytes
        self.quota_bytes = quota_bytes


class CorruptSnapshotError(PersistenceError):
    """Raised when a stored record cannot be decoded into a workspace."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Record '{key}' is corrupt: {reason}")
        self.key = key
        self.reason = reason
