"""Typed exception hierarchy for workspace-cache errors.

This module defines the base exception used across the package together
with the errors raised by the workspace session and configuration layer.
Persistence errors live in workspace_cache.persistence.errors and share the
same base class, so callers can catch WorkspaceCacheError for any
application-level failure.
"""

from typing import Optional


class WorkspaceCacheError(Exception):
    """Base exception for all workspace-cache errors.

    Use this to catch any application-level error from the package.
    """
    pass


class WorkspaceError(WorkspaceCacheError):
    """Base exception for errors raised by workspace state operations."""
    pass


class EntityNotFoundError(WorkspaceError):
    """Raised when an operation targets an entity that does not exist."""

    def __init__(self, entity_type: str, entity_id: str):
        super().__init__(f"{entity_type} {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class InvalidUpdateError(WorkspaceError):
    """Raised when a partial update names a field the entity does not have."""

    def __init__(self, entity_type: str, field_name: str):
        super().__init__(
            f"Cannot update field '{field_name}' on {entity_type}"
        )
        self.entity_type = entity_type
        self.field_name = field_name


class ConfigError(WorkspaceCacheError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message
