"""Command-line interface for the workspace-cache store.

This package provides the `workspace-cache` tool used to bootstrap, inspect,
check, migrate and reset the local workspace record.
"""

from .models import ExitCode, WorkspaceSummary
from .store_command import StoreCommand, build_store

__all__ = [
    'ExitCode',
    'WorkspaceSummary',
    'StoreCommand',
    'build_store',
]
