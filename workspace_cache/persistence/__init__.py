"""Local persistence layer for the workspace.

This package serializes the workspace to a size-constrained key-value
store, strips embedded media before writing, migrates older records on
load, and debounces saves coming from editing surfaces.
"""

from .autosave import DebouncedSaver, DEFAULT_AUTOSAVE_DELAY
from .backends import FileBackend, KeyValueBackend, MemoryBackend
from .errors import (
    PersistenceError,
    StoreReadError,
    StoreWriteError,
    QuotaExceededError,
    CorruptSnapshotError,
)
from .migrations import MIGRATIONS, Migration, migrate
from .serializer import QuotaSafeSerializer, STRIP_RULES
from .store import WorkspaceStore, DEFAULT_STORAGE_KEY

__all__ = [
    'DebouncedSaver',
    'DEFAULT_AUTOSAVE_DELAY',
    'FileBackend',
    'KeyValueBackend',
    'MemoryBackend',
    'PersistenceError',
    'StoreReadError',
    'StoreWriteError',
    'QuotaExceededError',
    'CorruptSnapshotError',
    'MIGRATIONS',
    'Migration',
    'migrate',
    'QuotaSafeSerializer',
    'STRIP_RULES',
    'WorkspaceStore',
    'DEFAULT_STORAGE_KEY',
]
