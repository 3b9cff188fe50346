"""Workspace store: the single read/write boundary to local storage.

The store persists the whole workspace under one fixed key. Saving is
best-effort: any serialization or storage failure (including an exceeded
quota) is logged and reported through the return value, never raised, and
leaves the previously stored record untouched. Loading always returns a
fully migrated state; a missing, unreadable or corrupt record collapses
to the fresh bootstrap state.

Concurrent sessions writing the same key are last-write-wins at the
granularity of a full-state write.
"""

import json
import logging
from typing import Any, Dict, Optional

from ..entities.defaults import fresh_state
from ..entities.models import WorkspaceState
from ..entities.parser import SnapshotParser
from .backends import KeyValueBackend, validate_key
from .errors import CorruptSnapshotError, PersistenceError, StoreReadError
from .migrations import migrate
from .serializer import QuotaSafeSerializer

logger = logging.getLogger(__name__)

# Key the workspace record is stored under
DEFAULT_STORAGE_KEY = 'gm-ai-workspace'


class WorkspaceStore:
    """Saves and loads workspace snapshots through a key-value backend.

    Attributes:
        backend: Storage substrate
        key: Fixed key of the workspace record
        serializer: Quota-safe serializer used on save

    Example:
        >>> store = WorkspaceStore(MemoryBackend())
        >>> store.save(state)
        True
        >>> store.load() == state
        True
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        key: str = DEFAULT_STORAGE_KEY,
        serializer: Optional[QuotaSafeSerializer] = None,
    ):
        validate_key(key)
        self.backend = backend
        self.key = key
        self.serializer = serializer or QuotaSafeSerializer()
        self._parser = SnapshotParser()

    def save(self, state: WorkspaceState) -> bool:
        """Persist a state snapshot.

        Args:
            state: In-memory workspace state (not modified)

        Returns:
            True if the record was written, False if the save was abandoned
        """
        try:
            payload = self.serializer.encode(state, key=self.key)
            self.backend.set(self.key, payload)
        except PersistenceError as e:
            logger.error(f"Failed to save workspace: {e}")
            return False
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize workspace: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error saving workspace: {e}")
            return False

        logger.debug(f"Saved workspace record '{self.key}' ({len(payload)} characters)")
        return True

    def load_raw(self) -> Optional[Dict[str, Any]]:
        """Read and decode the stored record without migrating it.

        Returns:
            The decoded record, or None if no record is stored

        Raises:
            StoreReadError: If the backend cannot read the record
            CorruptSnapshotError: If the record is not a JSON object
        """
        content = self.backend.get(self.key)
        if content is None or not content.strip():
            return None

        try:
            record = json.loads(content)
        except json.JSONDecodeError as e:
            raise CorruptSnapshotError(self.key, f"invalid JSON: {e}")

        if not isinstance(record, dict):
            raise CorruptSnapshotError(
                self.key,
                f"expected a JSON object, got {type(record).__name__}"
            )

        return record

    def load(self) -> WorkspaceState:
        """Load the stored workspace, migrated to the current schema.

        Returns:
            The stored state, or the fresh bootstrap state when no valid
            record exists
        """
        try:
            record = self.load_raw()
        except StoreReadError as e:
            logger.error(f"Failed to load workspace: {e}")
            return fresh_state()
        except CorruptSnapshotError as e:
            logger.warning(f"Discarding stored workspace: {e}")
            return fresh_state()

        if record is None:
            logger.info("No stored workspace found, starting fresh")
            return fresh_state()

        try:
            return self._parser.parse_state(migrate(record))
        except Exception as e:
            logger.error(f"Failed to read stored workspace, starting fresh: {e}")
            return fresh_state()

    def reset(self) -> None:
        """Delete the stored record.

        Raises:
            StoreWriteError: If the backend cannot delete the record
        """
        self.backend.delete(self.key)
        logger.info(f"Deleted workspace record '{self.key}'")
