"""Local key-value storage backends.

A backend is the raw get/set substrate underneath the workspace store. Two
implementations are provided:

- MemoryBackend: an in-process dictionary with an optional per-value quota,
  used by tests and by embedders that manage storage themselves.
- FileBackend: one UTF-8 file per key inside a directory. Writes go to a
  temporary file that replaces the record atomically, so a failed write
  never damages the previous record. An advisory lock serialises writers
  from different processes; it prevents torn writes, not lost updates
  (the last complete write still wins).
"""

import logging
import os
import re
import tempfile
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

# Import fcntl for POSIX file locking (not available on Windows)
try:
    import fcntl
    HAS_FCNTL = True
except ImportError:
    HAS_FCNTL = False

from .errors import QuotaExceededError, StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)

# Keys become file names, so only allow a conservative character set
KEY_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._-]*$')


def validate_key(key: str) -> None:
    """Validate a store key.

    Raises:
        ValueError: If the key is empty or contains unsafe characters
    """
    if not key or not KEY_PATTERN.match(key) or '..' in key:
        raise ValueError(
            f"Invalid store key: '{key}'. Keys may contain only letters, "
            f"digits, '.', '_' and '-'."
        )


class KeyValueBackend(ABC):
    """Interface of a local key-value storage substrate."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent.

        Raises:
            StoreReadError: If the value exists but cannot be read
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value.

        Raises:
            QuotaExceededError: If the value does not fit
            StoreWriteError: If the write fails
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; missing keys are ignored."""


class MemoryBackend(KeyValueBackend):
    """Dictionary-backed storage with an optional size quota.

    Example:
        >>> backend = MemoryBackend(quota_bytes=1024)
        >>> backend.set("workspace", "{}")
        >>> backend.get("workspace")
        '{}'
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._values: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            size = len(value.encode("utf-8"))
            if size > self.quota_bytes:
                raise QuotaExceededError(key, size, self.quota_bytes)
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class FileBackend(KeyValueBackend):
    """Stores each key as ``<directory>/<key>.json``.

    Attributes:
        directory: Directory holding the record files
        lock_timeout: Seconds to wait for the write lock
    """

    LOCK_FILE = '.lock'

    def __init__(self, directory: Union[str, Path], lock_timeout: float = 10.0):
        self.directory = Path(directory)
        self.lock_timeout = lock_timeout
        logger.debug(f"FileBackend initialized with directory: {self.directory}")

    def path_for(self, key: str) -> Path:
        """Return the file path used for a key."""
        validate_key(key)
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            return None
        except PermissionError:
            raise StoreReadError(key, 'Permission denied')
        except (OSError, UnicodeDecodeError) as e:
            raise StoreReadError(key, str(e))

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreWriteError(key, 'create_directory', str(e))

        with self._write_lock(key):
            tmp_path = None
            try:
                fd, tmp_path = tempfile.mkstemp(
                    prefix=f".{key}.", suffix='.tmp', dir=self.directory
                )
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(value)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, path)
                tmp_path = None
                logger.debug(f"Wrote {len(value)} characters to {path}")
            except PermissionError:
                raise StoreWriteError(key, 'write', 'Permission denied')
            except OSError as e:
                raise StoreWriteError(key, 'write', str(e))
            finally:
                if tmp_path is not None and os.path.exists(tmp_path):
                    os.unlink(tmp_path)

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        with self._write_lock(key):
            try:
                path.unlink()
                logger.debug(f"Deleted {path}")
            except FileNotFoundError:
                pass
            except OSError as e:
                raise StoreWriteError(key, 'delete', str(e))

    @contextmanager
    def _write_lock(self, key: str) -> Iterator[None]:
        """Hold an exclusive advisory lock on the backend directory.

        Raises:
            StoreWriteError: If the lock file cannot be opened or the lock
                cannot be acquired within lock_timeout
        """
        if not HAS_FCNTL:
            logger.warning(
                "File locking not available on this platform. "
                "Concurrent writers may interleave."
            )
            yield
            return

        lock_path = self.directory / self.LOCK_FILE
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            lock_file = open(lock_path, 'w')
        except OSError as e:
            raise StoreWriteError(key, 'lock', str(e))

        with lock_file:
            start_time = time.time()
            while True:
                try:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except OSError:
                    # Lock is held by another writer
                    if time.time() - start_time > self.lock_timeout:
                        raise StoreWriteError(
                            key,
                            'lock',
                            f"Timeout acquiring store lock after {self.lock_timeout}s"
                        )
                    time.sleep(0.05)

            logger.debug("Store lock acquired")
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
                logger.debug("Store lock released")
