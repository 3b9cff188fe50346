"""Root pytest configuration for all tests.

This conftest applies to all test types (unit, integration).
"""

import logging

import pytest

from workspace_cache.persistence import FileBackend, MemoryBackend, WorkspaceStore
from tests.fixtures.workspace_fixtures import FROZEN_NOW


@pytest.fixture
def memory_store():
    """WorkspaceStore over an unbounded in-memory backend."""
    return WorkspaceStore(MemoryBackend())


@pytest.fixture
def file_store(tmp_path):
    """WorkspaceStore over a FileBackend rooted in a temporary directory."""
    return WorkspaceStore(FileBackend(tmp_path / "store"))


@pytest.fixture
def frozen_clock(mocker):
    """Pin every epoch-millis clock read to FROZEN_NOW."""
    mocker.patch("workspace_cache.entities.defaults.now_ms", return_value=FROZEN_NOW)
    mocker.patch("workspace_cache.workspace.session.now_ms", return_value=FROZEN_NOW)
    return FROZEN_NOW


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo logging configuration applied by CLI invocations."""
    yield
    package_logger = logging.getLogger("workspace_cache")
    package_logger.setLevel(logging.NOTSET)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
