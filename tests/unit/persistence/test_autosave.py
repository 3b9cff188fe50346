"""Unit tests for persistence.autosave.DebouncedSaver."""

import threading
import time
from unittest.mock import Mock

import pytest

from workspace_cache.entities import fresh_state
from workspace_cache.persistence import DebouncedSaver


def _wait_for(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


class TestDebouncedSaver:
    """Test cases for DebouncedSaver."""

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            DebouncedSaver(Mock(), delay=-1)

    def test_burst_collapses_into_one_save(self):
        saved = []
        done = threading.Event()

        def save(state):
            saved.append(state)
            done.set()

        saver = DebouncedSaver(save, delay=0.1)
        states = [fresh_state() for _ in range(5)]
        for state in states:
            saver.schedule(state)

        assert done.wait(2.0)
        time.sleep(0.2)
        assert len(saved) == 1
        assert saved[0] is states[-1]
        assert not saver.pending

    def test_flush_saves_immediately(self):
        save = Mock()
        saver = DebouncedSaver(save, delay=60)
        state = fresh_state()
        saver.schedule(state)

        assert saver.pending
        assert saver.flush() is True

        save.assert_called_once_with(state)
        assert not saver.pending

    def test_flush_without_pending_save(self):
        save = Mock()

        assert DebouncedSaver(save, delay=60).flush() is False
        save.assert_not_called()

    def test_cancel_drops_pending_save(self):
        save = Mock()
        saver = DebouncedSaver(save, delay=0.05)
        saver.schedule(fresh_state())

        saver.cancel()
        time.sleep(0.2)

        save.assert_not_called()
        assert saver.flush() is False

    def test_zero_delay_saves_promptly(self):
        save = Mock()
        saver = DebouncedSaver(save, delay=0)

        saver.schedule(fresh_state())

        assert _wait_for(lambda: save.call_count == 1)
