"""Debounced auto-save for editing surfaces.

Each edit reschedules a single pending save; only the last state scheduled
within the delay window is written, collapsing a burst of keystrokes into
one store write. A pending save is dropped by ``cancel()`` (e.g. when the
editor closes without committing) and can be forced with ``flush()``.
"""

import logging
import threading
from typing import Callable, Optional

from ..entities.models import WorkspaceState

logger = logging.getLogger(__name__)

# Delay between the last edit and the save it triggers
DEFAULT_AUTOSAVE_DELAY = 1.0


class DebouncedSaver:
    """Collapses bursts of save requests into a single delayed save.

    Attributes:
        save_fn: Callable invoked with the state to persist
        delay: Seconds of inactivity before saving

    Example:
        >>> saver = DebouncedSaver(store.save, delay=1.0)
        >>> saver.schedule(state)   # keystroke
        >>> saver.schedule(state)   # keystroke, restarts the delay
        >>> saver.flush()           # write now instead of waiting
    """

    def __init__(
        self,
        save_fn: Callable[[WorkspaceState], object],
        delay: float = DEFAULT_AUTOSAVE_DELAY,
    ):
        if delay < 0:
            raise ValueError(f"Autosave delay must be non-negative, got {delay}")
        self.save_fn = save_fn
        self.delay = delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending_state: Optional[WorkspaceState] = None

    @property
    def pending(self) -> bool:
        """True while a scheduled save has not run yet."""
        with self._lock:
            return self._timer is not None

    def schedule(self, state: WorkspaceState) -> None:
        """Schedule a save of state, superseding any pending save."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                logger.debug("Superseded pending autosave")
            self._pending_state = state
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Drop the pending save, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                logger.debug("Cancelled pending autosave")
            self._timer = None
            self._pending_state = None

    def flush(self) -> bool:
        """Run the pending save immediately.

        Returns:
            True if a pending save was run, False if nothing was pending
        """
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            state = self._take_pending()

        self.save_fn(state)
        return True

    def _fire(self) -> None:
        with self._lock:
            if self._timer is None or self._timer is not threading.current_thread():
                # Superseded or cancelled after the timer started running
                return
            state = self._take_pending()

        logger.debug("Autosave delay elapsed, saving workspace")
        self.save_fn(state)

    def _take_pending(self) -> WorkspaceState:
        state = self._pending_state
        self._timer = None
        self._pending_state = None
        return state
