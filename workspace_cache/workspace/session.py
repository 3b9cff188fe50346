"""Workspace session: the single owner of the in-memory workspace state.

All mutations go through the session's update operations. Each operation
changes the owned WorkspaceState and then persists it through the store
(best-effort; a failed save is logged by the store and never interrupts the
caller). Note edits are routed through a debounced saver when one is
configured, so a burst of keystrokes results in a single write.
"""

import logging
from dataclasses import fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from ..entities import factory
from ..entities.defaults import DEFAULT_ICON, fresh_state, now_ms
from ..entities.models import (
    CalendarEvent,
    DailyTask,
    NoteMetadata,
    Page,
    PageType,
    Priority,
    Section,
    WorkspaceState,
)
from ..errors import EntityNotFoundError, InvalidUpdateError
from ..persistence.autosave import DebouncedSaver
from ..persistence.store import WorkspaceStore
from .tree import iter_descendants

logger = logging.getLogger(__name__)

# Page fields that only structural operations (create/delete) may change
_PAGE_STRUCTURAL_FIELDS = frozenset({'id', 'parent_id', 'children', 'created_at'})
_TASK_PROTECTED_FIELDS = frozenset({'id', 'created_at'})


def _apply_changes(
    entity: Any,
    entity_type: str,
    changes: Dict[str, Any],
    protected: FrozenSet[str] = frozenset(),
) -> None:
    """Merge a partial update into a dataclass entity.

    Values for enum fields are converted to the field's enum type, so
    ``page_type="note"`` stores ``PageType.NOTE``.

    Raises:
        InvalidUpdateError: If a change names an unknown or protected field
        ValueError: If an enum field is given a value outside the enum
    """
    allowed = {f.name for f in fields(entity)} - protected
    for name in changes:
        if name not in allowed:
            raise InvalidUpdateError(entity_type, name)

    # Convert everything before touching the entity
    converted = {}
    for name, value in changes.items():
        current = getattr(entity, name)
        if isinstance(current, Enum):
            value = type(current)(value)
        converted[name] = value

    for name, value in converted.items():
        setattr(entity, name, value)


class WorkspaceSession:
    """Owns the workspace state and funnels every mutation through it.

    Attributes:
        store: Store the state is persisted to
        state: The workspace state (the single in-memory source of truth)

    Example:
        >>> session = WorkspaceSession.open(store, autosave_delay=1.0)
        >>> welcome = session.create_page("Welcome")
        >>> child = session.create_page("Subpage", parent_id=welcome.id)
        >>> session.close()
    """

    def __init__(
        self,
        store: WorkspaceStore,
        state: Optional[WorkspaceState] = None,
        autosave_delay: Optional[float] = None,
    ):
        """Initialize a session.

        Args:
            store: Store the state is persisted to
            state: Initial state (defaults to the fresh bootstrap state)
            autosave_delay: Debounce delay in seconds for note edits;
                None saves note edits immediately
        """
        self.store = store
        self.state = state if state is not None else fresh_state()
        self._saver: Optional[DebouncedSaver] = None
        if autosave_delay is not None:
            self._saver = DebouncedSaver(self._save_current, autosave_delay)

    @classmethod
    def open(
        cls,
        store: WorkspaceStore,
        autosave_delay: Optional[float] = None,
    ) -> "WorkspaceSession":
        """Create a session from the state currently held by the store."""
        return cls(store, store.load(), autosave_delay)

    def __enter__(self) -> "WorkspaceSession":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def close(self) -> None:
        """Write any pending debounced edit."""
        if self._saver is not None and self._saver.flush():
            logger.debug("Flushed pending autosave on close")

    def _save_current(self, _state: Optional[WorkspaceState] = None) -> bool:
        return self.store.save(self.state)

    def _commit(self) -> bool:
        # A full-state save also covers any pending debounced edit
        if self._saver is not None:
            self._saver.cancel()
        return self._save_current()

    def _require_page(self, page_id: str) -> Page:
        page = self.state.pages.get(page_id)
        if page is None:
            raise EntityNotFoundError("Page", page_id)
        return page

    def _require_task(self, task_id: str) -> DailyTask:
        task = self.state.daily_tasks.get(task_id)
        if task is None:
            raise EntityNotFoundError("Daily task", task_id)
        return task

    # ==========================================================================
    # Pages
    # ==========================================================================

    def create_page(
        self,
        title: Optional[str] = None,
        parent_id: Optional[str] = None,
        icon: str = DEFAULT_ICON,
        page_type: PageType = PageType.WORKSPACE,
    ) -> Page:
        """Create a page and attach it under its parent or at the root.

        Args:
            title: Page title (defaults to "Untitled")
            parent_id: Parent page ID, None for a root page
            icon: Icon identifier
            page_type: Workspace page or note

        Returns:
            The created page

        Raises:
            EntityNotFoundError: If parent_id does not exist
        """
        parent = self._require_page(parent_id) if parent_id is not None else None

        page = factory.create_page(title, parent_id, icon=icon, page_type=page_type)
        self.state.pages[page.id] = page
        if parent is not None:
            parent.children.append(page.id)
            parent.updated_at = page.created_at
        else:
            self.state.root_pages.append(page.id)

        logger.info(f"Created page {page.id} ('{page.title}')")
        self._commit()
        return page

    def update_page(self, page_id: str, **changes: Any) -> Page:
        """Merge field changes into a page and refresh its update time.

        Structural fields (id, parent_id, children, created_at) cannot be
        changed this way.

        Raises:
            EntityNotFoundError: If the page does not exist
            InvalidUpdateError: If a change names an unknown or structural field
        """
        page = self._require_page(page_id)
        _apply_changes(page, "Page", changes, _PAGE_STRUCTURAL_FIELDS)
        page.updated_at = now_ms()
        self._commit()
        return page

    def delete_page(self, page_id: str) -> List[str]:
        """Delete a page together with all of its descendants.

        Deleting a missing page is a no-op.

        Returns:
            IDs of every removed page (the page first, then descendants)
        """
        page = self.state.pages.get(page_id)
        if page is None:
            logger.debug(f"Page {page_id} already deleted")
            return []

        if page.parent_id is not None and page.parent_id in self.state.pages:
            parent = self.state.pages[page.parent_id]
            parent.children = [child for child in parent.children if child != page_id]
            parent.updated_at = now_ms()
        else:
            self.state.root_pages = [
                root for root in self.state.root_pages if root != page_id
            ]

        removed = [page_id] + [
            descendant for descendant in iter_descendants(self.state, page_id)
            if descendant != page_id
        ]
        for removed_id in removed:
            del self.state.pages[removed_id]

        if self.state.current_page_id in removed:
            self.state.current_page_id = None

        logger.info(f"Deleted page {page_id} and {len(removed) - 1} descendant(s)")
        self._commit()
        return removed

    def set_current_page(self, page_id: str) -> None:
        self._require_page(page_id)
        self.state.current_page_id = page_id
        self.state.current_section = Section.PAGES
        self._commit()

    def set_current_section(self, section: Section) -> None:
        """Focus a section; leaving the pages section clears the page focus.

        Raises:
            ValueError: If section is not a Section or one of its values
        """
        section = Section(section)
        self.state.current_section = section
        if section is not Section.PAGES:
            self.state.current_page_id = None
        self._commit()

    def set_search_query(self, query: str) -> None:
        self.state.search_query = query
        self._commit()

    def toggle_page_expansion(self, page_id: str) -> bool:
        """Flip the sidebar expansion flag of a page.

        Returns:
            The new expansion state
        """
        page = self._require_page(page_id)
        page.is_expanded = not page.is_expanded
        self._commit()
        return page.is_expanded

    def update_note(
        self,
        page_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Page:
        """Apply an editor change to a note and schedule its save.

        Word count, reading time and last-edited time are recomputed from
        the content. With an autosave delay configured the save is debounced;
        otherwise it happens immediately.

        Raises:
            EntityNotFoundError: If the page does not exist
        """
        page = self._require_page(page_id)
        if title is not None:
            page.title = title
        if content is not None:
            page.content = content

        now = now_ms()
        word_count, reading_time = factory.compute_note_metrics(page.content)
        metadata = page.note_metadata or NoteMetadata()
        metadata.word_count = word_count
        metadata.reading_time = reading_time
        metadata.last_edited_at = now
        page.note_metadata = metadata
        page.updated_at = now

        if self._saver is not None:
            self._saver.schedule(self.state)
        else:
            self._commit()
        return page

    # ==========================================================================
    # Daily tasks
    # ==========================================================================

    def create_daily_task(
        self,
        title: str,
        time_allocation: int,
        priority: Priority,
        category: str,
        description: Optional[str] = None,
    ) -> DailyTask:
        task = factory.create_daily_task(
            title, time_allocation, priority, category, description
        )
        self.state.daily_tasks[task.id] = task
        logger.info(f"Created daily task {task.id} ('{task.title}')")
        self._commit()
        return task

    def update_daily_task(self, task_id: str, **changes: Any) -> DailyTask:
        task = self._require_task(task_id)
        _apply_changes(task, "Daily task", changes, _TASK_PROTECTED_FIELDS)
        task.updated_at = now_ms()
        self._commit()
        return task

    def toggle_task_completion(self, task_id: str) -> DailyTask:
        """Flip a task's completion flag and record when it was completed."""
        task = self._require_task(task_id)
        now = now_ms()
        task.completed = not task.completed
        task.completed_at = now if task.completed else None
        task.updated_at = now
        self._commit()
        return task

    def delete_daily_task(self, task_id: str) -> bool:
        """Delete a task. Returns False if it did not exist."""
        if self.state.daily_tasks.pop(task_id, None) is None:
            return False
        logger.info(f"Deleted daily task {task_id}")
        self._commit()
        return True

    # ==========================================================================
    # Calendar
    # ==========================================================================

    def create_calendar_event(
        self,
        title: str,
        event_date: str,
        event_time: Optional[str] = None,
        description: Optional[str] = None,
    ) -> CalendarEvent:
        """Create a calendar event.

        Args:
            title: Event title
            event_date: Date in YYYY-MM-DD format
            event_time: Optional time in HH:MM format
            description: Optional description

        Raises:
            ValueError: If event_date or event_time is malformed
        """
        datetime.strptime(event_date, "%Y-%m-%d")
        if event_time is not None:
            datetime.strptime(event_time, "%H:%M")

        event = factory.create_calendar_event(title, event_date, event_time, description)
        self.state.calendar_events[event.id] = event
        self._commit()
        return event

    def delete_calendar_event(self, event_id: str) -> bool:
        if self.state.calendar_events.pop(event_id, None) is None:
            return False
        self._commit()
        return True

    # ==========================================================================
    # Finance and health
    # ==========================================================================

    def update_finance_data(self, **changes: Any) -> None:
        """Replace top-level parts of the finance aggregate (e.g. wallets=...)."""
        _apply_changes(self.state.finance_data, "Finance data", changes)
        self._commit()

    def update_health_data(self, **changes: Any) -> None:
        """Replace top-level parts of the health aggregate (e.g. protocols=...)."""
        _apply_changes(self.state.health_data, "Health data", changes)
        self._commit()
