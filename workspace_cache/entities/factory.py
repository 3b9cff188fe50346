"""Entity factories used by the workspace session and UI collaborators.

Factories only build entities. Inserting the result into the workspace
(``pages``, ``root_pages`` or a parent's ``children``) is the caller's job.
"""

import math
import random
import string
from typing import Optional, Tuple

from . import defaults
from .models import CalendarEvent, DailyTask, Page, PageType, Priority

# Alphabet for the random id suffix (matches base36 output)
_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9

# Average reading speed used for note reading-time estimates
WORDS_PER_MINUTE = 200


def generate_id(prefix: str = "page") -> str:
    """Generate a time-and-random derived identifier.

    Uniqueness is best-effort within a session (millisecond timestamp plus
    a nine character random suffix); it is not cryptographically strong.

    Args:
        prefix: Entity prefix, e.g. "page" or "task"

    Returns:
        Identifier such as ``page_1700000000000_k3j9x0abc``
    """
    suffix = ''.join(random.choices(_ID_ALPHABET, k=_ID_SUFFIX_LENGTH))
    return f"{prefix}_{defaults.now_ms()}_{suffix}"


def create_page(
    title: Optional[str] = None,
    parent_id: Optional[str] = None,
    icon: str = defaults.DEFAULT_ICON,
    page_type: PageType = PageType.WORKSPACE,
) -> Page:
    """Create a new, empty page.

    Args:
        title: Page title; empty or missing titles fall back to "Untitled"
        parent_id: Parent page ID (None for a root page)
        icon: Icon identifier
        page_type: Workspace page or note

    Returns:
        Page with empty blocks and children, expanded, timestamps set to now
    """
    now = defaults.now_ms()
    return Page(
        id=generate_id("page"),
        title=title or defaults.DEFAULT_TITLE,
        content="",
        blocks=[],
        parent_id=parent_id,
        children=[],
        created_at=now,
        updated_at=now,
        is_expanded=True,
        icon=icon or defaults.DEFAULT_ICON,
        page_type=page_type,
    )


def create_daily_task(
    title: str,
    time_allocation: int,
    priority: Priority,
    category: str,
    description: Optional[str] = None,
) -> DailyTask:
    now = defaults.now_ms()
    return DailyTask(
        id=generate_id("task"),
        title=title,
        time_allocation=time_allocation,
        priority=priority,
        category=category,
        completed=False,
        created_at=now,
        updated_at=now,
        streak=0,
        description=description,
    )


def create_calendar_event(
    title: str,
    event_date: str,
    event_time: Optional[str] = None,
    description: Optional[str] = None,
) -> CalendarEvent:
    now = defaults.now_ms()
    return CalendarEvent(
        id=generate_id("event"),
        title=title,
        event_date=event_date,
        event_time=event_time,
        description=description,
        created_at=now,
        updated_at=now,
    )


def compute_note_metrics(text: str) -> Tuple[int, int]:
    """Count words and estimate reading time for a note body.

    Returns:
        Tuple of (word_count, reading_time_minutes), reading time rounded up
    """
    word_count = len(text.split())
    reading_time = math.ceil(word_count / WORDS_PER_MINUTE)
    return word_count, reading_time
