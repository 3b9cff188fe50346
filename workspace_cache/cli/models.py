"""Data models for CLI operations."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): Configuration or store errors
    - INCONSISTENT (2): The stored workspace failed a consistency check
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    INCONSISTENT = 2


@dataclass
class WorkspaceSummary:
    """Counts describing a stored workspace, for display to the user.

    Attributes:
        page_count: Number of pages
        root_page_count: Number of root pages
        block_count: Number of blocks across all pages
        media_block_count: Number of image/video blocks
        daily_task_count: Number of daily tasks
        calendar_event_count: Number of calendar events
        wallet_count: Number of finance wallets
        transaction_count: Number of finance transactions
        record_bytes: Size of the stored record (0 if none)
        current_section: Focused UI section
        problems: Tree consistency problems
    """
    page_count: int = 0
    root_page_count: int = 0
    block_count: int = 0
    media_block_count: int = 0
    daily_task_count: int = 0
    calendar_event_count: int = 0
    wallet_count: int = 0
    transaction_count: int = 0
    record_bytes: int = 0
    current_section: str = ""
    problems: List[str] = field(default_factory=list)
