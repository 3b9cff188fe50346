"""Entity model for the workspace snapshot.

This package defines the typed shapes of every persisted entity, the
default values used when a field is absent, entity factories, and the
tolerant parser that turns a persisted record back into typed state.
"""

from .models import (
    Block,
    BlockType,
    Budget,
    CalendarEvent,
    Category,
    DailyTask,
    FinanceData,
    FinanceGoal,
    FinanceSettings,
    HealthData,
    HealthProtocol,
    HealthSettings,
    MEDIA_BLOCK_TYPES,
    NoteMetadata,
    Page,
    PageType,
    PeptideCycle,
    QuitHabit,
    QuitMilestone,
    Section,
    Transaction,
    Wallet,
    WorkspaceState,
)
from .defaults import (
    DEFAULT_ICON,
    DEFAULT_TITLE,
    PRIMARY_SECTION,
    default_finance_data,
    default_health_data,
    fresh_state,
)
from .factory import (
    compute_note_metrics,
    create_calendar_event,
    create_daily_task,
    create_page,
    generate_id,
)
from .parser import SnapshotParser

__all__ = [
    'Block',
    'BlockType',
    'Budget',
    'CalendarEvent',
    'Category',
    'DailyTask',
    'FinanceData',
    'FinanceGoal',
    'FinanceSettings',
    'HealthData',
    'HealthProtocol',
    'HealthSettings',
    'MEDIA_BLOCK_TYPES',
    'NoteMetadata',
    'Page',
    'PageType',
    'PeptideCycle',
    'QuitHabit',
    'QuitMilestone',
    'Section',
    'Transaction',
    'Wallet',
    'WorkspaceState',
    'DEFAULT_ICON',
    'DEFAULT_TITLE',
    'PRIMARY_SECTION',
    'default_finance_data',
    'default_health_data',
    'fresh_state',
    'compute_note_metrics',
    'create_calendar_event',
    'create_daily_task',
    'create_page',
    'generate_id',
    'SnapshotParser',
]
