"""Data models for the workspace entity model.

This module defines every entity persisted in the local workspace snapshot.
All models use dataclasses with snake_case attributes; ``to_dict()`` produces
the camelCase record form written to the local store. Optional fields that
are unset are omitted from the record rather than written as null.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional


class BlockType(Enum):
    """Closed set of block types a page body can contain."""

    TEXT = "text"
    HEADER = "header"
    IMAGE = "image"
    VIDEO = "video"
    TABLE = "table"


# Block types whose data payload may embed large media (base64 urls)
MEDIA_BLOCK_TYPES = {
    BlockType.IMAGE,
    BlockType.VIDEO,
}


class Section(Enum):
    """Top-level workspace sections the UI can focus."""

    PAGES = "pages"
    DAILY_TASKS = "daily-tasks"
    CALENDAR = "calendar"
    FINANCE = "finance"
    HEALTH_LAB = "health-lab"


class PageType(Enum):
    """Kind of page: structured workspace page or free-form note."""

    WORKSPACE = "workspace"
    NOTE = "note"


Priority = Literal["high", "medium", "low"]

# Icon assigned to pages that do not carry one
DEFAULT_ICON = "document"


def _put_optional(result: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        result[key] = value


def _map_to_dict(entities: Dict[str, Any]) -> Dict[str, Any]:
    return {entity_id: entity.to_dict() for entity_id, entity in entities.items()}


@dataclass
class Block:
    """An ordered content unit within a page body.

    Attributes:
        id: Unique block identifier
        type: Block type (text, header, image, video, table)
        content: Text content of the block
        order: Render position within the page (ties allowed)
        data: Untyped payload; image/video blocks keep media under ``url``
    """

    id: str
    type: BlockType
    content: str = ""
    order: int = 0
    data: Optional[Dict[str, Any]] = None

    @property
    def is_media(self) -> bool:
        """Check if this block may carry an embedded media payload."""
        return self.type in MEDIA_BLOCK_TYPES

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "content": self.content,
            "order": self.order,
        }
        if self.data is not None:
            result["data"] = copy.deepcopy(self.data)
        return result


@dataclass
class NoteMetadata:
    """Metadata tracked for note pages.

    Attributes:
        tags: Free-form tags attached to the note
        is_pinned: Whether the note is pinned in listings
        last_edited_at: Epoch millis of the last content edit
        word_count: Number of words in the note body
        reading_time: Estimated reading time in minutes
        color: Optional color used to categorize the note
    """

    tags: List[str] = field(default_factory=list)
    is_pinned: bool = False
    last_edited_at: int = 0
    word_count: int = 0
    reading_time: int = 0
    color: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "tags": list(self.tags),
            "isPinned": self.is_pinned,
            "lastEditedAt": self.last_edited_at,
            "wordCount": self.word_count,
            "readingTime": self.reading_time,
        }
        _put_optional(result, "color", self.color)
        return result


@dataclass
class Page:
    """A hierarchical content node in the workspace.

    ``parent_id`` is a back-reference only; ownership of the hierarchy is
    expressed by the parent's ``children`` list (or ``root_pages`` on the
    workspace for pages without a parent).

    Attributes:
        id: Unique, stable page identifier
        title: Page title
        content: Plain/markdown body text
        blocks: Ordered list of content blocks
        parent_id: Parent page ID (None for root pages)
        children: Ordered list of child page IDs
        created_at: Creation time in epoch millis
        updated_at: Last update time in epoch millis
        is_expanded: Sidebar expansion flag (UI only)
        icon: Icon identifier
        page_type: Workspace page or note
        note_metadata: Extra metadata for note pages
    """

    id: str
    title: str
    content: str = ""
    blocks: List[Block] = field(default_factory=list)
    parent_id: Optional[str] = None
    children: List[str] = field(default_factory=list)
    created_at: int = 0
    updated_at: int = 0
    is_expanded: Optional[bool] = None
    icon: str = DEFAULT_ICON
    page_type: PageType = PageType.WORKSPACE
    note_metadata: Optional[NoteMetadata] = None

    def sorted_blocks(self) -> List[Block]:
        """Return blocks in render order (stable for equal ``order``)."""
        return sorted(self.blocks, key=lambda block: block.order)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "blocks": [block.to_dict() for block in self.blocks],
            "children": list(self.children),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "icon": self.icon,
            "pageType": self.page_type.value,
        }
        _put_optional(result, "parentId", self.parent_id)
        _put_optional(result, "isExpanded", self.is_expanded)
        if self.note_metadata is not None:
            result["noteMetadata"] = self.note_metadata.to_dict()
        return result


@dataclass
class DailyTask:
    """A recurring daily task with a time allocation and streak."""

    id: str
    title: str
    time_allocation: int
    priority: Priority
    category: str
    completed: bool = False
    created_at: int = 0
    updated_at: int = 0
    streak: int = 0
    description: Optional[str] = None
    completed_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "timeAllocation": self.time_allocation,
            "priority": self.priority,
            "category": self.category,
            "completed": self.completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "streak": self.streak,
        }
        _put_optional(result, "description", self.description)
        _put_optional(result, "completedAt", self.completed_at)
        return result


@dataclass
class CalendarEvent:
    """A calendar entry.

    Attributes:
        event_date: Date in YYYY-MM-DD format
        event_time: Optional time in HH:MM format
    """

    id: str
    title: str
    event_date: str
    created_at: int = 0
    updated_at: int = 0
    description: Optional[str] = None
    event_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "eventDate": self.event_date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        _put_optional(result, "description", self.description)
        _put_optional(result, "eventTime", self.event_time)
        return result


# ==============================================================================
# Finance aggregate
# ==============================================================================

@dataclass
class Wallet:
    id: str
    name: str
    balance: float = 0.0
    currency: str = "USD"
    type: Literal["checking", "savings", "cash", "investment", "other"] = "other"
    created_at: int = 0
    updated_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "balance": self.balance,
            "currency": self.currency,
            "type": self.type,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Transaction:
    id: str
    wallet_id: str
    amount: float
    type: Literal["income", "expense"]
    category_id: str
    description: str = ""
    date: int = 0
    created_at: int = 0
    updated_at: int = 0
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    is_mindful: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "walletId": self.wallet_id,
            "amount": self.amount,
            "type": self.type,
            "categoryId": self.category_id,
            "description": self.description,
            "date": self.date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        _put_optional(result, "notes", self.notes)
        if self.tags is not None:
            result["tags"] = list(self.tags)
        _put_optional(result, "isMindful", self.is_mindful)
        return result


@dataclass
class Category:
    id: str
    name: str
    type: Literal["essential", "growth", "fun", "other"]
    color: str
    icon: str
    is_custom: bool = False
    created_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "color": self.color,
            "icon": self.icon,
            "isCustom": self.is_custom,
            "createdAt": self.created_at,
        }


@dataclass
class Budget:
    id: str
    category_id: str
    amount: float
    period: Literal["weekly", "monthly"] = "monthly"
    start_date: int = 0
    end_date: int = 0
    is_active: bool = True
    created_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "categoryId": self.category_id,
            "amount": self.amount,
            "period": self.period,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "isActive": self.is_active,
            "createdAt": self.created_at,
        }


@dataclass
class FinanceGoal:
    id: str
    title: str
    target_amount: float
    current_amount: float = 0.0
    category: Literal["savings", "debt", "investment", "purchase", "other"] = "savings"
    priority: Priority = "medium"
    is_completed: bool = False
    created_at: int = 0
    updated_at: int = 0
    description: Optional[str] = None
    deadline: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "targetAmount": self.target_amount,
            "currentAmount": self.current_amount,
            "category": self.category,
            "priority": self.priority,
            "isCompleted": self.is_completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        _put_optional(result, "description", self.description)
        _put_optional(result, "deadline", self.deadline)
        return result


@dataclass
class FinanceSettings:
    """User preferences for the finance section.

    Attributes:
        weekly_review_day: 0-6, Sunday = 0
        monthly_review_day: 1-31
    """

    default_currency: str = "USD"
    reminder_enabled: bool = True
    weekly_review_day: int = 0
    monthly_review_day: int = 1
    mindful_spending_enabled: bool = True
    export_format: Literal["csv", "pdf"] = "csv"
    default_wallet_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "defaultCurrency": self.default_currency,
            "reminderEnabled": self.reminder_enabled,
            "weeklyReviewDay": self.weekly_review_day,
            "monthlyReviewDay": self.monthly_review_day,
            "mindfulSpendingEnabled": self.mindful_spending_enabled,
            "exportFormat": self.export_format,
        }
        _put_optional(result, "defaultWalletId", self.default_wallet_id)
        return result


@dataclass
class FinanceData:
    """Finance aggregate; every map is keyed by the entity's own id."""

    wallets: Dict[str, Wallet] = field(default_factory=dict)
    transactions: Dict[str, Transaction] = field(default_factory=dict)
    categories: Dict[str, Category] = field(default_factory=dict)
    budgets: Dict[str, Budget] = field(default_factory=dict)
    goals: Dict[str, FinanceGoal] = field(default_factory=dict)
    settings: FinanceSettings = field(default_factory=FinanceSettings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wallets": _map_to_dict(self.wallets),
            "transactions": _map_to_dict(self.transactions),
            "categories": _map_to_dict(self.categories),
            "budgets": _map_to_dict(self.budgets),
            "goals": _map_to_dict(self.goals),
            "settings": self.settings.to_dict(),
        }


# ==============================================================================
# Health aggregate
# ==============================================================================

@dataclass
class HealthProtocol:
    id: str
    title: str
    description: str = ""
    content: str = ""
    category: Literal["fitness", "nutrition", "sleep", "mental", "habits", "other"] = "other"
    is_expanded: bool = False
    is_completed: bool = False
    created_at: int = 0
    updated_at: int = 0
    completed_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "category": self.category,
            "isExpanded": self.is_expanded,
            "isCompleted": self.is_completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        _put_optional(result, "completedAt", self.completed_at)
        return result


@dataclass
class QuitMilestone:
    id: str
    days: int
    title: str
    description: str = ""
    is_reached: bool = False
    reached_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "days": self.days,
            "title": self.title,
            "description": self.description,
            "isReached": self.is_reached,
        }
        _put_optional(result, "reachedAt", self.reached_at)
        return result


@dataclass
class QuitHabit:
    id: str
    name: str
    quit_date: int
    category: Literal["smoking", "alcohol", "sugar", "social_media", "caffeine", "other"] = "other"
    is_active: bool = True
    milestones: List[QuitMilestone] = field(default_factory=list)
    created_at: int = 0
    description: Optional[str] = None
    custom_category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "quitDate": self.quit_date,
            "category": self.category,
            "isActive": self.is_active,
            "milestones": [milestone.to_dict() for milestone in self.milestones],
            "createdAt": self.created_at,
        }
        _put_optional(result, "description", self.description)
        _put_optional(result, "customCategory", self.custom_category)
        return result


@dataclass
class PeptideCycle:
    id: str
    name: str
    dosage: str
    start_date: str
    cycle_length: int
    frequency: Literal["daily", "twice_daily", "every_other_day", "weekly"] = "daily"
    is_active: bool = True
    created_at: int = 0
    updated_at: int = 0
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "dosage": self.dosage,
            "startDate": self.start_date,
            "cycleLength": self.cycle_length,
            "frequency": self.frequency,
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        _put_optional(result, "notes", self.notes)
        return result


@dataclass
class HealthSettings:
    reminder_enabled: bool = True
    weekly_review_day: int = 0
    notification_enabled: bool = True
    daily_check_in_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "reminderEnabled": self.reminder_enabled,
            "weeklyReviewDay": self.weekly_review_day,
            "notificationEnabled": self.notification_enabled,
        }
        _put_optional(result, "dailyCheckInTime", self.daily_check_in_time)
        return result


@dataclass
class HealthData:
    protocols: Dict[str, HealthProtocol] = field(default_factory=dict)
    quit_habits: Dict[str, QuitHabit] = field(default_factory=dict)
    peptide_cycles: Dict[str, PeptideCycle] = field(default_factory=dict)
    settings: HealthSettings = field(default_factory=HealthSettings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protocols": _map_to_dict(self.protocols),
            "quitHabits": _map_to_dict(self.quit_habits),
            "peptideCycles": _map_to_dict(self.peptide_cycles),
            "settings": self.settings.to_dict(),
        }


@dataclass
class WorkspaceState:
    """The full workspace snapshot held in memory and persisted locally.

    A single instance is owned by the application session; the persistence
    layer only ever serializes and deserializes copies of it.

    Attributes:
        pages: Map of page ID to Page
        root_pages: Ordered IDs of pages without a parent
        search_query: Current sidebar search text
        current_page_id: Page focused in the editor (None if no focus)
        current_section: Section focused in the UI
        daily_tasks: Map of task ID to DailyTask
        calendar_events: Map of event ID to CalendarEvent
        finance_data: Finance aggregate
        health_data: Health aggregate
    """

    pages: Dict[str, Page] = field(default_factory=dict)
    root_pages: List[str] = field(default_factory=list)
    search_query: str = ""
    current_page_id: Optional[str] = None
    current_section: Section = Section.PAGES
    daily_tasks: Dict[str, DailyTask] = field(default_factory=dict)
    calendar_events: Dict[str, CalendarEvent] = field(default_factory=dict)
    finance_data: FinanceData = field(default_factory=FinanceData)
    health_data: HealthData = field(default_factory=HealthData)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the state to its persisted record form.

        The result shares no mutable structure with this instance, so it
        can be modified freely (e.g. by the quota-safe serializer).

        Returns:
            Dictionary suitable for JSON serialization
        """
        result: Dict[str, Any] = {
            "pages": _map_to_dict(self.pages),
            "rootPages": list(self.root_pages),
            "searchQuery": self.search_query,
            "currentSection": self.current_section.value,
            "dailyTasks": _map_to_dict(self.daily_tasks),
            "calendarEvents": _map_to_dict(self.calendar_events),
            "financeData": self.finance_data.to_dict(),
            "healthData": self.health_data.to_dict(),
        }
        _put_optional(result, "currentPageId", self.current_page_id)
        return result
