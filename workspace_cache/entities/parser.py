"""Parser for persisted workspace records.

This module converts a (migrated) record dictionary into the typed
WorkspaceState. Parsing is tolerant by design of the record format: a field
with the wrong type is replaced by the model default and a map entry that is
not an object is dropped with a warning. Only a record that is not a
dictionary at all is rejected.
"""

import logging
import math
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

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
    DEFAULT_ICON,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PRIORITIES = ("high", "medium", "low")


def _get_str(data: Dict[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default


def _get_optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return value if isinstance(value, str) else None


def _get_int(data: Dict[str, Any], key: str, default: int = 0) -> int:
    value = data.get(key)
    # bool is an int subclass; never accept it as a number
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    return default


def _get_optional_int(data: Dict[str, Any], key: str) -> Optional[int]:
    if key not in data or data[key] is None:
        return None
    return _get_int(data, key)


def _get_float(data: Dict[str, Any], key: str, default: float = 0.0) -> float:
    value = data.get(key)
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else default
    return default


def _get_bool(data: Dict[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _get_optional_bool(data: Dict[str, Any], key: str) -> Optional[bool]:
    value = data.get(key)
    return value if isinstance(value, bool) else None


def _get_choice(data: Dict[str, Any], key: str, choices: Iterable[str], default: str) -> str:
    value = data.get(key)
    return value if value in tuple(choices) else default


def _get_dict(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _get_str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


class SnapshotParser:
    """Parser for workspace records.

    Converts record dictionaries (camelCase keys, as produced by
    ``WorkspaceState.to_dict()``) back into typed entities.

    Example:
        >>> parser = SnapshotParser()
        >>> state = parser.parse_state({"pages": {}, "rootPages": []})
        >>> state.current_section
        <Section.PAGES: 'pages'>
    """

    def parse_state(self, record: Dict[str, Any]) -> WorkspaceState:
        """Parse a record dictionary into a WorkspaceState.

        Args:
            record: The record as a dictionary (parsed JSON)

        Returns:
            WorkspaceState built from the record

        Raises:
            ValueError: If the record is not a dictionary
        """
        if not isinstance(record, dict):
            raise ValueError(
                f"Workspace record must be a dictionary, got {type(record).__name__}"
            )

        section_value = record.get("currentSection")
        try:
            current_section = Section(section_value)
        except ValueError:
            current_section = Section.PAGES

        return WorkspaceState(
            pages=self._parse_map(_get_dict(record, "pages"), self._parse_page, "page"),
            root_pages=_get_str_list(record, "rootPages"),
            search_query=_get_str(record, "searchQuery"),
            current_page_id=_get_optional_str(record, "currentPageId"),
            current_section=current_section,
            daily_tasks=self._parse_map(
                _get_dict(record, "dailyTasks"), self._parse_daily_task, "daily task"
            ),
            calendar_events=self._parse_map(
                _get_dict(record, "calendarEvents"), self._parse_calendar_event, "calendar event"
            ),
            finance_data=self.parse_finance_data(_get_dict(record, "financeData")),
            health_data=self.parse_health_data(_get_dict(record, "healthData")),
        )

    def _parse_map(
        self,
        raw: Dict[str, Any],
        parse_entity: Callable[[Dict[str, Any], str], T],
        entity_name: str,
    ) -> Dict[str, T]:
        """Parse an id-keyed entity map, re-keying entries by their own id."""
        result: Dict[str, T] = {}
        for key, value in raw.items():
            if not isinstance(value, dict):
                logger.warning(
                    f"Dropping {entity_name} '{key}': expected object, got {type(value).__name__}"
                )
                continue
            entity = parse_entity(value, key)
            entity_id = getattr(entity, "id")
            if entity_id != key:
                logger.warning(
                    f"Re-keying {entity_name} stored under '{key}' by its id '{entity_id}'"
                )
            result[entity_id] = entity
        return result

    # ==========================================================================
    # Pages
    # ==========================================================================

    def _parse_page(self, data: Dict[str, Any], fallback_id: str) -> Page:
        blocks_data = data.get("blocks")
        blocks = []
        if isinstance(blocks_data, list):
            blocks = [
                self._parse_block(block_data)
                for block_data in blocks_data
                if isinstance(block_data, dict)
            ]

        try:
            page_type = PageType(data.get("pageType"))
        except ValueError:
            page_type = PageType.WORKSPACE

        note_data = data.get("noteMetadata")
        note_metadata = None
        if isinstance(note_data, dict):
            note_metadata = self._parse_note_metadata(note_data)

        return Page(
            id=_get_str(data, "id") or fallback_id,
            title=_get_str(data, "title"),
            content=_get_str(data, "content"),
            blocks=blocks,
            parent_id=_get_optional_str(data, "parentId"),
            children=_get_str_list(data, "children"),
            created_at=_get_int(data, "createdAt"),
            updated_at=_get_int(data, "updatedAt"),
            is_expanded=_get_optional_bool(data, "isExpanded"),
            icon=_get_str(data, "icon") or DEFAULT_ICON,
            page_type=page_type,
            note_metadata=note_metadata,
        )

    def _parse_block(self, data: Dict[str, Any]) -> Block:
        type_value = data.get("type")
        try:
            block_type = BlockType(type_value)
        except ValueError:
            logger.warning(f"Unknown block type '{type_value}', reading as text")
            block_type = BlockType.TEXT

        block_data = data.get("data")
        return Block(
            id=_get_str(data, "id"),
            type=block_type,
            content=_get_str(data, "content"),
            order=_get_int(data, "order"),
            data=block_data if isinstance(block_data, dict) else None,
        )

    def _parse_note_metadata(self, data: Dict[str, Any]) -> NoteMetadata:
        return NoteMetadata(
            tags=_get_str_list(data, "tags"),
            is_pinned=_get_bool(data, "isPinned"),
            last_edited_at=_get_int(data, "lastEditedAt"),
            word_count=_get_int(data, "wordCount"),
            reading_time=_get_int(data, "readingTime"),
            color=_get_optional_str(data, "color"),
        )

    # ==========================================================================
    # Tasks and calendar
    # ==========================================================================

    def _parse_daily_task(self, data: Dict[str, Any], fallback_id: str) -> DailyTask:
        return DailyTask(
            id=_get_str(data, "id") or fallback_id,
            title=_get_str(data, "title"),
            time_allocation=_get_int(data, "timeAllocation"),
            priority=_get_choice(data, "priority", _PRIORITIES, "medium"),
            category=_get_str(data, "category"),
            completed=_get_bool(data, "completed"),
            created_at=_get_int(data, "createdAt"),
            updated_at=_get_int(data, "updatedAt"),
            streak=_get_int(data, "streak"),
            description=_get_optional_str(data, "description"),
            completed_at=_get_optional_int(data, "completedAt"),
        )

    def _parse_calendar_event(self, data: Dict[str, Any], fallback_id: str) -> CalendarEvent:
        return CalendarEvent(
            id=_get_str(data, "id") or fallback_id,
            title=_get_str(data, "title"),
            event_date=_get_str(data, "eventDate"),
            created_at=_get_int(data, "createdAt"),
            updated_at=_get_int(data, "updatedAt"),
            description=_get_optional_str(data, "description"),
            event_time=_get_optional_str(data, "eventTime"),
        )

    # ==========================================================================
    # Finance
    # ==========================================================================

    def parse_finance_data(self, data: Dict[str, Any]) -> FinanceData:
        """Parse the finance aggregate (missing sub-maps become empty)."""
        return FinanceData(
            wallets=self._parse_map(_get_dict(data, "wallets"), self._parse_wallet, "wallet"),
            transactions=self._parse_map(
                _get_dict(data, "transactions"), self._parse_transaction, "transaction"
            ),
            categories=self._parse_map(
                _get_dict(data, "categories"), self._parse_category, "category"
            ),
            budgets=self._parse_map(_get_dict(data, "budgets"), self._parse_budget, "budget"),
            goals=self._parse_map(_get_dict(data, "goals"), self._parse_goal, "goal"),
            settings=self._parse_finance_settings(_get_dict(data, "settings")),
        )

    def _parse_wallet(self, data: Dict[str, Any], fallback_id: str) -> Wallet:
        return Wallet(
            id=_get_str(data, "id") or fallback_id,
            name=_get_str(data, "name"),
            balance=_get_float(data, "balance"),
            currency=_get_str(data, "currency", "USD"),
            type=_get_choice(
                data, "type", ("checking", "savings", "cash", "investment", "other"), "other"
            ),
            created_at=_get_int(data, "createdAt"),
            updated_at=_get_int(data, "updatedAt"),
        )

    def _parse_transaction(self, data: Dict[str, Any], fallback_id: str) -> Transaction:
        tags = data.get("tags")
        return Transaction(
            id=_get_str(data, "id") or fallback_id,
            wallet_id=_get_str(data, "walletId"),
            amount=_get_float(data, "amount"),
            type=_get_choice(data, "type", ("income", "expense"), "expense"),
            category_id=_get_str(data, "categoryId"),
            description=_get_str(data, "description"),
            date=_get_int(data, "date"),
            created_at=_get_int(data, "createdAt"),
            updated_at=_get_int(data, "updatedAt"),
            notes=_get_optional_str(data, "notes"),
            tags=_get_str_list(data, "tags") if isinstance(tags, list) else None,
            is_mindful=_get_optional_bool(data, "isMindful"),
        )

    def _parse_category(self, data: Dict[str, Any], fallback_id: str) -> Category:
        return Category(
            id=_get_str(data, "id") or fallback_id,
            name=_get_str(data, "name"),
            type=_get_choice(data, "type", ("essential", "growth", "fun", "other"), "other"),
            color=_get_str(data, "color"),
            icon=_get_str(data, "icon"),
            is_custom=_get_bool(data, "isCustom"),
            created_at=_get_int(data, "createdAt"),
        )

    def _parse_budget(self, data: Dict[str, Any], fallback_id: str) -> Budget:
        return Budget(
            id=_get_str(data, "id") or fallback_id,
            category_id=_get_str(data, "categoryId"),
            amount=_get_float(data, "amount"),
            period=_get_choice(data, "period", ("weekly", "monthly"), "monthly"),
            start_date=_get_int(data, "startDate"),
            end_date=_get_int(data, "endDate"),
            is_active=_get_bool(data, "isActive", True),
            created_at=_get_int(data, "createdAt"),
        )

    def _parse_goal(self, data: Dict[str, Any], fallback_id: str) -> FinanceGoal:
        return FinanceGoal(
            id=_get_str(data, "id") or fallback_id,
            title=_get_str(data, "title"),
            target_amount=_get_float(data, "targetAmount"),
            current_amount=_get_float(data, "currentAmount"),
            category=_get_choice(
                data, "category", ("savings", "debt", "investment", "purchase", "other"), "savings"
            ),
            priority=_get_choice(data, "priority", _PRIORITIES, "medium"),
            is_completed=_get_bool(data, "isCompleted"),
            created_at=_get_int(data, "createdAt"),
            updated_at=_get_int(data, "updatedAt"),
            description=_get_optional_str(data, "description"),
            deadline=_get_optional_int(data, "deadline"),
        )

    def _parse_finance_settings(self, data: Dict[str, Any]) -> FinanceSettings:
        return FinanceSettings(
            default_currency=_get_str(data, "defaultCurrency", "USD"),
            reminder_enabled=_get_bool(data, "reminderEnabled", True),
            weekly_review_day=_get_int(data, "weeklyReviewDay", 0),
            monthly_review_day=_get_int(data, "monthlyReviewDay", 1),
            mindful_spending_enabled=_get_bool(data, "mindfulSpendingEnabled", True),
            export_format=_get_choice(data, "exportFormat", ("csv", "pdf"), "csv"),
            default_wallet_id=_get_optional_str(data, "defaultWalletId"),
        )

    # ==========================================================================
    # Health
    # ==========================================================================

    def parse_health_data(self, data: Dict[str, Any]) -> HealthData:
        """Parse the health aggregate (missing sub-maps become empty)."""
        return HealthData(
            protocols=self._parse_map(
                _get_dict(data, "protocols"), self._parse_protocol, "health protocol"
            ),
            quit_habits=self._parse_map(
                _get_dict(data, "quitHabits"), self._parse_quit_habit, "quit habit"
            ),
            peptide_cycles=self._parse_map(
                _get_dict(data, "peptideCycles"), self._parse_peptide_cycle, "peptide cycle"
            ),
            settings=self._parse_health_settings(_get_dict(data, "settings")),
        )

    def _parse_protocol(self, data: Dict[str, Any], fallback_id: str) -> HealthProtocol:
        return HealthProtocol(
            id=_get_str(data, "id") or fallback_id,
            title=_get_str(data, "title"),
            description=_get_str(data, "description"),
            content=_get_str(data, "content"),
            category=_get_choice(
                data,
                "category",
                ("fitness", "nutrition", "sleep", "mental", "habits", "other"),
                "other",
            ),
            is_expanded=_get_bool(data, "isExpanded"),
            is_completed=_get_bool(data, "isCompleted"),
            created_at=_get_int(data, "createdAt"),
            updated_at=_get_int(data, "updatedAt"),
            completed_at=_get_optional_int(data, "completedAt"),
        )

    def _parse_quit_habit(self, data: Dict[str, Any], fallback_id: str) -> QuitHabit:
        milestones_data = data.get("milestones")
        milestones = []
        if isinstance(milestones_data, list):
            milestones = [
                QuitMilestone(
                    id=_get_str(item, "id"),
                    days=_get_int(item, "days"),
                    title=_get_str(item, "title"),
                    description=_get_str(item, "description"),
                    is_reached=_get_bool(item, "isReached"),
                    reached_at=_get_optional_int(item, "reachedAt"),
                )
                for item in milestones_data
                if isinstance(item, dict)
            ]

        return QuitHabit(
            id=_get_str(data, "id") or fallback_id,
            name=_get_str(data, "name"),
            quit_date=_get_int(data, "quitDate"),
            category=_get_choice(
                data,
                "category",
                ("smoking", "alcohol", "sugar", "social_media", "caffeine", "other"),
                "other",
            ),
            is_active=_get_bool(data, "isActive", True),
            milestones=milestones,
            created_at=_get_int(data, "createdAt"),
            description=_get_optional_str(data, "description"),
            custom_category=_get_optional_str(data, "customCategory"),
        )

    def _parse_peptide_cycle(self, data: Dict[str, Any], fallback_id: str) -> PeptideCycle:
        return PeptideCycle(
            id=_get_str(data, "id") or fallback_id,
            name=_get_str(data, "name"),
            dosage=_get_str(data, "dosage"),
            start_date=_get_str(data, "startDate"),
            cycle_length=_get_int(data, "cycleLength"),
            frequency=_get_choice(
                data,
                "frequency",
                ("daily", "twice_daily", "every_other_day", "weekly"),
                "daily",
            ),
            is_active=_get_bool(data, "isActive", True),
            created_at=_get_int(data, "createdAt"),
            updated_at=_get_int(data, "updatedAt"),
            notes=_get_optional_str(data, "notes"),
        )

    def _parse_health_settings(self, data: Dict[str, Any]) -> HealthSettings:
        return HealthSettings(
            reminder_enabled=_get_bool(data, "reminderEnabled", True),
            weekly_review_day=_get_int(data, "weeklyReviewDay", 0),
            notification_enabled=_get_bool(data, "notificationEnabled", True),
            daily_check_in_time=_get_optional_str(data, "dailyCheckInTime"),
        )
