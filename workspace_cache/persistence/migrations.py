"""Migration and defaulting engine for persisted workspace records.

Records written by older versions of the application may lack fields that
newer code relies on. On every load the raw record is passed through an
ordered list of named migration steps. Each step backfills one absent (or
malformed) field with a safe default and is idempotent on its own, so the
whole pipeline is idempotent as well.

Every field the application starts persisting must ship with a step here.
New steps are appended to MIGRATIONS; existing steps are never rewritten.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..entities.defaults import (
    DEFAULT_ICON,
    PRIMARY_SECTION,
    default_finance_data,
    default_health_data,
)
from ..entities.models import PageType, Section

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


@dataclass(frozen=True)
class Migration:
    """A single named defaulting step.

    Attributes:
        name: Stable identifier used in logs
        apply: Function that patches the record in place and returns True
            if it changed anything
    """

    name: str
    apply: Callable[[Record], bool]


def _pages(record: Record) -> List[Record]:
    return [page for page in record["pages"].values() if isinstance(page, dict)]


def ensure_pages_map(record: Record) -> bool:
    if isinstance(record.get("pages"), dict):
        return False
    record["pages"] = {}
    return True


def ensure_page_blocks(record: Record) -> bool:
    changed = False
    for page in _pages(record):
        if not isinstance(page.get("blocks"), list):
            page["blocks"] = []
            changed = True
    return changed


def ensure_page_icon(record: Record) -> bool:
    changed = False
    for page in _pages(record):
        icon = page.get("icon")
        if not isinstance(icon, str) or not icon:
            page["icon"] = DEFAULT_ICON
            changed = True
    return changed


def ensure_daily_tasks(record: Record) -> bool:
    if isinstance(record.get("dailyTasks"), dict):
        return False
    record["dailyTasks"] = {}
    return True


def ensure_finance_data(record: Record) -> bool:
    if isinstance(record.get("financeData"), dict):
        return False
    record["financeData"] = default_finance_data().to_dict()
    return True


def ensure_current_section(record: Record) -> bool:
    valid_sections = {section.value for section in Section}
    if record.get("currentSection") in valid_sections:
        return False
    record["currentSection"] = PRIMARY_SECTION.value
    return True


def ensure_calendar_events(record: Record) -> bool:
    if isinstance(record.get("calendarEvents"), dict):
        return False
    record["calendarEvents"] = {}
    return True


def ensure_health_data(record: Record) -> bool:
    if isinstance(record.get("healthData"), dict):
        return False
    record["healthData"] = default_health_data().to_dict()
    return True


def ensure_peptide_cycles(record: Record) -> bool:
    health = record["healthData"]
    if isinstance(health.get("peptideCycles"), dict):
        return False
    health["peptideCycles"] = {}
    return True


def ensure_page_type(record: Record) -> bool:
    valid_types = {page_type.value for page_type in PageType}
    changed = False
    for page in _pages(record):
        if page.get("pageType") not in valid_types:
            page["pageType"] = PageType.WORKSPACE.value
            changed = True
    return changed


def ensure_page_children(record: Record) -> bool:
    changed = False
    for page in _pages(record):
        if not isinstance(page.get("children"), list):
            page["children"] = []
            changed = True
    return changed


def ensure_root_pages(record: Record) -> bool:
    if isinstance(record.get("rootPages"), list):
        return False
    record["rootPages"] = []
    return True


def ensure_search_query(record: Record) -> bool:
    if isinstance(record.get("searchQuery"), str):
        return False
    record["searchQuery"] = ""
    return True


# Ordered defaulting steps; append new steps at the end
MIGRATIONS: List[Migration] = [
    Migration("pages", ensure_pages_map),
    Migration("page_blocks", ensure_page_blocks),
    Migration("page_icon", ensure_page_icon),
    Migration("daily_tasks", ensure_daily_tasks),
    Migration("finance_data", ensure_finance_data),
    Migration("current_section", ensure_current_section),
    Migration("calendar_events", ensure_calendar_events),
    Migration("health_data", ensure_health_data),
    Migration("health_peptide_cycles", ensure_peptide_cycles),
    Migration("page_type", ensure_page_type),
    Migration("page_children", ensure_page_children),
    Migration("root_pages", ensure_root_pages),
    Migration("search_query", ensure_search_query),
]


def migrate(record: Record, migrations: Optional[Sequence[Migration]] = None) -> Record:
    """Bring a raw record up to the current entity schema.

    The input is not modified; a migrated deep copy is returned. Migration
    never raises for a dictionary input: malformed or absent fields are
    replaced by defaults.

    Args:
        record: Raw record decoded from the store
        migrations: Steps to apply (defaults to MIGRATIONS)

    Returns:
        Migrated copy of the record

    Raises:
        TypeError: If record is not a dictionary
    """
    if not isinstance(record, dict):
        raise TypeError(
            f"Workspace record must be a dictionary, got {type(record).__name__}"
        )

    migrated = copy.deepcopy(record)
    for migration in MIGRATIONS if migrations is None else migrations:
        if migration.apply(migrated):
            logger.info(f"Applied migration '{migration.name}'")
        else:
            logger.debug(f"Migration '{migration.name}' not needed")

    return migrated
