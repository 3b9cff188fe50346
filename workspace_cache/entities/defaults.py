"""Default values and fresh-state factories for the entity model.

The migration engine and the store adapter both rely on these factories,
so every value returned here must independently satisfy the workspace
invariants: maps keyed by their entity ids, no dangling references.
"""

import time
from typing import Dict

from .models import (
    DEFAULT_ICON,
    Category,
    FinanceData,
    FinanceSettings,
    HealthData,
    HealthSettings,
    Section,
    WorkspaceState,
)

# Title used when a page is created without one
DEFAULT_TITLE = "Untitled"

# Section selected on first run and after migrating records without one
PRIMARY_SECTION = Section.PAGES

__all__ = [
    'DEFAULT_ICON',
    'DEFAULT_TITLE',
    'PRIMARY_SECTION',
    'now_ms',
    'default_finance_data',
    'default_health_data',
    'fresh_state',
]

# (id, name, type, color) for the categories every new finance section starts with
_BUILTIN_CATEGORIES = (
    ('food', 'Food & Dining', 'essential', '#ef4444'),
    ('housing', 'Housing & Rent', 'essential', '#3b82f6'),
    ('education', 'Books & Courses', 'growth', '#10b981'),
    ('shopping', 'Shopping', 'fun', '#f59e0b'),
    ('transport', 'Transportation', 'essential', '#8b5cf6'),
    ('health', 'Health & Fitness', 'growth', '#06b6d4'),
)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def default_finance_data() -> FinanceData:
    """Build the canonical starting finance aggregate.

    Contains no wallets, transactions, budgets or goals; a fixed set of
    built-in spending categories; and default settings (USD, reminders on,
    weekly review on Sunday, monthly review on the 1st).

    Returns:
        A new FinanceData instance (never shared between calls)
    """
    created_at = now_ms()
    categories: Dict[str, Category] = {}
    for category_id, name, category_type, color in _BUILTIN_CATEGORIES:
        categories[category_id] = Category(
            id=category_id,
            name=name,
            type=category_type,
            color=color,
            icon=category_id,
            is_custom=False,
            created_at=created_at,
        )

    return FinanceData(
        categories=categories,
        settings=FinanceSettings(
            default_currency='USD',
            reminder_enabled=True,
            weekly_review_day=0,
            monthly_review_day=1,
            mindful_spending_enabled=True,
            export_format='csv',
        ),
    )


def default_health_data() -> HealthData:
    """Build the empty health aggregate with default reminder settings."""
    return HealthData(
        settings=HealthSettings(
            reminder_enabled=True,
            weekly_review_day=0,
            notification_enabled=True,
        ),
    )


def fresh_state() -> WorkspaceState:
    """Build the complete empty workspace used when no valid record exists.

    Returns:
        WorkspaceState with empty maps, no root pages, an empty search query,
        default finance and health data, and the primary section selected
    """
    return WorkspaceState(
        pages={},
        root_pages=[],
        search_query='',
        current_page_id=None,
        current_section=PRIMARY_SECTION,
        daily_tasks={},
        calendar_events={},
        finance_data=default_finance_data(),
        health_data=default_health_data(),
    )
