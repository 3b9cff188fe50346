"""Unit tests for entities.factory and entities.defaults."""

import re

import pytest

from workspace_cache.entities import (
    PageType,
    Section,
    compute_note_metrics,
    create_calendar_event,
    create_daily_task,
    create_page,
    default_finance_data,
    fresh_state,
    generate_id,
)
from tests.fixtures.workspace_fixtures import FROZEN_NOW


class TestGenerateId:
    """Test cases for generate_id()."""

    def test_format(self, frozen_clock):
        page_id = generate_id()

        assert re.fullmatch(rf"page_{FROZEN_NOW}_[0-9a-z]{{9}}", page_id)

    def test_prefix(self, frozen_clock):
        assert generate_id("task").startswith(f"task_{FROZEN_NOW}_")

    def test_ids_differ_within_same_millisecond(self, frozen_clock):
        ids = {generate_id() for _ in range(50)}

        assert len(ids) == 50


class TestCreatePage:
    """Test cases for create_page()."""

    def test_defaults(self, frozen_clock):
        page = create_page()

        assert page.title == "Untitled"
        assert page.content == ""
        assert page.blocks == []
        assert page.children == []
        assert page.parent_id is None
        assert page.is_expanded is True
        assert page.icon == "document"
        assert page.page_type is PageType.WORKSPACE
        assert page.created_at == page.updated_at == FROZEN_NOW

    def test_empty_title_falls_back(self):
        assert create_page("").title == "Untitled"

    def test_parent_and_type(self):
        page = create_page("Idea", parent_id="p1", page_type=PageType.NOTE)

        assert page.title == "Idea"
        assert page.parent_id == "p1"
        assert page.page_type is PageType.NOTE


class TestCreateOtherEntities:
    """Test cases for task and calendar event factories."""

    def test_daily_task(self, frozen_clock):
        task = create_daily_task("Stretch", 15, "medium", "health")

        assert task.id.startswith("task_")
        assert task.completed is False
        assert task.streak == 0
        assert task.description is None
        assert "description" not in task.to_dict()
        assert task.created_at == FROZEN_NOW

    def test_daily_task_keeps_description(self):
        task = create_daily_task("Stretch", 15, "medium", "health", description="")

        assert task.description == ""
        assert task.to_dict()["description"] == ""

    def test_calendar_event(self):
        event = create_calendar_event("Dentist", "2026-03-01", "09:30")

        assert event.id.startswith("event_")
        assert event.event_date == "2026-03-01"
        assert event.event_time == "09:30"
        assert event.description is None


class TestNoteMetrics:
    """Test cases for compute_note_metrics()."""

    @pytest.mark.parametrize("text,expected", [
        ("", (0, 0)),
        ("one two  three\nfour", (4, 1)),
        (" ".join(["word"] * 200), (200, 1)),
        (" ".join(["word"] * 201), (201, 2)),
    ])
    def test_word_count_and_reading_time(self, text, expected):
        assert compute_note_metrics(text) == expected


class TestDefaults:
    """Test cases for default data factories."""

    def test_default_finance_data(self, frozen_clock):
        finance = default_finance_data()

        assert finance.wallets == {}
        assert finance.transactions == {}
        assert finance.budgets == {}
        assert finance.goals == {}
        assert set(finance.categories) == {
            "food", "housing", "education", "shopping", "transport", "health"
        }
        for category_id, category in finance.categories.items():
            assert category.id == category_id
            assert category.is_custom is False
            assert category.created_at == FROZEN_NOW
        assert finance.settings.default_currency == "USD"
        assert finance.settings.weekly_review_day == 0
        assert finance.settings.monthly_review_day == 1

    def test_default_finance_data_is_not_shared(self):
        first = default_finance_data()
        first.categories.clear()

        assert len(default_finance_data().categories) == 6

    def test_fresh_state(self):
        state = fresh_state()

        assert state.pages == {}
        assert state.root_pages == []
        assert state.search_query == ""
        assert state.current_page_id is None
        assert state.current_section is Section.PAGES
        assert state.daily_tasks == {}
        assert state.calendar_events == {}
        assert state.health_data.settings.reminder_enabled is True
        assert len(state.finance_data.categories) == 6
