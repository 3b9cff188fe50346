"""Unit tests for persistence.migrations."""

import copy
import logging

import pytest

from workspace_cache.entities import default_finance_data, fresh_state
from workspace_cache.persistence import MIGRATIONS, Migration, migrate
from tests.fixtures.workspace_fixtures import (
    get_legacy_record,
    get_media_state,
    get_populated_state,
    get_pre_health_record,
)


class TestMigrate:
    """Test cases for migrate()."""

    def test_rejects_non_dict(self):
        with pytest.raises(TypeError, match="must be a dictionary"):
            migrate("not a record")

    def test_input_is_not_modified(self):
        record = get_legacy_record()
        original = copy.deepcopy(record)

        migrate(record)

        assert record == original

    def test_empty_record_becomes_complete(self, frozen_clock):
        migrated = migrate({})

        assert migrated == fresh_state().to_dict()

    def test_current_record_is_unchanged(self):
        record = get_populated_state().to_dict()

        assert migrate(record) == record

    @pytest.mark.parametrize("record_factory", [
        dict,
        get_legacy_record,
        get_pre_health_record,
        lambda: get_media_state().to_dict(),
        lambda: {"pages": "broken", "currentSection": 3, "healthData": {}},
    ])
    def test_idempotent(self, record_factory, frozen_clock):
        once = migrate(record_factory())

        assert migrate(once) == once

    def test_applied_steps_are_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="workspace_cache"):
            migrate(get_legacy_record())

        assert "Applied migration 'page_blocks'" in caplog.text
        assert "Applied migration 'daily_tasks'" in caplog.text
        assert "Applied migration 'pages'" not in caplog.text

    def test_custom_migration_list(self):
        def add_flag(record):
            if record.get("flag"):
                return False
            record["flag"] = True
            return True

        migrated = migrate({}, [Migration("flag", add_flag)])

        assert migrated == {"flag": True}


class TestDefaulting:
    """Test cases for the individual defaulting steps."""

    def test_legacy_page_is_backfilled(self):
        page = migrate(get_legacy_record())["pages"]["p1"]

        assert page["blocks"] == []
        assert page["icon"] == "document"
        assert page["pageType"] == "workspace"
        assert page["children"] == []
        assert page["content"] == "Written long ago"

    def test_missing_daily_tasks(self):
        assert migrate(get_legacy_record())["dailyTasks"] == {}

    def test_missing_finance_data(self, frozen_clock):
        migrated = migrate(get_legacy_record())

        assert migrated["financeData"] == default_finance_data().to_dict()

    def test_missing_current_section(self):
        assert migrate(get_legacy_record())["currentSection"] == "pages"

    def test_invalid_current_section(self):
        assert migrate({"currentSection": "settings"})["currentSection"] == "pages"

    def test_existing_finance_data_is_kept(self):
        migrated = migrate(get_pre_health_record())

        assert migrated["financeData"]["settings"] == {"defaultCurrency": "EUR"}
        assert migrated["currentSection"] == "finance"

    def test_missing_health_data(self):
        migrated = migrate(get_pre_health_record())

        assert migrated["calendarEvents"] == {}
        assert migrated["healthData"]["peptideCycles"] == {}
        assert migrated["healthData"]["settings"]["reminderEnabled"] is True

    def test_health_data_without_peptide_cycles(self):
        migrated = migrate({"healthData": {"protocols": {"x": {}}}})

        assert migrated["healthData"]["peptideCycles"] == {}
        assert migrated["healthData"]["protocols"] == {"x": {}}

    def test_existing_icon_is_kept(self):
        record = get_legacy_record()
        record["pages"]["p1"]["icon"] = "star"

        assert migrate(record)["pages"]["p1"]["icon"] == "star"

    def test_non_object_pages_are_left_for_parser(self):
        migrated = migrate({"pages": {"p1": "garbage"}})

        assert migrated["pages"] == {"p1": "garbage"}

    def test_step_names_are_unique(self):
        names = [migration.name for migration in MIGRATIONS]

        assert len(names) == len(set(names))
