"""Unit tests for entities.models to_dict conversion."""

from workspace_cache.entities import (
    Block,
    BlockType,
    DailyTask,
    NoteMetadata,
    Page,
    PageType,
    Section,
    WorkspaceState,
)


class TestBlockToDict:
    """Test cases for Block.to_dict()."""

    def test_block_without_data_omits_data_key(self):
        block = Block(id="b1", type=BlockType.HEADER, content="Title", order=2)

        assert block.to_dict() == {
            "id": "b1",
            "type": "header",
            "content": "Title",
            "order": 2,
        }

    def test_block_data_is_copied(self):
        """Mutating the record must not reach the block."""
        block = Block(id="b1", type=BlockType.IMAGE, data={"url": "x", "size": {"w": 1}})

        record = block.to_dict()
        record["data"]["size"]["w"] = 99
        del record["data"]["url"]

        assert block.data == {"url": "x", "size": {"w": 1}}

    def test_is_media(self):
        assert Block(id="a", type=BlockType.IMAGE).is_media
        assert Block(id="b", type=BlockType.VIDEO).is_media
        assert not Block(id="c", type=BlockType.TABLE).is_media


class TestPageToDict:
    """Test cases for Page.to_dict()."""

    def test_root_page_omits_parent_and_expansion(self):
        page = Page(id="p1", title="Home", created_at=1, updated_at=2)

        result = page.to_dict()

        assert "parentId" not in result
        assert "isExpanded" not in result
        assert "noteMetadata" not in result
        assert result["icon"] == "document"
        assert result["pageType"] == "workspace"
        assert result["children"] == []
        assert result["blocks"] == []

    def test_note_page_includes_metadata(self):
        page = Page(
            id="n1",
            title="Journal",
            parent_id="p1",
            is_expanded=False,
            page_type=PageType.NOTE,
            note_metadata=NoteMetadata(tags=["daily"], word_count=3, reading_time=1),
        )

        result = page.to_dict()

        assert result["parentId"] == "p1"
        assert result["isExpanded"] is False
        assert result["pageType"] == "note"
        assert result["noteMetadata"] == {
            "tags": ["daily"],
            "isPinned": False,
            "lastEditedAt": 0,
            "wordCount": 3,
            "readingTime": 1,
        }

    def test_sorted_blocks_orders_by_order(self):
        page = Page(
            id="p1",
            title="Body",
            blocks=[
                Block(id="c", type=BlockType.TEXT, order=3),
                Block(id="a", type=BlockType.TEXT, order=1),
                Block(id="b", type=BlockType.TEXT, order=2),
            ],
        )

        assert [block.id for block in page.sorted_blocks()] == ["a", "b", "c"]


class TestDailyTaskToDict:
    """Test cases for DailyTask.to_dict()."""

    def test_optional_fields_only_when_set(self):
        task = DailyTask(
            id="t1", title="Walk", time_allocation=20, priority="low", category="health"
        )

        assert "description" not in task.to_dict()
        assert "completedAt" not in task.to_dict()

        task.completed_at = 5
        assert task.to_dict()["completedAt"] == 5


class TestWorkspaceStateToDict:
    """Test cases for WorkspaceState.to_dict()."""

    def test_empty_state_has_every_top_level_key(self):
        result = WorkspaceState().to_dict()

        assert set(result) == {
            "pages",
            "rootPages",
            "searchQuery",
            "currentSection",
            "dailyTasks",
            "calendarEvents",
            "financeData",
            "healthData",
        }
        assert result["currentSection"] == "pages"

    def test_current_page_included_when_focused(self):
        state = WorkspaceState(current_page_id="p1", current_section=Section.PAGES)

        assert state.to_dict()["currentPageId"] == "p1"

    def test_record_shares_no_structure_with_state(self):
        state = WorkspaceState(
            pages={"p1": Page(id="p1", title="Home", children=["p2"])},
            root_pages=["p1"],
        )

        record = state.to_dict()
        record["rootPages"].append("other")
        record["pages"]["p1"]["children"].append("other")

        assert state.root_pages == ["p1"]
        assert state.pages["p1"].children == ["p2"]
