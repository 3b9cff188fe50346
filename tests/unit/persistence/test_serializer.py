"""Unit tests for persistence.serializer.QuotaSafeSerializer."""

import json

import pytest

from workspace_cache.entities import BlockType
from workspace_cache.persistence import QuotaExceededError, QuotaSafeSerializer
from workspace_cache.persistence.serializer import strip_media_url
from tests.fixtures.workspace_fixtures import get_media_state, get_nested_state


class TestSnapshot:
    """Test cases for QuotaSafeSerializer.snapshot()."""

    def test_media_urls_are_stripped(self):
        record = QuotaSafeSerializer().snapshot(get_media_state())

        blocks = record["pages"]["media"]["blocks"]
        assert blocks[1]["data"] == {"width": 100}
        assert blocks[2]["data"] == {"autoplay": False}

    def test_state_is_not_modified(self):
        state = get_media_state()

        QuotaSafeSerializer().snapshot(state)

        assert state.pages["media"].blocks[1].data["url"].startswith("data:image/png")
        assert state.pages["media"].blocks[2].data["url"].startswith("data:image/png")

    def test_other_blocks_keep_url(self):
        state = get_media_state()
        state.pages["media"].blocks[0].data = {"url": "https://example.org"}

        record = QuotaSafeSerializer().snapshot(state)

        assert record["pages"]["media"]["blocks"][0]["data"] == {"url": "https://example.org"}

    def test_media_block_without_data(self):
        state = get_media_state()
        state.pages["media"].blocks[1].data = None

        record = QuotaSafeSerializer().snapshot(state)

        assert "data" not in record["pages"]["media"]["blocks"][1]

    def test_custom_strip_rules(self):
        def drop_table_data(block):
            block.pop("data", None)

        state = get_media_state()
        state.pages["media"].blocks[0].type = BlockType.TABLE
        state.pages["media"].blocks[0].data = {"rows": [[1, 2]]}

        record = QuotaSafeSerializer(strip_rules={BlockType.TABLE: drop_table_data}).snapshot(state)

        blocks = record["pages"]["media"]["blocks"]
        assert "data" not in blocks[0]
        # Image rule is not registered, so the url stays
        assert "url" in blocks[1]["data"]

    def test_strip_media_url_ignores_missing_data(self):
        block = {"id": "b1", "type": "image"}

        strip_media_url(block)

        assert block == {"id": "b1", "type": "image"}


class TestEncode:
    """Test cases for QuotaSafeSerializer.encode()."""

    def test_encode_is_compact_json(self):
        payload = QuotaSafeSerializer().encode(get_nested_state())

        assert ", " not in payload
        assert json.loads(payload)["rootPages"] == ["root"]

    def test_non_ascii_kept_literal(self):
        state = get_nested_state()
        state.pages["root"].title = "Café"

        payload = QuotaSafeSerializer().encode(state)

        assert "Café" in payload

    def test_quota_exceeded_raises(self):
        serializer = QuotaSafeSerializer(quota_bytes=50)

        with pytest.raises(QuotaExceededError) as exc_info:
            serializer.encode(get_nested_state(), key="gm-ai-workspace")

        assert exc_info.value.key == "gm-ai-workspace"
        assert exc_info.value.quota_bytes == 50
        assert exc_info.value.size_bytes > 50

    def test_stripping_brings_record_under_quota(self):
        large_url = "data:image/png;base64," + "A" * 100_000
        state = get_media_state(url=large_url)

        payload = QuotaSafeSerializer(quota_bytes=20_000).encode(state)

        assert large_url not in payload
