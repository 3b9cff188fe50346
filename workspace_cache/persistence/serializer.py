"""Quota-safe serialization of the workspace snapshot.

The serializer turns the in-memory WorkspaceState into the JSON record
written to the local store. Before encoding, every block is passed through
the strip rule registered for its type; image and video blocks lose the
``url`` entry of their data payload, which is where embedded (base64)
media lives. This transform is lossy: reloading such a page shows the
media as missing unless it can be fetched again from an uploaded copy.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional

from ..entities.models import BlockType, WorkspaceState
from .errors import QuotaExceededError

logger = logging.getLogger(__name__)

# Key of the embedded media payload inside a block's data
MEDIA_URL_KEY = "url"

StripRule = Callable[[Dict[str, Any]], None]


def strip_media_url(block: Dict[str, Any]) -> None:
    """Remove the embedded media url from a block record, in place."""
    data = block.get("data")
    if isinstance(data, dict) and MEDIA_URL_KEY in data:
        del data[MEDIA_URL_KEY]


# Per-block-type serialization rules; types without a rule are stored as-is
STRIP_RULES: Dict[BlockType, StripRule] = {
    BlockType.IMAGE: strip_media_url,
    BlockType.VIDEO: strip_media_url,
}


class QuotaSafeSerializer:
    """Converts workspace state into a record that fits the local store.

    Attributes:
        quota_bytes: Maximum encoded size in bytes (None disables the check)
        strip_rules: Mapping of block type to strip rule

    Example:
        >>> serializer = QuotaSafeSerializer(quota_bytes=5 * 1024 * 1024)
        >>> payload = serializer.encode(state)
    """

    def __init__(
        self,
        quota_bytes: Optional[int] = None,
        strip_rules: Optional[Dict[BlockType, StripRule]] = None,
    ):
        self.quota_bytes = quota_bytes
        self.strip_rules = dict(STRIP_RULES if strip_rules is None else strip_rules)

    def snapshot(self, state: WorkspaceState) -> Dict[str, Any]:
        """Build the storable record for a state.

        ``state.to_dict()`` returns a structure that shares nothing with the
        state, so stripping never touches objects the UI still references.

        Args:
            state: In-memory workspace state

        Returns:
            Record dictionary with large media payloads removed
        """
        record = state.to_dict()
        stripped = 0

        for page in record["pages"].values():
            for block in page["blocks"]:
                rule = self.strip_rules.get(BlockType(block["type"]))
                if rule is None:
                    continue
                had_url = MEDIA_URL_KEY in (block.get("data") or {})
                rule(block)
                if had_url:
                    stripped += 1

        if stripped:
            logger.debug(f"Stripped embedded media from {stripped} block(s)")

        return record

    def encode(self, state: WorkspaceState, key: str = "") -> str:
        """Serialize a state to its JSON record.

        Args:
            state: In-memory workspace state
            key: Store key, used in error messages

        Returns:
            Compact JSON string

        Raises:
            QuotaExceededError: If the encoded record exceeds quota_bytes
            TypeError: If the state holds values JSON cannot encode
        """
        payload = json.dumps(
            self.snapshot(state),
            ensure_ascii=False,
            separators=(",", ":"),
        )

        if self.quota_bytes is not None:
            size = len(payload.encode("utf-8"))
            if size > self.quota_bytes:
                raise QuotaExceededError(key, size, self.quota_bytes)

        return payload
