"""StoreCommand: operator actions over the local workspace store.

Each public method maps to one CLI command. The command builds its store
from a WorkspaceConfig, so tests can pass a store directly instead.
"""

import logging
from typing import List, Optional, Tuple

from ..config_loader import WorkspaceConfig
from ..entities.models import MEDIA_BLOCK_TYPES
from ..persistence.backends import FileBackend
from ..persistence.migrations import migrate
from ..persistence.serializer import QuotaSafeSerializer
from ..persistence.store import WorkspaceStore
from ..workspace.bootstrap import ensure_welcome_page
from ..workspace.session import WorkspaceSession
from ..workspace.tree import check_tree
from .models import WorkspaceSummary

logger = logging.getLogger(__name__)


def build_store(config: WorkspaceConfig) -> WorkspaceStore:
    """Create the file-backed store described by a configuration."""
    return WorkspaceStore(
        FileBackend(config.store_dir),
        key=config.storage_key,
        serializer=QuotaSafeSerializer(config.quota_bytes),
    )


class StoreCommand:
    """Runs inspection and maintenance actions against a workspace store.

    Example:
        >>> command = StoreCommand(WorkspaceConfig(store_dir="./cache"))
        >>> command.init()
        'page_1700000000000_k3j9x0a2b'
    """

    def __init__(
        self,
        config: WorkspaceConfig,
        store: Optional[WorkspaceStore] = None,
    ):
        self.config = config
        self.store = store or build_store(config)

    def init(self) -> Optional[str]:
        """Load the workspace and create the welcome page if it has no pages.

        Returns:
            ID of the created welcome page, or None if pages already existed
        """
        with WorkspaceSession.open(self.store) as session:
            return ensure_welcome_page(session, self.config.app_name)

    def summarize(self) -> WorkspaceSummary:
        """Load the workspace and count what it holds."""
        state = self.store.load()
        content = self.store.backend.get(self.store.key)

        blocks = [block for page in state.pages.values() for block in page.blocks]
        return WorkspaceSummary(
            page_count=len(state.pages),
            root_page_count=len(state.root_pages),
            block_count=len(blocks),
            media_block_count=sum(1 for b in blocks if b.type in MEDIA_BLOCK_TYPES),
            daily_task_count=len(state.daily_tasks),
            calendar_event_count=len(state.calendar_events),
            wallet_count=len(state.finance_data.wallets),
            transaction_count=len(state.finance_data.transactions),
            record_bytes=len(content.encode('utf-8')) if content else 0,
            current_section=state.current_section.value,
            problems=check_tree(state),
        )

    def check(self) -> List[str]:
        """Return the page tree consistency problems of the stored workspace."""
        problems = check_tree(self.store.load())
        if problems:
            logger.warning(f"Workspace tree has {len(problems)} problem(s)")
        return problems

    def migrate(self) -> Optional[Tuple[bool, bool]]:
        """Rewrite the stored record in the current schema.

        Returns:
            Tuple of (record_changed, saved), or None if no record is stored

        Raises:
            StoreReadError: If the record cannot be read
            CorruptSnapshotError: If the stored record is not a JSON object
        """
        record = self.store.load_raw()
        if record is None:
            logger.info("No stored workspace to migrate")
            return None

        changed = migrate(record) != record
        saved = self.store.save(self.store.load())
        return changed, saved

    def reset(self) -> None:
        """Delete the stored workspace record.

        Raises:
            StoreWriteError: If the record cannot be deleted
        """
        self.store.reset()
