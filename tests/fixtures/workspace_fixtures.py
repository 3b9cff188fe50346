"""Test fixtures for workspace state and persisted records.

Provides:
- Sample WorkspaceState objects (empty, nested pages, media blocks)
- Sample raw records in older schemas (as read back from the store)

These fixtures are used by unit and integration tests.
"""

from typing import Any, Dict

from workspace_cache.entities import (
    Block,
    BlockType,
    DailyTask,
    Page,
    Wallet,
    WorkspaceState,
    fresh_state,
)

# Fixed clock value used by the frozen_clock fixture
FROZEN_NOW = 1_700_000_000_000


# ==============================================================================
# Sample WorkspaceState Objects
# ==============================================================================

def get_nested_state() -> WorkspaceState:
    """Create a state with a root page, one child and one grandchild.

    Returns:
        WorkspaceState whose tree is root -> child -> grandchild

    Example:
        >>> state = get_nested_state()
        >>> state.pages["child"].parent_id
        'root'
    """
    state = fresh_state()
    state.pages = {
        "root": Page(
            id="root",
            title="Projects",
            children=["child"],
            created_at=FROZEN_NOW,
            updated_at=FROZEN_NOW,
            is_expanded=True,
        ),
        "child": Page(
            id="child",
            title="Roadmap",
            parent_id="root",
            children=["grandchild"],
            created_at=FROZEN_NOW,
            updated_at=FROZEN_NOW,
        ),
        "grandchild": Page(
            id="grandchild",
            title="Q3",
            parent_id="child",
            created_at=FROZEN_NOW,
            updated_at=FROZEN_NOW,
        ),
    }
    state.root_pages = ["root"]
    return state


def get_media_state(url: str = "data:image/png;base64,AAAA") -> WorkspaceState:
    """Create a state with one page holding a text, an image and a video block.

    Args:
        url: Embedded media payload put on the image and video blocks

    Returns:
        WorkspaceState with page "media" whose blocks carry data.url
    """
    state = fresh_state()
    state.pages["media"] = Page(
        id="media",
        title="Gallery",
        blocks=[
            Block(id="b1", type=BlockType.TEXT, content="Intro", order=0),
            Block(id="b2", type=BlockType.IMAGE, order=1, data={"url": url, "width": 100}),
            Block(id="b3", type=BlockType.VIDEO, order=2, data={"url": url, "autoplay": False}),
        ],
        created_at=FROZEN_NOW,
        updated_at=FROZEN_NOW,
    )
    state.root_pages = ["media"]
    return state


def get_populated_state() -> WorkspaceState:
    """Create a nested state that also holds a daily task and a wallet."""
    state = get_nested_state()
    state.daily_tasks["task_1"] = DailyTask(
        id="task_1",
        title="Read",
        time_allocation=30,
        priority="high",
        category="growth",
        created_at=FROZEN_NOW,
        updated_at=FROZEN_NOW,
        streak=4,
    )
    state.finance_data.wallets["wallet_1"] = Wallet(
        id="wallet_1",
        name="Checking",
        balance=120.5,
        type="checking",
        created_at=FROZEN_NOW,
        updated_at=FROZEN_NOW,
    )
    state.current_page_id = "child"
    return state


# ==============================================================================
# Sample raw records (older schemas)
# ==============================================================================

def get_legacy_record() -> Dict[str, Any]:
    """Create a record from the earliest schema: pages only.

    The page has no blocks, icon, pageType or children, and the record has
    no dailyTasks, financeData, calendarEvents, healthData or currentSection.
    """
    return {
        "pages": {
            "p1": {
                "id": "p1",
                "title": "Old page",
                "content": "Written long ago",
                "createdAt": FROZEN_NOW,
                "updatedAt": FROZEN_NOW,
            },
        },
        "rootPages": ["p1"],
        "searchQuery": "",
    }


def get_pre_health_record() -> Dict[str, Any]:
    """Create a record written before calendar and health data existed."""
    return {
        "pages": {},
        "rootPages": [],
        "searchQuery": "",
        "currentSection": "finance",
        "dailyTasks": {},
        "financeData": {
            "wallets": {},
            "transactions": {},
            "categories": {},
            "budgets": {},
            "goals": {},
            "settings": {"defaultCurrency": "EUR"},
        },
    }
