"""Page hierarchy helpers.

Pages form a forest: ``root_pages`` lists the roots and each page's
``children`` lists its direct descendants. ``parent_id`` is only a
back-reference and must agree with the owning ``children`` list.
"""

from collections import Counter
from typing import Iterator, List

from ..entities.models import WorkspaceState


def iter_descendants(state: WorkspaceState, page_id: str) -> Iterator[str]:
    """Yield the ids of all descendants of a page, depth first.

    Child ids that do not resolve to a page are skipped. Each page is
    yielded at most once, so a cycle terminates; a page that is its own
    ancestor shows up among its own descendants.

    Args:
        state: Workspace state
        page_id: Page whose subtree is walked
    """
    seen = set()
    stack = list(reversed(state.pages[page_id].children)) if page_id in state.pages else []
    while stack:
        child_id = stack.pop()
        if child_id in seen or child_id not in state.pages:
            continue
        seen.add(child_id)
        yield child_id
        stack.extend(reversed(state.pages[child_id].children))


def check_tree(state: WorkspaceState) -> List[str]:
    """Check the page hierarchy for consistency.

    Verifies that every page is owned exactly once (by ``root_pages`` or by
    one parent's ``children``), that ``parent_id`` matches the owner, that
    every referenced id exists, and that no page is its own ancestor.

    Args:
        state: Workspace state

    Returns:
        List of human-readable problems (empty when the tree is consistent)
    """
    problems: List[str] = []

    for page_id, page in state.pages.items():
        if page.id != page_id:
            problems.append(f"Page stored under '{page_id}' has id '{page.id}'")

    owners = Counter()
    for root_id in state.root_pages:
        owners[root_id] += 1
        if root_id not in state.pages:
            problems.append(f"Root page '{root_id}' does not exist")
        elif state.pages[root_id].parent_id is not None:
            problems.append(
                f"Root page '{root_id}' has parent '{state.pages[root_id].parent_id}'"
            )

    for page_id, page in state.pages.items():
        for child_id in page.children:
            owners[child_id] += 1
            if child_id not in state.pages:
                problems.append(f"Page '{page_id}' lists missing child '{child_id}'")
            elif state.pages[child_id].parent_id != page_id:
                problems.append(
                    f"Page '{child_id}' is a child of '{page_id}' "
                    f"but has parent '{state.pages[child_id].parent_id}'"
                )

    for page_id, page in state.pages.items():
        if owners[page_id] == 0:
            problems.append(f"Page '{page_id}' is not reachable from any owner")
        elif owners[page_id] > 1:
            problems.append(f"Page '{page_id}' is owned {owners[page_id]} times")

        if page.parent_id is not None:
            parent = state.pages.get(page.parent_id)
            if parent is None:
                problems.append(f"Page '{page_id}' has missing parent '{page.parent_id}'")
            elif page_id not in parent.children:
                problems.append(
                    f"Page '{page_id}' is missing from the children of '{page.parent_id}'"
                )

    for page_id in state.pages:
        if page_id in iter_descendants(state, page_id):
            problems.append(f"Page '{page_id}' is its own ancestor")

    return problems
