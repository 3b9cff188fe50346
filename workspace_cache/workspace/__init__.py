"""Workspace state container and page hierarchy helpers.

This package provides the session that owns the in-memory workspace and
funnels every mutation through well-defined update operations, the page
tree consistency checks, and the first-run bootstrap.
"""

from .bootstrap import DEFAULT_APP_NAME, ensure_welcome_page, welcome_title
from .session import WorkspaceSession
from .tree import check_tree, iter_descendants

__all__ = [
    'DEFAULT_APP_NAME',
    'ensure_welcome_page',
    'welcome_title',
    'WorkspaceSession',
    'check_tree',
    'iter_descendants',
]
