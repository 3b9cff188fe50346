"""First-run bootstrap of a workspace."""

import logging
from typing import Optional

from .session import WorkspaceSession

logger = logging.getLogger(__name__)

DEFAULT_APP_NAME = "Workspace"


def welcome_title(app_name: str = DEFAULT_APP_NAME) -> str:
    return f"Welcome to {app_name}"


def ensure_welcome_page(
    session: WorkspaceSession,
    app_name: str = DEFAULT_APP_NAME,
) -> Optional[str]:
    """Synthesize the welcome page when the workspace has no pages.

    Args:
        session: Session owning the workspace
        app_name: Application name used in the page title

    Returns:
        ID of the created welcome page, or None if pages already existed
    """
    if session.state.pages:
        logger.debug("Workspace already has pages, skipping welcome page")
        return None

    page = session.create_page(welcome_title(app_name))
    logger.info(f"Created welcome page {page.id}")
    return page.id
