"""Local persistence and state migration for a personal productivity workspace.

The workspace (pages with blocks, daily tasks, calendar events, finance and
health data) is held in memory by a WorkspaceSession and persisted as a
single JSON record in a size-limited key-value store. Records written by
older versions are migrated to the current shape on load.
"""

__version__ = "0.1.0"
