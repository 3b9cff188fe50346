"""Integration tests for workspace-cache.

These tests run workspace sessions against the file backend in temporary
directories, covering restarts, schema upgrades, media stripping, quota
failures and concurrent sessions.

Run only these with:
    pytest tests/integration -m integration
"""
