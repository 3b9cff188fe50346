"""Shared test fixtures for workspace-cache tests.

This module provides sample workspace states and raw records in older
schemas (see workspace_fixtures).
"""
