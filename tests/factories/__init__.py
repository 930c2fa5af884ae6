# tests/factories/__init__.py
"""
Factory Boy factories for creating test data.

This package contains factories for generating model instances
for testing purposes using Factory Boy.
"""

from tests.factories.base import AsyncSQLModelFactory
from tests.factories.companion import BookmarkFactory, CompanionFactory, SessionHistoryFactory

__all__ = ["AsyncSQLModelFactory", "CompanionFactory", "BookmarkFactory", "SessionHistoryFactory"]
