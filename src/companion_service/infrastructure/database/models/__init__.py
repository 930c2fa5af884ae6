"""
Database models for the companion service.

This package contains all SQLModel tables used in the application.
"""

from .companion import Companion
from .session_history import SessionHistoryEntry
from .bookmark import Bookmark

__all__ = [
    "Companion",
    "SessionHistoryEntry",
    "Bookmark",
]
