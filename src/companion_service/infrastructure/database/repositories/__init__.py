"""Database repository implementations."""
from .base import BaseRepository, PaginatedResult, store_errors, transaction, transactional
from .companion import CompanionRepository
from .session_history import SessionHistoryRepository
from .bookmark import BookmarkRepository

__all__ = [
    "BaseRepository",
    "PaginatedResult",
    "store_errors",
    "transaction",
    "transactional",
    "CompanionRepository",
    "SessionHistoryRepository",
    "BookmarkRepository",
]
