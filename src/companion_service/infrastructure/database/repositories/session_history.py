# src/companion_service/infrastructure/database/repositories/session_history.py
"""
Session history repository.

History is append-only. Listings join each entry to its companion and
return the companions newest-session first; a companion talked to twice
appears twice.
"""

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from companion_service.infrastructure.database.models.companion import Companion
from companion_service.infrastructure.database.models.session_history import SessionHistoryEntry
from companion_service.infrastructure.database.repositories.base import BaseRepository, store_errors


class SessionHistoryRepository(BaseRepository[SessionHistoryEntry]):
    """Repository for completed companion sessions."""

    def __init__(self, session: AsyncSession):
        super().__init__(SessionHistoryEntry, session)

    async def append(self, companion_id: UUID, user_id: str) -> SessionHistoryEntry:
        """Record one finished session."""
        return await self.create(SessionHistoryEntry(companion_id=companion_id, user_id=user_id))

    async def list_recent(self, user_id: Optional[str] = None, limit: int = 10) -> Sequence[Companion]:
        """
        Companions from the most recent sessions.

        Args:
            user_id: Restrict to one user's sessions; all users when None
            limit: Maximum number of entries

        Returns:
            Companions ordered by session time, newest first
        """
        query = (
            select(Companion)
            .join(SessionHistoryEntry, SessionHistoryEntry.companion_id == Companion.id)
            .order_by(desc(SessionHistoryEntry.created_at), desc(SessionHistoryEntry.id))
            .limit(limit)
        )
        if user_id is not None:
            query = query.where(SessionHistoryEntry.user_id == user_id)

        async with store_errors("SessionHistoryEntry.list_recent"):
            result = await self.session.execute(query)
            # Repeated sessions map to the same identity-mapped Companion; keep every row.
            return list(result.scalars().all())

    async def count_by_user(self, user_id: str) -> int:
        """Number of sessions completed by ``user_id``."""
        query = (
            select(func.count())
            .select_from(SessionHistoryEntry)
            .where(SessionHistoryEntry.user_id == user_id)
        )
        async with store_errors("SessionHistoryEntry.count_by_user"):
            result = await self.session.execute(query)
            return result.scalar_one()
