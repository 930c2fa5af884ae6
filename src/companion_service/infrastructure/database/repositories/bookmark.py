# src/companion_service/infrastructure/database/repositories/bookmark.py
"""
Bookmark repository.

Removal always matches both the companion and the owning user, so one
user can never delete another user's bookmark of the same companion.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select, func, desc, delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession

from companion_service.infrastructure.database.models.bookmark import Bookmark
from companion_service.infrastructure.database.models.companion import Companion
from companion_service.infrastructure.database.repositories.base import BaseRepository, store_errors


class BookmarkRepository(BaseRepository[Bookmark]):
    """Repository for user bookmarks."""

    def __init__(self, session: AsyncSession):
        super().__init__(Bookmark, session)

    async def add(self, companion_id: UUID, user_id: str) -> Bookmark:
        return await self.create(Bookmark(companion_id=companion_id, user_id=user_id))

    async def remove(self, companion_id: UUID, user_id: str) -> int:
        """
        Delete every bookmark row of the (companion, user) pair.

        Returns:
            Number of rows deleted
        """
        stmt = sql_delete(Bookmark).where(
            Bookmark.companion_id == companion_id,
            Bookmark.user_id == user_id,
        )
        async with store_errors("Bookmark.remove"):
            result = await self.session.execute(stmt)
            await self.session.flush()
        return result.rowcount

    async def list_companions(self, user_id: str) -> Sequence[Companion]:
        """
        Companions bookmarked by ``user_id``, one entry per companion.

        Ordered by the latest bookmark of each companion, newest first.
        """
        query = (
            select(Companion)
            .join(Bookmark, Bookmark.companion_id == Companion.id)
            .where(Bookmark.user_id == user_id)
            .group_by(Companion.id)
            .order_by(desc(func.max(Bookmark.created_at)), desc(Companion.id))
        )
        async with store_errors("Bookmark.list_companions"):
            result = await self.session.execute(query)
            return result.scalars().all()

    async def exists(self, companion_id: UUID, user_id: str) -> bool:
        """Whether ``user_id`` has bookmarked ``companion_id``."""
        query = (
            select(func.count())
            .select_from(Bookmark)
            .where(Bookmark.companion_id == companion_id, Bookmark.user_id == user_id)
        )
        async with store_errors("Bookmark.exists"):
            result = await self.session.execute(query)
            return result.scalar_one() > 0
