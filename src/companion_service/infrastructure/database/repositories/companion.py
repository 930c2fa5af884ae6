# src/companion_service/infrastructure/database/repositories/companion.py
"""
Companion repository: library search, authored listings and quota counting.
"""

from typing import Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from companion_service.domain.filters import CompanionFilter, NoFilter
from companion_service.infrastructure.database.models.companion import Companion
from companion_service.infrastructure.database.repositories.base import (
    BaseRepository,
    PaginatedResult,
    store_errors,
)


class CompanionRepository(BaseRepository[Companion]):
    """
    Repository for the companion library.

    Example:
        >>> repo = CompanionRepository(session)
        >>> result = await repo.search(SubjectOnly("math"), page=1, page_size=10)
        >>> [c.name for c in result.items]
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Companion, session)

    async def search(
        self,
        search: CompanionFilter = NoFilter(),
        page: int = 1,
        page_size: int = 10,
    ) -> PaginatedResult:
        """
        Filtered, paginated library listing.

        Ordered by ``created_at`` then ``id``, both ascending, so the same
        page of an unchanged library always returns the same rows.
        """
        query = select(Companion)
        clause = search.clause(Companion)
        if clause is not None:
            query = query.where(clause)
        query = self.apply_sorting(query, "created_at", "asc")
        return await self.paginate(query, page=page, page_size=page_size)

    async def count_by_author(self, author: str) -> int:
        """Number of companions authored by ``author``."""
        query = select(func.count()).select_from(Companion).where(Companion.author == author)
        async with store_errors("Companion.count_by_author"):
            result = await self.session.execute(query)
            return result.scalar_one()

    async def list_by_author(self, author: str) -> Sequence[Companion]:
        """Companions authored by ``author``, newest first."""
        query = select(Companion).where(Companion.author == author)
        query = self.apply_sorting(query, "created_at", "desc")
        return await self.all(query)
