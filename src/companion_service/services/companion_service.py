"""
Companion query and access layer.

High-level operations behind every companion view:
- Library search with the four-way subject/topic filter and pagination
- Companion creation and the per-plan creation quota
- Bookmarks, always scoped to the caller
- Session history and the "my journey" summary

Operations that change what a cached view shows end with
``invalidate(path)`` on the page cache, after the transaction commits.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from companion_service.auth.schemas import Identity
from companion_service.domain.entitlements import CreationQuota, is_within_cap, resolve_companion_cap
from companion_service.domain.exceptions import AuthError, InvalidParameter, StoreError
from companion_service.domain.filters import build_companion_filter
from companion_service.infrastructure.database.models import Companion, SessionHistoryEntry
from companion_service.infrastructure.database.repositories import (
    BookmarkRepository,
    CompanionRepository,
    PaginatedResult,
    SessionHistoryRepository,
    transaction,
    transactional,
)
from companion_service.infrastructure.observability.context import log_context
from companion_service.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

# Fields a caller may set; ``author`` always comes from the identity.
COMPANION_FIELDS = ("name", "subject", "topic", "voice", "style", "duration")

LIBRARY_PATH = "/companions"


class Invalidator(Protocol):
    async def invalidate(self, path: str) -> Any: ...


@dataclass
class UserJourney:
    """Everything the "my journey" page shows for one user."""

    companions: Sequence[Companion] = field(default_factory=list)
    sessions: Sequence[Companion] = field(default_factory=list)
    bookmarks: Sequence[Companion] = field(default_factory=list)
    companions_created: int = 0
    lessons_completed: int = 0


class CompanionService:
    """
    Service for companion reads and guarded writes.

    One instance per request, bound to the request's session.

    Example:
        >>> service = CompanionService(session, invalidator=page_cache)
        >>> page = await service.get_all_companions(subject="math", page=1, limit=10)
        >>> if await service.can_create_companion(identity):
        ...     companion = await service.create_companion(form, identity)
    """

    def __init__(self, session: AsyncSession, invalidator: Optional[Invalidator] = None):
        self.session = session
        self.invalidator = invalidator
        self.companions = CompanionRepository(session)
        self.history = SessionHistoryRepository(session)
        self.bookmarks = BookmarkRepository(session)

    async def _invalidate(self, path: str) -> None:
        if self.invalidator is not None and path:
            await self.invalidator.invalidate(path)

    # ------------------------------------------------------------------
    # Companions
    # ------------------------------------------------------------------

    async def create_companion(self, data: Mapping[str, Any], identity: Optional[Identity]) -> Companion:
        """
        Create a companion authored by the caller.

        Args:
            data: name, subject, topic, voice, style, duration; other keys
                (including any ``author``) are ignored
            identity: Resolved caller

        Returns:
            The stored companion with its generated id

        Raises:
            AuthError: If there is no identity
            StoreError: If the store rejects the insert
        """
        if identity is None:
            raise AuthError()

        values = {name: data[name] for name in COMPANION_FIELDS}
        values["duration"] = int(values["duration"])

        with log_context(user_id=identity.user_id, operation="create_companion"):
            async with transaction(self.session, "create_companion"):
                companion = await self.companions.create(Companion(**values, author=identity.user_id))

            logger.info("Companion created", companion_id=str(companion.id), subject=companion.subject)

        await self._invalidate(LIBRARY_PATH)
        return companion

    async def get_companion(self, companion_id: UUID) -> Optional[Companion]:
        """
        Fetch one companion.

        A store failure is logged and reported as "no record"; this is the
        only read that does not propagate StoreError.
        """
        try:
            return await self.companions.get(companion_id)
        except StoreError as e:
            logger.error("Companion lookup failed", companion_id=str(companion_id), error=e.message)
            return None

    async def get_all_companions(
        self,
        subject: Optional[str] = None,
        topic: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> PaginatedResult:
        """
        Search the companion library.

        Subject matches the subject column; topic matches the topic or the
        name. Both are case-insensitive substring matches and combine with
        AND when both are given.

        Raises:
            InvalidParameter: If page or limit is below 1
            StoreError: If the query fails
        """
        if page < 1:
            raise InvalidParameter("page must be at least 1", details={"page": page})
        if limit < 1:
            raise InvalidParameter("limit must be at least 1", details={"limit": limit})

        search = build_companion_filter(subject=subject, topic=topic)
        logger.debug("Searching companions", filter=type(search).__name__, page=page, limit=limit)
        return await self.companions.search(search, page=page, page_size=limit)

    async def get_user_companions(self, user_id: str) -> Sequence[Companion]:
        """Companions authored by ``user_id``, newest first."""
        return await self.companions.list_by_author(user_id)

    # ------------------------------------------------------------------
    # Creation quota
    # ------------------------------------------------------------------

    async def get_creation_quota(self, identity: Optional[Identity]) -> CreationQuota:
        """
        Work out whether the caller may author another companion.

        The pro plan is unlimited and skips counting. Otherwise the first
        matching limit feature sets the cap (0 without one) and the caller
        is allowed while their authored count is below it.

        This check and the later insert are separate statements, so two
        concurrent requests can both pass and overshoot the cap by one.
        """
        if identity is None:
            return CreationQuota(allowed=False, limit=0, used=0)

        cap = resolve_companion_cap(identity.has_entitlement)
        if cap is None:
            return CreationQuota(allowed=True, limit=None, used=None)

        used = await self.companions.count_by_author(identity.user_id)
        return CreationQuota(allowed=is_within_cap(cap, used), limit=cap, used=used)

    async def can_create_companion(self, identity: Optional[Identity]) -> bool:
        quota = await self.get_creation_quota(identity)
        return quota.allowed

    # ------------------------------------------------------------------
    # Bookmarks
    # ------------------------------------------------------------------

    async def add_bookmark(self, companion_id: UUID, path: str, identity: Optional[Identity]) -> None:
        """
        Bookmark a companion for the caller, then invalidate ``path``.

        Without an identity this does nothing.
        """
        if identity is None:
            return

        with log_context(user_id=identity.user_id, companion_id=str(companion_id)):
            async with transaction(self.session, "add_bookmark"):
                await self.bookmarks.add(companion_id, identity.user_id)
            logger.info("Bookmark added")

        await self._invalidate(path)

    async def remove_bookmark(self, companion_id: UUID, path: str, identity: Optional[Identity]) -> None:
        """
        Remove the caller's bookmark of a companion, then invalidate ``path``.

        Only rows owned by the caller are deleted. Without an identity this
        does nothing.
        """
        if identity is None:
            return

        with log_context(user_id=identity.user_id, companion_id=str(companion_id)):
            async with transaction(self.session, "remove_bookmark"):
                removed = await self.bookmarks.remove(companion_id, identity.user_id)
            logger.info("Bookmark removed", removed=removed)

        await self._invalidate(path)

    async def get_bookmarked_companions(self, user_id: str) -> Sequence[Companion]:
        return await self.bookmarks.list_companions(user_id)

    # ------------------------------------------------------------------
    # Session history
    # ------------------------------------------------------------------

    @transactional
    async def add_to_session_history(
        self, companion_id: UUID, identity: Optional[Identity]
    ) -> SessionHistoryEntry:
        """
        Record a finished session with a companion.

        Raises:
            AuthError: If there is no identity
        """
        if identity is None:
            raise AuthError()

        entry = await self.history.append(companion_id, identity.user_id)
        logger.info("Session recorded", user_id=identity.user_id, companion_id=str(companion_id))
        return entry

    async def get_recent_sessions(self, limit: int = 10) -> Sequence[Companion]:
        """Companions from the latest sessions of all users, newest first."""
        if limit < 1:
            raise InvalidParameter("limit must be at least 1", details={"limit": limit})
        return await self.history.list_recent(limit=limit)

    async def get_user_sessions(self, user_id: str, limit: int = 10) -> Sequence[Companion]:
        """Companions from ``user_id``'s latest sessions, newest first."""
        if limit < 1:
            raise InvalidParameter("limit must be at least 1", details={"limit": limit})
        return await self.history.list_recent(user_id=user_id, limit=limit)

    async def get_user_journey(self, user_id: str, limit: int = 10) -> UserJourney:
        companions = await self.get_user_companions(user_id)
        return UserJourney(
            companions=companions,
            sessions=await self.get_user_sessions(user_id, limit=limit),
            bookmarks=await self.get_bookmarked_companions(user_id),
            companions_created=len(companions),
            lessons_completed=await self.history.count_by_user(user_id),
        )
