# src/companion_service/api/dependencies.py
from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from companion_service.auth.dependencies import get_current_identity, get_optional_identity
from companion_service.auth.schemas import Identity
from companion_service.config.settings import Settings, get_settings
from companion_service.domain.exceptions import InvalidParameter, ServiceUnavailable
from companion_service.infrastructure.cache.invalidation import PageCache
from companion_service.infrastructure.database.connection import DatabaseManager
from companion_service.services.companion_service import CompanionService

AppSettings = Annotated[Settings, Depends(get_settings)]


def get_database(request: Request) -> DatabaseManager:
    """The DatabaseManager created at startup."""
    database: Optional[DatabaseManager] = getattr(request.app.state, "db", None)
    if database is None or not database.is_connected:
        raise ServiceUnavailable("Database not configured")
    return database


async def get_db_session(
    database: DatabaseManager = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """One session per request; committed on success, rolled back on error."""
    async with database.session() as session:
        yield session


def get_page_cache(request: Request) -> PageCache:
    return request.app.state.page_cache


def get_companion_service(
    session: AsyncSession = Depends(get_db_session),
    pages: PageCache = Depends(get_page_cache),
) -> CompanionService:
    return CompanionService(session, invalidator=pages)


def _bounded(limit: Optional[int], default: int, maximum: int) -> int:
    if limit is None:
        return default
    if limit > maximum:
        raise InvalidParameter(
            f"limit must be at most {maximum}",
            details={"limit": limit, "max_page_size": maximum},
        )
    return limit


def get_page_size(
    settings: AppSettings,
    limit: Optional[int] = Query(None, ge=1, description="Companions per page"),
) -> int:
    """Library page size: DEFAULT_PAGE_SIZE when omitted, at most MAX_PAGE_SIZE."""
    return _bounded(limit, settings.default_page_size, settings.max_page_size)


def get_history_limit(
    settings: AppSettings,
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of sessions"),
) -> int:
    """Session listing size: SESSION_HISTORY_DEFAULT_LIMIT when omitted, at most MAX_PAGE_SIZE."""
    return _bounded(limit, settings.session_history_default_limit, settings.max_page_size)


# Type aliases for clean injection
Pages = Annotated[PageCache, Depends(get_page_cache)]
Companions = Annotated[CompanionService, Depends(get_companion_service)]
PageSize = Annotated[int, Depends(get_page_size)]
HistoryLimit = Annotated[int, Depends(get_history_limit)]
OptionalIdentity = Annotated[Optional[Identity], Depends(get_optional_identity)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
