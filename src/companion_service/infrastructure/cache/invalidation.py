# src/companion_service/infrastructure/cache/invalidation.py
"""
Page cache for listing views and its invalidation signal.

Listing payloads are cached per view path and query string:

    page:/companions|limit=10&page=1

``invalidate(path)`` drops every query-string variant of one view, which
is what mutations call after they change something the view shows.
"""

from typing import Any, Optional

from companion_service.infrastructure.cache.cache import ICache
from companion_service.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

PAGE_KEY_PREFIX = "page:"


class PageCache:
    """
    Read-through cache for rendered listing payloads.

    Example:
        >>> pages = PageCache(InMemoryCache(), default_ttl=60)
        >>> await pages.set("/companions", "page=1", {"items": []})
        >>> await pages.invalidate("/companions")
    """

    def __init__(self, cache: ICache, default_ttl: int = 60):
        self.cache = cache
        self.default_ttl = default_ttl

    @staticmethod
    def _view_prefix(path: str) -> str:
        return f"{PAGE_KEY_PREFIX}{path}|"

    def key(self, path: str, query: str = "") -> str:
        return f"{self._view_prefix(path)}{query}"

    async def get(self, path: str, query: str = "") -> Optional[Any]:
        return await self.cache.get(self.key(path, query))

    async def set(self, path: str, query: str, payload: Any, ttl: Optional[int] = None) -> bool:
        return await self.cache.set(self.key(path, query), payload, ttl=ttl or self.default_ttl)

    async def invalidate(self, path: str) -> int:
        """
        Drop every cached variant of the view at ``path``.

        Returns:
            Number of cache entries removed
        """
        removed = await self.cache.delete_prefix(self._view_prefix(path))
        logger.debug("Page cache invalidated", path=path, removed=removed)
        return removed
