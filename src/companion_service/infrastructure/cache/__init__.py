"""Caching implementations."""

from companion_service.infrastructure.cache.cache import (
    ICache,
    RedisCache,
    InMemoryCache,
    build_cache,
)
from companion_service.infrastructure.cache.invalidation import PageCache
from companion_service.infrastructure.cache.redis import RedisManager

__all__ = [
    "ICache",
    "RedisCache",
    "InMemoryCache",
    "build_cache",
    "PageCache",
    "RedisManager",
]
