# src/companion_service/infrastructure/cache/cache.py
"""
Cache abstraction layer with Redis and in-memory implementations.

Provides a unified interface for caching JSON payloads with automatic
fallback to an in-memory cache when Redis is unavailable.
"""

import json
import re
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from threading import Lock
from typing import Any, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from companion_service.infrastructure.cache.redis import RedisManager
from companion_service.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

# Characters with special meaning in Redis glob patterns
_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


class ICache(ABC):
    """Abstract cache interface."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Cached value, or None if missing or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store ``value`` for ``ttl`` seconds (None = no expiration)."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete one key. True if it existed."""

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix``. Returns the number removed."""


class RedisCache(ICache):
    """
    Redis-based cache implementation.

    Values are stored as JSON strings under ``namespace:key``.

    Example:
        >>> cache = RedisCache(manager, namespace="companion_service")
        >>> await cache.set("page:/companions|page=1", {"items": []}, ttl=60)
    """

    def __init__(self, manager: RedisManager, namespace: str = ""):
        self.manager = manager
        self.namespace = namespace

    def _redis(self) -> Redis | None:
        return self.manager.get_client()

    def _make_key(self, key: str) -> str:
        if self.namespace:
            return f"{self.namespace}:{key}"
        return key

    async def get(self, key: str) -> Any | None:
        redis = self._redis()
        if not redis:
            return None

        try:
            value = await redis.get(self._make_key(key))
        except RedisError as e:
            logger.error("Redis get error", key=key, error=str(e))
            return None

        if value is None:
            return None
        try:
            return json.loads(value)
        except ValueError as e:
            logger.error("Failed to deserialize cached value", key=key, error=str(e))
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        redis = self._redis()
        if not redis:
            return False

        try:
            serialized = json.dumps(value)
            if ttl is not None:
                await redis.setex(self._make_key(key), ttl, serialized)
            else:
                await redis.set(self._make_key(key), serialized)
            return True
        except RedisError as e:
            logger.error("Redis set error", key=key, error=str(e))
            return False

    async def delete(self, key: str) -> bool:
        redis = self._redis()
        if not redis:
            return False

        try:
            return await redis.delete(self._make_key(key)) > 0
        except RedisError as e:
            logger.error("Redis delete error", key=key, error=str(e))
            return False

    async def delete_prefix(self, prefix: str) -> int:
        pattern = _GLOB_SPECIAL.sub(r"\\\1", self._make_key(prefix)) + "*"
        return await self.manager.delete_by_pattern(pattern)


class InMemoryCache(ICache):
    """
    In-memory cache implementation with LRU eviction.

    Fallback cache when Redis is unavailable.

    Limitations:
    - Not distributed (single process only)
    - Data lost on restart

    Example:
        >>> cache = InMemoryCache(max_size=1000)
        >>> await cache.set("page:/companions|page=1", {"items": []}, ttl=60)
    """

    def __init__(self, max_size: int = 10000, namespace: str = ""):
        self.max_size = max_size
        self.namespace = namespace
        self._cache: OrderedDict[str, tuple[Any, Optional[float]]] = OrderedDict()
        self._lock = Lock()

    def _make_key(self, key: str) -> str:
        if self.namespace:
            return f"{self.namespace}:{key}"
        return key

    def _is_expired(self, expiry: Optional[float]) -> bool:
        return expiry is not None and time.time() > expiry

    def _evict_if_needed(self) -> None:
        if len(self._cache) >= self.max_size:
            self._cache.popitem(last=False)

    async def get(self, key: str) -> Any | None:
        namespaced_key = self._make_key(key)

        with self._lock:
            if namespaced_key not in self._cache:
                return None

            value, expiry = self._cache[namespaced_key]
            if self._is_expired(expiry):
                del self._cache[namespaced_key]
                return None

            self._cache.move_to_end(namespaced_key)
            return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        namespaced_key = self._make_key(key)
        expiry = time.time() + ttl if ttl is not None else None

        with self._lock:
            if namespaced_key in self._cache:
                del self._cache[namespaced_key]
            self._evict_if_needed()
            self._cache[namespaced_key] = (value, expiry)

        return True

    async def delete(self, key: str) -> bool:
        namespaced_key = self._make_key(key)

        with self._lock:
            return self._cache.pop(namespaced_key, None) is not None

    async def delete_prefix(self, prefix: str) -> int:
        namespaced_prefix = self._make_key(prefix)

        with self._lock:
            doomed = [key for key in self._cache if key.startswith(namespaced_prefix)]
            for key in doomed:
                del self._cache[key]
            return len(doomed)

    def size(self) -> int:
        with self._lock:
            return len(self._cache)


def build_cache(manager: RedisManager | None, namespace: str = "") -> ICache:
    """
    Pick the cache backend.

    Returns Redis cache if the manager has a live connection, otherwise an
    in-memory cache.
    """
    if manager is not None and manager.is_available:
        logger.debug("Using Redis cache", namespace=namespace)
        return RedisCache(manager, namespace=namespace)

    logger.info("Redis unavailable, using in-memory cache", namespace=namespace)
    return InMemoryCache(namespace=namespace)
