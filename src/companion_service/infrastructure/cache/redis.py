# src/companion_service/infrastructure/cache/redis.py
"""
Redis connection manager for the page cache.

Provides an async Redis connection pool with health checks and graceful
fallback: when Redis is not configured or unreachable the service keeps
running on the in-process cache.
"""
from typing import Optional, List

from redis.asyncio import Redis, ConnectionPool
from redis.exceptions import RedisError

from companion_service.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class RedisManager:
    """
    Redis connection manager with async connection pool.

    One instance is created at startup and stored on ``app.state``.
    """

    def __init__(self):
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None
        self._is_available: bool = False

    async def initialize(self, redis_url: Optional[str]) -> None:
        """
        Initialize Redis connection pool.

        Logs errors but doesn't raise, so the application can start with
        the in-memory cache instead.
        """
        if not redis_url:
            logger.warning("Redis URL not configured - using in-memory cache")
            self._is_available = False
            return

        try:
            self._pool = ConnectionPool.from_url(
                redis_url,
                decode_responses=True,
                max_connections=10,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            self._client = Redis(connection_pool=self._pool)

            await self._client.ping()
            self._is_available = True
            logger.info("Redis connection established successfully")

        except (RedisError, OSError) as e:
            logger.error("Failed to connect to Redis", error=str(e))
            logger.warning("Continuing without Redis - using in-memory cache")
            self._is_available = False
            self._client = None
            self._pool = None

    async def close(self) -> None:
        """Close Redis connection and cleanup resources."""
        if self._client:
            try:
                await self._client.aclose()
                logger.info("Redis connection closed")
            except RedisError as e:
                logger.error("Error closing Redis connection", error=str(e))

        if self._pool:
            try:
                await self._pool.aclose()
            except RedisError as e:
                logger.error("Error closing Redis connection pool", error=str(e))

        self._client = None
        self._pool = None
        self._is_available = False

    async def health_check(self) -> bool:
        """
        Ping Redis.

        Returns:
            True if Redis is available and responding, False otherwise
        """
        if not self._is_available or not self._client:
            return False

        try:
            await self._client.ping()
            return True
        except (RedisError, OSError) as e:
            logger.error("Redis health check failed", error=str(e))
            return False

    def get_client(self) -> Optional[Redis]:
        """Redis client if available, None otherwise."""
        return self._client if self._is_available else None

    @property
    def is_available(self) -> bool:
        return self._is_available

    async def scan_keys(self, pattern: str, count: int = 100) -> List[str]:
        """
        Collect keys matching a glob pattern using SCAN.

        Example:
            >>> keys = await manager.scan_keys("companion_service:page:/companions|*")
        """
        if not self._is_available or not self._client:
            return []

        keys: List[str] = []
        async for key in self._client.scan_iter(match=pattern, count=count):
            keys.append(key)
        return keys

    async def delete_by_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching a pattern.

        Returns:
            Number of keys deleted
        """
        if not self._is_available or not self._client:
            return 0

        try:
            keys = await self.scan_keys(pattern)
            if keys:
                return await self._client.delete(*keys)
            return 0
        except RedisError as e:
            logger.error("Redis delete_by_pattern error", pattern=pattern, error=str(e))
            return 0
