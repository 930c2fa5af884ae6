# src/companion_service/infrastructure/database/connection.py
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Any
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine, AsyncEngine

from companion_service.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """
    Owns the async engine and session factory for one application instance.

    The manager is created during application startup and stored on
    ``app.state``; request handlers receive a fresh session per request
    through the ``get_db_session`` dependency rather than reaching for a
    module-level global.

    Usage:
        manager = DatabaseManager()
        await manager.connect(url="postgresql+asyncpg://...", pool_size=5)
        async with manager.session() as session:
            # use session
        await manager.disconnect()
    """

    def __init__(self):
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._pool_size: int = 5
        self._max_overflow: int = 10
        self._pool_timeout: int = 30
        self._pool_recycle: int = 3600

    async def connect(
        self,
        url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        echo_sql: bool = False,
    ) -> None:
        """
        Connect to the database with configurable pool settings.

        Args:
            url: Database connection URL
            pool_size: Number of connections to maintain in the pool (default: 5)
            max_overflow: Max connections beyond pool_size (default: 10)
            pool_timeout: Timeout in seconds for getting a connection (default: 30)
            pool_recycle: Recycle connections after N seconds (default: 3600 = 1 hour)
            pool_pre_ping: Enable connection health checks (default: True)
            echo_sql: Log all SQL statements (default: False)

        Raises:
            RuntimeError: If already connected
        """
        if self._engine is not None:
            raise RuntimeError("Database already connected")

        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._pool_timeout = pool_timeout
        self._pool_recycle = pool_recycle

        engine_kwargs: Dict[str, Any] = {"echo": echo_sql, "pool_pre_ping": pool_pre_ping}
        # SQLite uses a single-connection pool that rejects sizing arguments
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
            )

        self._engine = create_async_engine(url, **engine_kwargs)
        self.bind(self._engine)

        logger.info(
            "Database connected",
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
            pool_pre_ping=pool_pre_ping,
        )

    def bind(self, engine: AsyncEngine) -> None:
        """Attach an existing engine (used by tests and migrations)."""
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def disconnect(self) -> None:
        """
        Dispose of the engine and close pooled connections.

        Safe to call multiple times.
        """
        if self._engine:
            logger.info("Disconnecting from database and cleaning up connections")
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database disconnected")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session with automatic commit/rollback.

        Yields:
            AsyncSession: Database session

        Raises:
            RuntimeError: If database not connected
        """
        if not self._session_factory:
            raise RuntimeError("Database not connected. Call connect() first.")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    def get_pool_stats(self) -> Dict[str, Any]:
        """
        Get current connection pool statistics for monitoring.

        Raises:
            RuntimeError: If database not connected
        """
        if not self._engine:
            raise RuntimeError("Database not connected")

        pool = self._engine.pool
        return {
            "pool_size": self._pool_size,
            "max_overflow": self._max_overflow,
            "pool_timeout": self._pool_timeout,
            "pool_recycle": self._pool_recycle,
            "checked_in": pool.checkedin() if hasattr(pool, 'checkedin') else None,
            "checked_out": pool.checkedout() if hasattr(pool, 'checkedout') else None,
            "overflow": pool.overflow() if hasattr(pool, 'overflow') else None,
        }

    async def health_check(self) -> bool:
        """
        Perform a health check by executing a simple query.

        Returns:
            True if database is healthy, False otherwise
        """
        if not self._engine:
            return False

        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False

    @property
    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self._engine is not None
