# tests/conftest.py
"""
Main pytest configuration and shared fixtures for all tests.

This module provides:
- Async test support (pytest-asyncio auto mode, see pyproject.toml)
- SQLite in-memory database per test with all tables created
- FastAPI app wired with the test database and an in-memory page cache
- Async HTTP client over ASGITransport
- Identity fixtures for every entitlement tier, and ``login`` to switch
  the identity the app sees
"""

import os
from typing import AsyncGenerator, Callable, Optional

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# Quiet logs and make sure no real backends are picked up from a local .env
os.environ.setdefault("LOG_LEVEL", "40")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ["AUTH_PROVIDER"] = "none"

from companion_service.api.app import create_app  # noqa: E402
from companion_service.auth.dependencies import get_optional_identity  # noqa: E402
from companion_service.auth.providers import AnonymousIdentityProvider  # noqa: E402
from companion_service.auth.schemas import Identity  # noqa: E402
from companion_service.config.settings import get_settings  # noqa: E402
from companion_service.infrastructure.cache.cache import InMemoryCache  # noqa: E402
from companion_service.infrastructure.cache.invalidation import PageCache  # noqa: E402
from companion_service.infrastructure.database.connection import DatabaseManager  # noqa: E402

# Register tables on SQLModel.metadata
import companion_service.infrastructure.database.models  # noqa: E402,F401


@pytest.fixture(scope="session", autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    In-memory SQLite engine with all tables created and foreign keys enforced.

    StaticPool keeps the single in-memory connection alive for every
    session of the test, so the app and the test see the same data.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enforce_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Session for seeding and for service/repository tests.

    Usage:
        async def test_something(db_session):
            db_session.add(companion)
            await db_session.commit()
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def db_manager(test_engine: AsyncEngine) -> DatabaseManager:
    """DatabaseManager bound to the test engine."""
    manager = DatabaseManager()
    manager.bind(test_engine)
    return manager


# ============================================================================
# Cache Fixtures
# ============================================================================

@pytest.fixture
def memory_cache() -> InMemoryCache:
    return InMemoryCache(max_size=100, namespace="test")


@pytest.fixture
def page_cache(memory_cache: InMemoryCache) -> PageCache:
    return PageCache(memory_cache, default_ttl=60)


# ============================================================================
# Identity Fixtures
# ============================================================================

@pytest.fixture
def pro_identity() -> Identity:
    return Identity(user_id="user_pro", plan="pro")


@pytest.fixture
def three_limit_identity() -> Identity:
    return Identity(user_id="user_three", features=frozenset({"3_companion_limit"}))


@pytest.fixture
def ten_limit_identity() -> Identity:
    return Identity(user_id="user_ten", features=frozenset({"10_companion_limit"}))


@pytest.fixture
def free_identity() -> Identity:
    """Signed in, but with no recognized entitlement."""
    return Identity(user_id="user_free", plan="free_user")


# ============================================================================
# FastAPI Application and Client
# ============================================================================

@pytest.fixture
def app(db_manager: DatabaseManager, page_cache: PageCache) -> FastAPI:
    """
    FastAPI application wired for tests.

    ASGITransport does not run the lifespan, so the startup state is set
    here directly. Requests are anonymous until ``login`` is used.
    """
    application = create_app()
    application.state.db = db_manager
    application.state.redis = None
    application.state.page_cache = page_cache
    application.state.identity_provider = AnonymousIdentityProvider()

    current: dict[str, Optional[Identity]] = {"identity": None}
    application.state.test_identity = current
    application.dependency_overrides[get_optional_identity] = lambda: current["identity"]

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
def login(app: FastAPI) -> Callable[[Optional[Identity]], None]:
    """
    Switch the identity the app resolves for subsequent requests.

    Usage:
        async def test_create(async_client, login, pro_identity):
            login(pro_identity)
            response = await async_client.post("/api/v1/companions", json=form)
    """
    def _login(identity: Optional[Identity]) -> None:
        app.state.test_identity["identity"] = identity

    return _login


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for testing FastAPI endpoints.

    Usage:
        async def test_endpoint(async_client):
            response = await async_client.get("/api/v1/companions")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
