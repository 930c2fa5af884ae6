# src/companion_service/api/app.py
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from companion_service.api import v1
from companion_service.api.middleware.errors import register_error_handlers
from companion_service.api.middleware.logging import RequestLoggingMiddleware
from companion_service.api.middleware.request_id import RequestIDMiddleware
from companion_service.api.routes import health
from companion_service.auth.providers import create_identity_provider
from companion_service.config.settings import get_settings
from companion_service.infrastructure.cache.cache import build_cache
from companion_service.infrastructure.cache.invalidation import PageCache
from companion_service.infrastructure.cache.redis import RedisManager
from companion_service.infrastructure.database.connection import DatabaseManager
from companion_service.infrastructure.observability.error_tracking import init_sentry
from companion_service.infrastructure.observability.logging import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings = get_settings()

    init_sentry(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment or settings.environment,
        release=settings.app_version,
        sample_rate=settings.sentry_sample_rate,
        traces_sample_rate=settings.sentry_traces_sample_rate,
    )

    # Database connection pool
    database = DatabaseManager()
    if settings.database_url:
        await database.connect(
            url=settings.database_url.get_secret_value(),
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
            echo_sql=settings.db_echo_sql,
        )
    else:
        logger.warning("Database not configured - companion endpoints will return 503")
    app.state.db = database

    # Page cache: Redis when reachable, in-process memory otherwise
    redis_manager = RedisManager()
    await redis_manager.initialize(
        settings.redis_url.get_secret_value() if settings.redis_url else None
    )
    app.state.redis = redis_manager
    app.state.page_cache = PageCache(
        build_cache(redis_manager, namespace=settings.cache_key_prefix),
        default_ttl=settings.cache_default_ttl,
    )

    app.state.identity_provider = create_identity_provider(settings)

    logger.info("Application started", environment=settings.environment, version=settings.app_version)

    yield

    await redis_manager.close()
    await database.disconnect()

    # Flush Sentry events before shutdown
    sentry_sdk.flush(timeout=5.0)


def create_app() -> FastAPI:
    """
    Application factory.

    Register new versioned routers in api/v1/router.py.
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
# Companion Service API

Backend for configurable AI tutor "companions".

## Features

- **Library**: search companions by subject and topic, paginated
- **Authoring**: create companions within the limits of your plan
- **Bookmarks**: keep a personal list of favorite companions
- **Sessions**: record finished voice sessions and review your history
- **Voice**: get the assistant configuration to start a session

## Authentication

Send the session token issued by the identity provider:

```
Authorization: Bearer <session-token>
```

Library reads are public; authoring, history and "me" endpoints require a token.
        """,
        docs_url="/docs" if settings.debug else None,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Health", "description": "Liveness and readiness probes."},
            {"name": "Companions", "description": "Companion library, authoring, bookmarks and sessions."},
            {"name": "Sessions", "description": "Recent sessions across all users."},
            {"name": "Me", "description": "The signed-in user's companions, bookmarks and journey."},
            {"name": "Subjects", "description": "Subject catalog for filtering."},
        ],
    )

    # Middleware (added in reverse order of execution)
    # Request ID should be first so it's available to all other middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=settings.cors_allow_credentials,
            allow_methods=["GET", "POST", "DELETE"],
            allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
            expose_headers=["X-Request-ID"],
        )

    register_error_handlers(app)

    # Health routes (no versioning - kept at root level)
    app.include_router(health.router, tags=["Health"])

    # All versioned routes are under /api/v1
    app.include_router(v1.router, prefix="/api/v1")

    return app
