"""Health check endpoints for liveness and readiness probes."""
import asyncio
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel, Field

from companion_service.api.dependencies import AppSettings
from companion_service.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


# ===== Schemas =====


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""
    name: str = Field(..., description="Component name")
    status: HealthStatus = Field(..., description="Component health status")
    latency_ms: Optional[float] = Field(None, description="Response latency in milliseconds")
    details: Optional[Dict] = Field(None, description="Additional component details")
    error: Optional[str] = Field(None, description="Error message if unhealthy")


class LivenessResponse(BaseModel):
    status: str = Field("alive", description="Liveness status")
    version: str = Field(..., description="Application version")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ReadinessResponse(BaseModel):
    status: HealthStatus = Field(..., description="Overall readiness")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    components: List[ComponentHealth] = Field(default_factory=list)


# ===== Health Check Helpers =====


async def check_database_health(request: Request, timeout: float = 5.0) -> ComponentHealth:
    """Run ``SELECT 1`` through the application's DatabaseManager."""
    database = getattr(request.app.state, "db", None)
    if database is None or not database.is_connected:
        return ComponentHealth(name="database", status=HealthStatus.UNHEALTHY, error="Database not configured")

    start_time = time.perf_counter()
    try:
        healthy = await asyncio.wait_for(database.health_check(), timeout=timeout)
    except asyncio.TimeoutError:
        healthy = False

    latency_ms = round((time.perf_counter() - start_time) * 1000, 2)
    if not healthy:
        return ComponentHealth(
            name="database",
            status=HealthStatus.UNHEALTHY,
            latency_ms=latency_ms,
            error="Database check failed",
        )

    return ComponentHealth(
        name="database",
        status=HealthStatus.HEALTHY,
        latency_ms=latency_ms,
        details=database.get_pool_stats(),
    )


async def check_cache_health(request: Request) -> ComponentHealth:
    """
    Redis is optional: without it the page cache runs in memory and the
    service is degraded, not down.
    """
    manager = getattr(request.app.state, "redis", None)
    if manager is None or not manager.is_available:
        return ComponentHealth(
            name="cache",
            status=HealthStatus.DEGRADED,
            details={"backend": "memory"},
        )

    start_time = time.perf_counter()
    healthy = await manager.health_check()
    return ComponentHealth(
        name="cache",
        status=HealthStatus.HEALTHY if healthy else HealthStatus.DEGRADED,
        latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
        details={"backend": "redis"},
        error=None if healthy else "Redis ping failed",
    )


# ===== Endpoints =====


@router.get("/health", response_model=LivenessResponse)
async def health(settings: AppSettings) -> LivenessResponse:
    """Liveness probe: the process is up."""
    return LivenessResponse(version=settings.app_version)


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness(request: Request, response: Response) -> ReadinessResponse:
    """Readiness probe: 503 while the database is unreachable."""
    components = [
        await check_database_health(request),
        await check_cache_health(request),
    ]

    if any(c.status == HealthStatus.UNHEALTHY for c in components):
        overall = HealthStatus.UNHEALTHY
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Readiness check failed", components=[c.name for c in components if c.status == HealthStatus.UNHEALTHY])
    elif any(c.status == HealthStatus.DEGRADED for c in components):
        overall = HealthStatus.DEGRADED
    else:
        overall = HealthStatus.HEALTHY

    return ReadinessResponse(status=overall, components=components)
