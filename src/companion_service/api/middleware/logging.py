"""
Request logging middleware with structured logging.

Logs method, path, status code and duration for every request except
health checks.
"""
import time
from typing import Set

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from companion_service.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


# Health check paths to skip logging (reduce noise)
HEALTH_CHECK_PATHS: Set[str] = {
    "/health",
    "/health/ready",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for structured request/response logging.

    Features:
    - Logs request method, path, status code, and duration
    - Skips logging for health check endpoints
    - Adds timing to response headers
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in HEALTH_CHECK_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        log_context = {
            "method": request.method,
            "path": request.url.path,
            "query_params": str(request.query_params) if request.query_params else None,
            "client_ip": request.client.host if request.client else None,
        }

        logger.info("Request received", **log_context)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed with exception",
                **log_context,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        response_context = {
            **log_context,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }

        if response.status_code >= 500:
            logger.error("Request completed with error", **response_context)
        elif response.status_code >= 400:
            logger.warning("Request completed with client error", **response_context)
        else:
            logger.info("Request completed", **response_context)

        response.headers["X-Process-Time-Ms"] = str(duration_ms)
        return response
