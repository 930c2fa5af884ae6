"""
Request ID middleware.

Assigns every request a UUID4 identifier (or keeps a valid one sent by the
caller in ``X-Request-ID``), exposes it to logs through a context variable
and echoes it back in the response headers.
"""
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from companion_service.infrastructure.observability.context import clear_context, set_request_id
from companion_service.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def is_valid_uuid(value: str) -> bool:
    """True if ``value`` is a canonical UUID4 string."""
    try:
        uuid_obj = uuid.UUID(value, version=4)
    except (ValueError, AttributeError):
        return False
    return str(uuid_obj) == value and uuid_obj.version == 4


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request ID tracking.

    Incoming IDs that are not UUID4 are replaced to prevent log injection.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER)

        if request_id and not is_valid_uuid(request_id):
            logger.warning(
                "Invalid X-Request-ID received, generating new one",
                client_ip=request.client.host if request.client else None,
            )
            request_id = None
        request_id = request_id or str(uuid.uuid4())

        clear_context()
        request.state.request_id = request_id
        set_request_id(request_id)

        try:
            response = await call_next(request)
        finally:
            set_request_id(None)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
