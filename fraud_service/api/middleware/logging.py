"""Access logging with request correlation and caller context."""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

# Set on request.state by the auth and rate-limit dependencies.
_CALLER_FIELDS = ("auth", "client_key", "rate_limited")


def _caller_context(request: Request) -> dict:
    state = request.state
    return {
        field: getattr(state, field) for field in _CALLER_FIELDS if hasattr(state, field)
    }


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one ``http_request`` event per request.

    The request id comes from ``X-Request-ID`` when the caller supplies one
    and is echoed on the response. Server errors log at error level and
    client errors at warning.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.perf_counter()
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)
        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

        if response.status_code >= 500:
            log = logger.error
        elif response.status_code >= 400:
            log = logger.warning
        else:
            log = logger.info

        log(
            "http_request",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            client_ip=request.client.host if request.client else None,
            **_caller_context(request),
        )

        response.headers["X-Request-ID"] = request_id
        return response
