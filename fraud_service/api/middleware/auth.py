"""API key authentication for the /fraud routes."""

import hmac

import structlog
from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from fraud_service.config import Settings, get_settings

logger = structlog.get_logger()

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def _reject(request: Request, outcome: str, detail: str) -> HTTPException:
    request.state.auth = outcome
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def require_api_key(
    request: Request,
    api_key: str | None = Security(api_key_header),
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> str:
    """Dependency that requires the configured API key.

    An unconfigured server key rejects every request. The outcome is left on
    ``request.state.auth`` for the access log.
    """
    if not api_key:
        raise _reject(request, "missing", "API key missing")

    if not settings.api_key or not hmac.compare_digest(
        api_key.encode(), settings.api_key.encode()
    ):
        logger.warning("invalid_api_key")
        raise _reject(request, "invalid", "Invalid API key")

    request.state.auth = "accepted"
    return api_key
