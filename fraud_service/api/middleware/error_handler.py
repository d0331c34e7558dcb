"""Global exception handling."""

import structlog
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fraud_service.domains.fraud.errors import (
    AuthorityUnavailable,
    DataUnavailable,
    RuleEvaluationError,
    TransactionNotFound,
)

logger = structlog.get_logger()


def _error(status_code: int, error: str, message: str, request_id: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "request_id": request_id, **extra},
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are rejected before any evaluation runs."""
    request_id = getattr(request.state, "request_id", "unknown")
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else str(first.get("msg", exc))
    logger.warning("malformed_input", request_id=request_id, error=message)
    return _error(400, "bad_request", message, request_id, details=jsonable_encoder(errors))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")

    if isinstance(exc, TransactionNotFound):
        logger.warning("not_found", request_id=request_id, error=str(exc))
        return _error(404, "not_found", str(exc), request_id)

    if isinstance(exc, AuthorityUnavailable):
        logger.warning("authority_unavailable", request_id=request_id, error=str(exc))
        return _error(502, "bad_gateway", str(exc), request_id)

    if isinstance(exc, DataUnavailable):
        logger.error("data_unavailable", request_id=request_id, error=str(exc))
        return _error(503, "data_unavailable", str(exc), request_id)

    if isinstance(exc, RuleEvaluationError):
        logger.error(
            "rule_evaluation_failed",
            request_id=request_id,
            rule_id=exc.rule_id,
            error=str(exc),
        )
        return _error(500, "rule_evaluation_error", str(exc), request_id, rule_id=exc.rule_id)

    logger.exception("unhandled_exception", request_id=request_id, error=str(exc))
    return _error(500, "internal_server_error", "An unexpected error occurred", request_id)
