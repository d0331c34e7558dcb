"""Health and readiness endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from fraud_service.api.deps import get_fraud_service
from fraud_service.config import settings
from fraud_service.domains.fraud.service import FraudService

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    from fraud_service.main import get_uptime

    return {
        "status": "healthy",
        "version": settings.app_version,
        "uptime_seconds": get_uptime(),
    }


@router.get("/ready")
async def ready(
    service: FraudService = Depends(get_fraud_service),  # noqa: B008
) -> JSONResponse:
    authority_ok = await service.authority.ping()
    return JSONResponse(
        status_code=200 if authority_ok else 503,
        content={
            "status": "ready" if authority_ok else "degraded",
            "transaction_authority": authority_ok,
        },
    )
