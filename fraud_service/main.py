"""FastAPI application entry point for the fraud service."""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from fraud_service.api.deps import close_fraud_service
from fraud_service.api.middleware.error_handler import (
    global_exception_handler,
    validation_exception_handler,
)
from fraud_service.api.middleware.logging import StructuredLoggingMiddleware
from fraud_service.api.routes.fraud import router as fraud_router
from fraud_service.api.routes.health import router as health_router
from fraud_service.config import settings
from fraud_service.domains.fraud.errors import FraudServiceError
from fraud_service.shared.logging import setup_logging

logger = structlog.get_logger()

# Track app start time for uptime calculation
APP_START_TIME: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown logic."""
    global APP_START_TIME
    APP_START_TIME = time.time()
    setup_logging(settings.log_level, json_logs=not settings.debug)

    logger.info(
        "fraud_service_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        transaction_service_url=settings.transaction_service_url,
    )
    if not settings.api_key:
        logger.warning("api_key_not_configured")

    yield

    await close_fraud_service()
    logger.info("fraud_service_shutting_down")


app = FastAPI(
    title="Fraud Service",
    description="Rule-based fraud decisions and payment-link consistency checks",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Structured logging middleware
app.add_middleware(StructuredLoggingMiddleware)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(FraudServiceError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Register routers
app.include_router(health_router)
app.include_router(fraud_router)


def get_uptime() -> int:
    """Get application uptime in seconds."""
    if APP_START_TIME == 0.0:
        return 0
    return int(time.time() - APP_START_TIME)
