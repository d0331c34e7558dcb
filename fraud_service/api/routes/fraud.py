"""Fraud check endpoints: transactions, payment links, payment channels."""

import structlog
from fastapi import APIRouter, Depends

from fraud_service.api.deps import get_fraud_service
from fraud_service.api.middleware.rate_limit import enforce_rate_limit
from fraud_service.domains.fraud.models import (
    PaymentChannelEvent,
    PaymentLinkEvent,
    TransactionEvent,
)
from fraud_service.domains.fraud.service import FraudService

logger = structlog.get_logger()
router = APIRouter(
    prefix="/fraud",
    tags=["fraud"],
    dependencies=[Depends(enforce_rate_limit)],
)


@router.post("/check-transaction")
async def check_transaction(
    event: TransactionEvent,
    service: FraudService = Depends(get_fraud_service),  # noqa: B008
) -> dict:
    decision = await service.check_transaction(event)
    return decision.model_dump(mode="json")


@router.post("/track-payment-link")
async def track_payment_link(
    event: PaymentLinkEvent,
    service: FraudService = Depends(get_fraud_service),  # noqa: B008
) -> dict:
    result = await service.track_payment_link(event)
    return result.model_dump()


@router.post("/validate-payment-channel")
async def validate_payment_channel(
    event: PaymentChannelEvent,
    service: FraudService = Depends(get_fraud_service),  # noqa: B008
) -> dict:
    result = await service.validate_payment_channel(event)
    return result.model_dump()


@router.get("/transactions/{reference}")
async def get_transaction_details(
    reference: str,
    service: FraudService = Depends(get_fraud_service),  # noqa: B008
) -> dict:
    transaction = await service.get_transaction_details(reference)
    return transaction.model_dump(mode="json")


@router.get("/rules")
async def list_rules(
    service: FraudService = Depends(get_fraud_service),  # noqa: B008
) -> dict:
    """Return the rule catalog with thresholds, weights and decision hints."""
    return service.list_rules()
