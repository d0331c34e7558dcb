"""Service wiring shared by the API routes."""

from fraud_service.clients.transactions import HTTPTransactionAuthority
from fraud_service.config import Settings, get_settings
from fraud_service.domains.fraud.authority import TransactionAuthority
from fraud_service.domains.fraud.channels import PaymentChannelValidator
from fraud_service.domains.fraud.config import FraudConfig
from fraud_service.domains.fraud.engine import DecisionEngine
from fraud_service.domains.fraud.links import PaymentLinkValidator
from fraud_service.domains.fraud.provider import FraudDataProvider, InMemoryFraudDataProvider
from fraud_service.domains.fraud.service import FraudService

_service: FraudService | None = None


def build_fraud_service(
    settings: Settings,
    provider: FraudDataProvider | None = None,
    authority: TransactionAuthority | None = None,
    config: FraudConfig | None = None,
) -> FraudService:
    """Wire the default service graph from application settings."""
    provider = provider or InMemoryFraudDataProvider()
    authority = authority or HTTPTransactionAuthority(
        settings.transaction_service_url,
        timeout_seconds=settings.transaction_service_timeout_seconds,
    )
    engine = DecisionEngine(provider, config=config or FraudConfig.from_env())
    return FraudService(
        engine=engine,
        link_validator=PaymentLinkValidator(authority),
        channel_validator=PaymentChannelValidator(provider),
        authority=authority,
        evaluation_timeout=settings.evaluation_timeout_seconds,
        authority_timeout=settings.transaction_service_timeout_seconds,
    )


def get_fraud_service() -> FraudService:
    """Return the process-wide service, building it on first use."""
    global _service
    if _service is None:
        _service = build_fraud_service(get_settings())
    return _service


async def close_fraud_service() -> None:
    global _service
    if _service is not None:
        await _service.aclose()
        _service = None
