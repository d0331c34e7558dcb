"""Fraud service orchestration: engine, link and channel checks."""

import structlog

from .authority import TransactionAuthority
from .channels import PaymentChannelValidator
from .engine import DecisionEngine
from .links import PaymentLinkValidator
from .models import (
    AuthoritativeTransaction,
    ChannelValidationResult,
    FraudDecision,
    LinkValidationResult,
    PaymentChannelEvent,
    PaymentLinkEvent,
    TransactionEvent,
)

logger = structlog.get_logger()


class FraudService:
    """Entry point used by the HTTP layer.

    Applies the configured deadlines and leaves error mapping to the caller.
    """

    def __init__(
        self,
        engine: DecisionEngine,
        link_validator: PaymentLinkValidator,
        channel_validator: PaymentChannelValidator,
        authority: TransactionAuthority,
        evaluation_timeout: float | None = None,
        authority_timeout: float | None = None,
    ) -> None:
        self._engine = engine
        self._link_validator = link_validator
        self._channel_validator = channel_validator
        self._authority = authority
        self._evaluation_timeout = evaluation_timeout
        self._authority_timeout = authority_timeout

    @property
    def engine(self) -> DecisionEngine:
        return self._engine

    @property
    def authority(self) -> TransactionAuthority:
        return self._authority

    async def check_transaction(self, event: TransactionEvent) -> FraudDecision:
        return await self._engine.evaluate(event, timeout=self._evaluation_timeout)

    async def track_payment_link(self, event: PaymentLinkEvent) -> LinkValidationResult:
        if not event.url:
            return LinkValidationResult(
                is_suspicious=True, reason="Invalid or missing URL in link data"
            )
        return await self._link_validator.validate_link(
            event.url, timeout=self._authority_timeout
        )

    async def validate_payment_channel(
        self, event: PaymentChannelEvent
    ) -> ChannelValidationResult:
        return await self._channel_validator.validate_channel(event)

    async def get_transaction_details(self, reference: str) -> AuthoritativeTransaction:
        transaction = await self._authority.get_transaction(reference)
        logger.info("transaction_details_fetched", reference=reference)
        return transaction

    def list_rules(self) -> dict:
        """Return current rule configuration and score thresholds."""
        scoring = self._engine.config.scoring
        return {
            "rule_count": len(self._engine.rules),
            "rules": [rule.describe() for rule in self._engine.rules],
            "score_thresholds": {
                "medium": scoring.medium_risk_threshold,
                "high": scoring.high_risk_threshold,
            },
            "velocity_lookback_hours": self._engine.config.velocity.lookback_hours,
        }

    async def aclose(self) -> None:
        await self._authority.aclose()
