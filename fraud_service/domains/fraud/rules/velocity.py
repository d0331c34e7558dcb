"""Velocity-based fraud detection rules."""

from datetime import datetime, timedelta

from ..config import FraudConfig
from ..models import DecisionHint, TransactionEvent
from ..provider import FraudDataProvider
from .base import DataDependentRule


class HighVelocityCustomerRule(DataDependentRule):
    """Triggers when the customer's transaction count in the lookback window
    exceeds the threshold."""

    rule_id = "HIGH_VELOCITY_CUSTOMER"
    description = "Flags customers with unusually high transaction velocity."
    category = "velocity"
    default_threshold = 5.0
    default_score_impact = 60.0
    default_decision_hint = DecisionHint.FLAG

    async def is_triggered(
        self,
        event: TransactionEvent,
        provider: FraudDataProvider,
        config: FraudConfig,
        now: datetime,
    ) -> bool:
        if not event.customer_id:
            return False
        lookback = timedelta(hours=config.velocity.lookback_hours)
        history = await provider.transaction_history(event.customer_id, lookback, now=now)
        return len(history) > self.threshold
