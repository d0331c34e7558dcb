"""Device reputation rules."""

from datetime import datetime

from ..config import FraudConfig
from ..models import DecisionHint, TransactionEvent
from ..provider import FraudDataProvider
from .base import DataDependentRule


class FlaggedDeviceRule(DataDependentRule):
    rule_id = "FLAGGED_DEVICE"
    description = "Flags transactions made from devices with a bad reputation."
    category = "device"
    default_threshold = 1.0
    default_score_impact = 40.0
    default_decision_hint = DecisionHint.FLAG

    async def is_triggered(
        self,
        event: TransactionEvent,
        provider: FraudDataProvider,
        config: FraudConfig,
        now: datetime,
    ) -> bool:
        if not event.device_id:
            return False
        reputation = await provider.device_reputation(event.device_id)
        return reputation is not None and reputation.is_blacklisted
