"""Origin and IP reputation rules."""

from datetime import datetime

from ..config import FraudConfig
from ..models import DecisionHint, TransactionEvent
from ..provider import FraudDataProvider
from .base import DataDependentRule


class SuspiciousIPOriginRule(DataDependentRule):
    """Triggers for known-bad origins or addresses reported as relays.

    The threshold is binary: the rule either matches or it does not.
    """

    rule_id = "SUSPICIOUS_IP_ORIGIN"
    description = "Flags transactions originating from suspicious IP addresses."
    category = "origin"
    default_threshold = 1.0
    default_score_impact = 70.0
    default_decision_hint = DecisionHint.FLAG

    async def is_triggered(
        self,
        event: TransactionEvent,
        provider: FraudDataProvider,
        config: FraudConfig,
        now: datetime,
    ) -> bool:
        addresses = [a for a in (event.origin, event.ip_address) if a]
        if not addresses:
            return False

        if any(a in config.origin.suspicious_origins for a in addresses):
            return True

        for address in dict.fromkeys(addresses):
            reputation = await provider.ip_reputation(address)
            if reputation and (reputation.is_anonymizer or reputation.is_blacklisted):
                return True
        return False
