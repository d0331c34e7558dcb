"""Amount-based fraud detection rules."""

from ..models import DecisionHint, TransactionEvent
from .base import PureRule


class HighAmountTransactionRule(PureRule):
    """Triggers for single transactions strictly above the threshold."""

    rule_id = "HIGH_AMOUNT_TRANSACTION"
    description = "Flags transactions with amounts exceeding a high threshold."
    category = "amount"
    default_threshold = 1000.0
    default_score_impact = 50.0
    default_decision_hint = DecisionHint.FLAG

    def predicate(self, event: TransactionEvent) -> bool:
        return event.amount > self.threshold
