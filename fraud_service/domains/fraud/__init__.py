"""Fraud detection domain."""

from .authority import TransactionAuthority
from .channels import PaymentChannelValidator
from .engine import DecisionEngine
from .errors import (
    AuthorityUnavailable,
    DataUnavailable,
    FraudServiceError,
    RuleEvaluationError,
    TransactionNotFound,
)
from .links import PaymentLinkValidator
from .models import (
    Decision,
    DecisionHint,
    FraudDecision,
    HistoryRecord,
    LinkValidationResult,
    Reputation,
    TransactionEvent,
)
from .provider import FraudDataProvider, InMemoryFraudDataProvider
from .rules import DEFAULT_RULES
from .service import FraudService

__all__ = [
    "DEFAULT_RULES",
    "AuthorityUnavailable",
    "DataUnavailable",
    "Decision",
    "DecisionEngine",
    "DecisionHint",
    "FraudDataProvider",
    "FraudDecision",
    "FraudService",
    "FraudServiceError",
    "HistoryRecord",
    "InMemoryFraudDataProvider",
    "LinkValidationResult",
    "PaymentChannelValidator",
    "PaymentLinkValidator",
    "Reputation",
    "RuleEvaluationError",
    "TransactionEvent",
    "TransactionAuthority",
    "TransactionNotFound",
]
