"""Fraud rule catalog.

Exports DEFAULT_RULES (the catalog in evaluation order) and the individual
rule classes for direct use. Order matters: it decides which deny rule fires
first and the order reasons are reported in.
"""

from .amount import HighAmountTransactionRule
from .base import DataDependentRule, FraudRule, PureRule
from .device import FlaggedDeviceRule
from .origin import SuspiciousIPOriginRule
from .velocity import HighVelocityCustomerRule

DEFAULT_RULES: tuple[FraudRule, ...] = (
    HighAmountTransactionRule(),
    SuspiciousIPOriginRule(),
    HighVelocityCustomerRule(),
    FlaggedDeviceRule(),
)


def default_rules() -> tuple[FraudRule, ...]:
    return DEFAULT_RULES


__all__ = [
    "DEFAULT_RULES",
    "DataDependentRule",
    "FraudRule",
    "PureRule",
    "default_rules",
    "FlaggedDeviceRule",
    "HighAmountTransactionRule",
    "HighVelocityCustomerRule",
    "SuspiciousIPOriginRule",
]
