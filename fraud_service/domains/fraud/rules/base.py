"""Base classes for catalog rules.

A rule is either pure (a synchronous predicate over the event) or
data-dependent (an async check that reads the fraud data provider). The
engine dispatches on the variant.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Self

from ..config import FraudConfig
from ..models import DecisionHint, TransactionEvent
from ..provider import FraudDataProvider


class FraudRule(ABC):
    """Base class for all fraud rules.

    Class attributes hold the catalog defaults; constructor keywords override
    them per instance. Instances are read-only once built, use ``replace`` to
    derive a tuned or disabled copy.
    """

    rule_id: str
    description: str
    category: str  # "amount" | "origin" | "velocity" | "device"
    default_threshold: float
    default_score_impact: float
    default_decision_hint: DecisionHint = DecisionHint.NONE

    def __init__(
        self,
        *,
        threshold: float | None = None,
        score_impact: float | None = None,
        decision_hint: DecisionHint | str | None = None,
        enabled: bool = True,
    ) -> None:
        impact = self.default_score_impact if score_impact is None else score_impact
        if impact < 0:
            raise ValueError(f"score_impact for {self.rule_id} must be non-negative")
        self._threshold = self.default_threshold if threshold is None else threshold
        self._score_impact = impact
        self._decision_hint = DecisionHint(decision_hint or self.default_decision_hint)
        self._enabled = enabled

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def score_impact(self) -> float:
        return self._score_impact

    @property
    def decision_hint(self) -> DecisionHint:
        return self._decision_hint

    @property
    def enabled(self) -> bool:
        return self._enabled

    def replace(self, **changes: Any) -> Self:
        """Return a copy of this rule with the given settings changed."""
        current = {
            "threshold": self._threshold,
            "score_impact": self._score_impact,
            "decision_hint": self._decision_hint,
            "enabled": self._enabled,
        }
        current.update(changes)
        return type(self)(**current)

    def describe(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "description": self.description,
            "category": self.category,
            "kind": "data" if isinstance(self, DataDependentRule) else "pure",
            "threshold": self._threshold,
            "score_impact": self._score_impact,
            "decision_hint": self._decision_hint.value,
            "enabled": self._enabled,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(rule_id={self.rule_id!r}, "
            f"enabled={self._enabled}, score_impact={self._score_impact})"
        )


class PureRule(FraudRule):
    """Rule decided from the event alone."""

    @abstractmethod
    def predicate(self, event: TransactionEvent) -> bool:
        """Return True when the rule triggers. Missing fields mean False."""
        ...


class DataDependentRule(FraudRule):
    """Rule that needs history or reputation data from the provider."""

    @abstractmethod
    async def is_triggered(
        self,
        event: TransactionEvent,
        provider: FraudDataProvider,
        config: FraudConfig,
        now: datetime,
    ) -> bool:
        ...
