"""Weighted rule evaluation with early-exit deny semantics."""

import asyncio
from collections.abc import Sequence
from datetime import UTC, datetime

import structlog

from .config import FraudConfig, default_config
from .errors import DataUnavailable, RuleEvaluationError
from .models import Decision, DecisionHint, FraudDecision, TransactionEvent
from .provider import FraudDataProvider
from .rules import DataDependentRule, FraudRule, PureRule, default_rules

logger = structlog.get_logger()


class DecisionEngine:
    """Evaluates transaction events against the rule catalog.

    Scoring is additive:
    1. Walk enabled rules in catalog order, adding score_impact per trigger
    2. A triggered deny rule ends the walk immediately
    3. A triggered flag rule raises the decision to flag
    4. After a full walk, overall-score thresholds may raise the decision
    """

    def __init__(
        self,
        provider: FraudDataProvider,
        rules: Sequence[FraudRule] | None = None,
        config: FraudConfig | None = None,
    ) -> None:
        self._provider = provider
        self._rules = tuple(default_rules() if rules is None else rules)
        self._config = config or default_config
        logger.info("decision_engine_initialized", rule_count=len(self._rules))

    @property
    def rules(self) -> tuple[FraudRule, ...]:
        return self._rules

    @property
    def config(self) -> FraudConfig:
        return self._config

    async def evaluate(
        self,
        event: TransactionEvent,
        now: datetime | None = None,
        timeout: float | None = None,
    ) -> FraudDecision:
        """Evaluate one event. Raises DataUnavailable or RuleEvaluationError."""
        try:
            async with asyncio.timeout(timeout):
                return await self._evaluate(event, now or datetime.now(UTC))
        except TimeoutError as exc:
            logger.warning(
                "evaluation_timed_out",
                customer_id=event.customer_id,
                timeout_seconds=timeout,
            )
            raise DataUnavailable(
                f"fraud evaluation exceeded deadline of {timeout}s"
            ) from exc

    async def _evaluate(self, event: TransactionEvent, now: datetime) -> FraudDecision:
        score = 0.0
        decision = Decision.APPROVE
        reasons: list[str] = []
        denied = False

        for rule in self._rules:
            if not rule.enabled:
                continue

            if not await self._is_triggered(rule, event, now):
                continue

            score += rule.score_impact
            reasons.append(rule.description)

            if rule.decision_hint == DecisionHint.DENY:
                decision = Decision.DENY
                denied = True
                break
            if rule.decision_hint == DecisionHint.FLAG:
                decision = Decision.FLAG

        if not denied:
            scoring = self._config.scoring
            if score >= scoring.high_risk_threshold:
                decision = Decision.DENY
            elif score >= scoring.medium_risk_threshold:
                decision = Decision.FLAG

        logger.info(
            "transaction_evaluated",
            customer_id=event.customer_id,
            overall_score=score,
            decision=decision.value,
            triggered_count=len(reasons),
            short_circuited=denied,
        )

        return FraudDecision(overall_score=score, decision=decision, reasons=tuple(reasons))

    async def _is_triggered(
        self, rule: FraudRule, event: TransactionEvent, now: datetime
    ) -> bool:
        try:
            if isinstance(rule, PureRule):
                return bool(rule.predicate(event))
            if isinstance(rule, DataDependentRule):
                return bool(
                    await rule.is_triggered(event, self._provider, self._config, now)
                )
            raise TypeError(f"unsupported rule type {type(rule).__name__}")
        except DataUnavailable:
            logger.warning("rule_data_unavailable", rule_id=rule.rule_id)
            raise
        except Exception as exc:
            logger.exception("rule_evaluation_error", rule_id=rule.rule_id)
            raise RuleEvaluationError(rule.rule_id, exc) from exc
