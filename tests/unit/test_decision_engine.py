"""Unit tests for the decision engine's scoring and early-exit logic."""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from fraud_service.domains.fraud.config import FraudConfig, ScoreThresholds
from fraud_service.domains.fraud.engine import DecisionEngine
from fraud_service.domains.fraud.errors import DataUnavailable, RuleEvaluationError
from fraud_service.domains.fraud.models import (
    Decision,
    DecisionHint,
    HistoryRecord,
    TransactionEvent,
)
from fraud_service.domains.fraud.provider import InMemoryFraudDataProvider
from fraud_service.domains.fraud.rules import (
    DEFAULT_RULES,
    HighAmountTransactionRule,
    HighVelocityCustomerRule,
    PureRule,
    SuspiciousIPOriginRule,
)
from tests.conftest import NOW

CONFIG = FraudConfig()


def _event(**kwargs) -> TransactionEvent:
    defaults = {"customer_id": "c1", "amount": 10.0, "currency": "NGN"}
    defaults.update(kwargs)
    return TransactionEvent(**defaults)


class _AlwaysRule(PureRule):
    """Test rule that triggers on every event."""

    rule_id = "ALWAYS"
    description = "Always triggers."
    category = "test"
    default_threshold = 0.0
    default_score_impact = 10.0

    def predicate(self, event: TransactionEvent) -> bool:
        return True


class _NeverRule(_AlwaysRule):
    rule_id = "NEVER"
    description = "Never triggers."

    def predicate(self, event: TransactionEvent) -> bool:
        return False


class _BrokenRule(_AlwaysRule):
    rule_id = "BROKEN"
    description = "Raises while evaluating."

    def predicate(self, event: TransactionEvent) -> bool:
        raise TypeError("cannot compare amount")


def _seed_history(provider: InMemoryFraudDataProvider, customer_id: str, count: int) -> None:
    for i in range(count):
        provider.add_transaction(
            customer_id,
            HistoryRecord(
                transaction_id=f"h{i}",
                amount=20.0,
                currency="NGN",
                timestamp=NOW - timedelta(minutes=5 * (i + 1)),
            ),
        )


class TestDefaultCatalogScenarios:
    @pytest.mark.asyncio
    async def test_high_amount_from_suspicious_ip_is_denied(self, provider, sample_transaction):
        engine = DecisionEngine(provider, config=CONFIG)

        decision = await engine.evaluate(TransactionEvent(**sample_transaction), now=NOW)

        assert decision.overall_score == 120.0
        assert decision.decision == Decision.DENY
        assert decision.reasons == (
            HighAmountTransactionRule.description,
            SuspiciousIPOriginRule.description,
        )

    @pytest.mark.asyncio
    async def test_clean_transaction_is_approved(self, provider, clean_transaction):
        engine = DecisionEngine(provider, config=CONFIG)

        decision = await engine.evaluate(TransactionEvent(**clean_transaction), now=NOW)

        assert decision.overall_score == 0.0
        assert decision.decision == Decision.APPROVE
        assert decision.reasons == ()

    @pytest.mark.asyncio
    async def test_single_flag_rule_at_medium_threshold_flags(self, provider):
        engine = DecisionEngine(provider, config=CONFIG)

        decision = await engine.evaluate(_event(amount=1500.0), now=NOW)

        assert decision.overall_score == 50.0
        assert decision.decision == Decision.FLAG

    @pytest.mark.asyncio
    async def test_velocity_above_threshold_triggers(self, provider):
        _seed_history(provider, "c1", 6)
        engine = DecisionEngine(provider, config=CONFIG)

        decision = await engine.evaluate(_event(), now=NOW)

        assert decision.reasons == (HighVelocityCustomerRule.description,)
        assert decision.overall_score == 60.0
        assert decision.decision == Decision.FLAG

    @pytest.mark.asyncio
    async def test_velocity_at_threshold_does_not_trigger(self, provider):
        _seed_history(provider, "c1", 5)
        engine = DecisionEngine(provider, config=CONFIG)

        decision = await engine.evaluate(_event(), now=NOW)

        assert decision.decision == Decision.APPROVE

    @pytest.mark.asyncio
    async def test_history_outside_lookback_is_ignored(self, provider):
        for i in range(10):
            provider.add_transaction(
                "c1",
                HistoryRecord(
                    amount=5.0, currency="NGN", timestamp=NOW - timedelta(hours=25 + i)
                ),
            )
        engine = DecisionEngine(provider, config=CONFIG)

        decision = await engine.evaluate(_event(), now=NOW)

        assert decision.reasons == ()


class TestDecisionSemantics:
    @pytest.mark.asyncio
    async def test_empty_catalog_approves(self, provider):
        engine = DecisionEngine(provider, rules=[], config=CONFIG)

        decision = await engine.evaluate(_event(amount=99999.0), now=NOW)

        assert decision.decision == Decision.APPROVE
        assert decision.overall_score == 0.0

    @pytest.mark.asyncio
    async def test_deny_rule_short_circuits_later_rules(self, provider):
        rules = [
            _AlwaysRule(),
            _AlwaysRule(decision_hint=DecisionHint.DENY, score_impact=5.0),
            _AlwaysRule(score_impact=1000.0),
        ]
        engine = DecisionEngine(provider, rules=rules, config=CONFIG)

        decision = await engine.evaluate(_event(), now=NOW)

        assert decision.decision == Decision.DENY
        assert decision.overall_score == 15.0
        assert len(decision.reasons) == 2

    @pytest.mark.asyncio
    async def test_rules_after_deny_are_never_evaluated(self):
        provider = AsyncMock()
        rules = [
            _AlwaysRule(decision_hint="deny"),
            HighVelocityCustomerRule(),
        ]
        engine = DecisionEngine(provider, rules=rules, config=CONFIG)

        await engine.evaluate(_event(), now=NOW)

        provider.transaction_history.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disabled_rule_has_no_effect(self, provider):
        enabled = DecisionEngine(provider, rules=[_AlwaysRule(score_impact=80.0)], config=CONFIG)
        disabled = DecisionEngine(
            provider, rules=[_AlwaysRule(score_impact=80.0, enabled=False)], config=CONFIG
        )

        assert (await enabled.evaluate(_event(), now=NOW)).decision == Decision.FLAG
        result = await disabled.evaluate(_event(), now=NOW)
        assert result.overall_score == 0.0
        assert result.reasons == ()
        assert result.decision == Decision.APPROVE

    @pytest.mark.asyncio
    async def test_disabled_deny_rule_does_not_short_circuit(self, provider):
        rules = [_AlwaysRule(decision_hint="deny", enabled=False), _AlwaysRule()]
        engine = DecisionEngine(provider, rules=rules, config=CONFIG)

        decision = await engine.evaluate(_event(), now=NOW)

        assert decision.decision == Decision.APPROVE
        assert decision.overall_score == 10.0

    @pytest.mark.asyncio
    async def test_high_score_threshold_denies_without_deny_hint(self, provider):
        rules = [_AlwaysRule(score_impact=60.0), _AlwaysRule(score_impact=40.0)]
        engine = DecisionEngine(provider, rules=rules, config=CONFIG)

        decision = await engine.evaluate(_event(), now=NOW)

        assert decision.overall_score == 100.0
        assert decision.decision == Decision.DENY

    @pytest.mark.asyncio
    async def test_flag_hint_below_medium_threshold_still_flags(self, provider):
        engine = DecisionEngine(
            provider, rules=[_AlwaysRule(decision_hint="flag")], config=CONFIG
        )

        decision = await engine.evaluate(_event(), now=NOW)

        assert decision.overall_score == 10.0
        assert decision.decision == Decision.FLAG

    @pytest.mark.asyncio
    async def test_thresholds_are_configurable(self, provider):
        config = FraudConfig(
            scoring=ScoreThresholds(medium_risk_threshold=5.0, high_risk_threshold=10.0)
        )
        engine = DecisionEngine(provider, rules=[_AlwaysRule()], config=config)

        decision = await engine.evaluate(_event(), now=NOW)

        assert decision.decision == Decision.DENY

    @pytest.mark.asyncio
    async def test_reasons_follow_catalog_order(self, provider):
        first = _AlwaysRule()
        second = type("Second", (_AlwaysRule,), {"description": "Second rule."})()
        engine = DecisionEngine(
            provider, rules=[first, _NeverRule(), second], config=CONFIG
        )

        decision = await engine.evaluate(_event(), now=NOW)

        assert decision.reasons == ("Always triggers.", "Second rule.")

    @pytest.mark.asyncio
    async def test_score_is_monotonic_over_catalog_prefixes(self, provider, sample_transaction):
        _seed_history(provider, "c1", 8)
        event = TransactionEvent(**sample_transaction)
        previous = 0.0
        for k in range(len(DEFAULT_RULES) + 1):
            engine = DecisionEngine(provider, rules=DEFAULT_RULES[:k], config=CONFIG)
            score = (await engine.evaluate(event, now=NOW)).overall_score
            assert score >= previous
            previous = score

    @pytest.mark.asyncio
    async def test_evaluation_is_idempotent(self, provider, sample_transaction):
        _seed_history(provider, "c1", 3)
        engine = DecisionEngine(provider, config=CONFIG)
        event = TransactionEvent(**sample_transaction)

        first = await engine.evaluate(event, now=NOW)
        second = await engine.evaluate(event, now=NOW)

        assert first == second


class TestFailureModes:
    @pytest.mark.asyncio
    async def test_predicate_error_aborts_with_rule_id(self, provider):
        engine = DecisionEngine(provider, rules=[_AlwaysRule(), _BrokenRule()], config=CONFIG)

        with pytest.raises(RuleEvaluationError) as exc_info:
            await engine.evaluate(_event(), now=NOW)

        assert exc_info.value.rule_id == "BROKEN"
        assert isinstance(exc_info.value.cause, TypeError)

    @pytest.mark.asyncio
    async def test_history_backend_failure_propagates(self):
        provider = AsyncMock()
        provider.transaction_history.side_effect = DataUnavailable("history store down")
        engine = DecisionEngine(provider, rules=[HighVelocityCustomerRule()], config=CONFIG)

        with pytest.raises(DataUnavailable, match="history store down"):
            await engine.evaluate(_event(), now=NOW)

    @pytest.mark.asyncio
    async def test_reputation_backend_failure_propagates(self):
        provider = AsyncMock()
        provider.ip_reputation.side_effect = DataUnavailable("ip intel down")
        engine = DecisionEngine(provider, rules=[SuspiciousIPOriginRule()], config=CONFIG)

        with pytest.raises(DataUnavailable):
            await engine.evaluate(_event(origin="10.0.0.1"), now=NOW)

    @pytest.mark.asyncio
    async def test_deadline_expiry_raises_data_unavailable(self):
        async def slow_history(*args, **kwargs):
            await asyncio.sleep(1)
            return []

        provider = AsyncMock()
        provider.transaction_history.side_effect = slow_history
        engine = DecisionEngine(provider, rules=[HighVelocityCustomerRule()], config=CONFIG)

        with pytest.raises(DataUnavailable, match="deadline"):
            await engine.evaluate(_event(), now=NOW, timeout=0.01)


class TestConcurrentEvaluation:
    @pytest.mark.asyncio
    async def test_evaluations_during_seeding_see_consistent_snapshots(self, provider):
        engine = DecisionEngine(provider, rules=[HighVelocityCustomerRule()], config=CONFIG)
        event = _event()

        async def evaluate_many():
            return await asyncio.gather(*(engine.evaluate(event, now=NOW) for _ in range(50)))

        seeding = asyncio.to_thread(_seed_history, provider, "c1", 20)
        decisions, _ = await asyncio.gather(evaluate_many(), seeding)

        for decision in decisions:
            assert (decision.overall_score, decision.decision) in {
                (0.0, Decision.APPROVE),
                (60.0, Decision.FLAG),
            }

        final = await engine.evaluate(event, now=NOW)
        assert final.overall_score == 60.0
        assert final.decision == Decision.FLAG
        assert len(await provider.transaction_history("c1", timedelta(hours=24), now=NOW)) == 20
