"""Tests for PropFirmRuleEngine end-to-end evaluation."""

import logging
from datetime import datetime, timezone

import pytest

from src.business.compliance import (
    ConfigurationError,
    PhaseProgress,
    PropFirmRuleEngine,
    RuleEngineResult,
    RuleType,
    evaluate,
)
from src.data.models.enums import Phase
from src.engine.models.trading import TradingMetrics


@pytest.fixture
def engine():
    return PropFirmRuleEngine()


class TestEvaluate:
    """Tests for engine.evaluate()."""

    def test_empty_trades(self, engine, make_account, make_phase_rules, as_of):
        """No trades: compliant, zero metrics, only the minimum-days warning."""
        account = make_account(rules=make_phase_rules(min_trading_days=3))

        result = engine.evaluate(account, [], as_of=as_of)

        assert result.is_compliant
        assert [v.rule_type for v in result.violations] == [RuleType.MIN_TRADING_DAYS]
        assert result.metrics.total_trades == 0
        assert result.phase_progress.profit_progress == 0.0
        assert not result.phase_progress.can_advance
        assert result.evaluated_at == as_of

    def test_compliant_and_can_advance(self, engine, make_account, make_phase_rules, make_trade, as_of):
        account = make_account(rules=make_phase_rules(min_trading_days=5))
        trades = [make_trade(170, days_ago=d) for d in range(5)]

        result = engine.evaluate(account, trades, as_of=as_of)

        assert result.is_compliant
        assert result.violations == []
        assert result.metrics.trading_days == 5
        assert result.phase_progress.can_advance
        assert result.phase_progress.next_phase == Phase.PHASE_2

    def test_daily_loss_breach(self, engine, make_account, make_trade, as_of):
        account = make_account()
        trades = [make_trade(300, days_ago=1), make_trade(-350), make_trade(-200, closed=False)]

        result = engine.evaluate(account, trades, as_of=as_of)

        assert not result.is_compliant
        assert [v.rule_type for v in result.critical_violations] == [RuleType.DAILY_LOSS]
        assert result.metrics.daily_profit == pytest.approx(-550.0)

    def test_warnings_do_not_break_compliance(self, engine, make_account, make_phase_rules, make_trade, as_of):
        account = make_account(rules=make_phase_rules(min_trading_days=10))
        result = engine.evaluate(account, [make_trade(100)], as_of=as_of)
        assert result.is_compliant
        assert len(result.warnings) == 1
        assert result.critical_violations == []

    def test_is_compliant_iff_no_critical(self, engine, make_account, make_trade, as_of):
        account = make_account(phase=Phase.PHASE_2)
        trades = [make_trade(1000, days_ago=1), make_trade(500)]

        result = engine.evaluate(account, trades, as_of=as_of)

        assert result.is_compliant == (len(result.critical_violations) == 0)
        assert not result.is_compliant

    def test_violation_time_is_evaluation_time(self, engine, make_account, make_trade, as_of):
        account = make_account()
        result = engine.evaluate(account, [make_trade(-2000)], as_of=as_of)
        assert result.violations
        assert all(v.violation_time == as_of for v in result.violations)

    def test_default_evaluation_time_is_now(self, engine, make_account):
        before = datetime.now(timezone.utc)
        result = engine.evaluate(make_account(), [])
        assert result.evaluated_at >= before
        assert result.evaluated_at.tzinfo is not None

    def test_idempotent(self, engine, make_account, make_trade, as_of):
        account = make_account(phase=Phase.PHASE_2)
        trades = [make_trade(400, days_ago=2), make_trade(-100, days_ago=1), make_trade(250)]

        first = engine.evaluate(account, trades, as_of=as_of)
        second = engine.evaluate(account, trades, as_of=as_of)

        assert first == second

    def test_module_level_evaluate(self, make_account, make_trade, as_of):
        account = make_account()
        trades = [make_trade(100)]
        assert evaluate(account, trades, as_of=as_of) == PropFirmRuleEngine().evaluate(account, trades, as_of=as_of)

    def test_logs_outcome(self, engine, make_account, as_of, caplog):
        with caplog.at_level(logging.INFO, logger="src.business.compliance.rule_engine"):
            engine.evaluate(make_account(), [], as_of=as_of)
        assert "PASSED" in caplog.text


class TestMonotonicCompliance:
    """Adding profitable trades never creates loss violations or hides today's."""

    def test_profit_does_not_create_overall_loss(self, engine, make_account, make_trade, as_of):
        account = make_account()
        trades = [make_trade(-400, days_ago=2), make_trade(-300, days_ago=1)]

        before = engine.evaluate(account, trades, as_of=as_of)
        after = engine.evaluate(account, [*trades, make_trade(250, days_ago=1)], as_of=as_of)

        assert RuleType.OVERALL_LOSS not in [v.rule_type for v in before.violations]
        assert RuleType.OVERALL_LOSS not in [v.rule_type for v in after.violations]

    def test_earlier_profit_keeps_todays_daily_loss(self, engine, make_account, make_trade, as_of):
        account = make_account()
        trades = [make_trade(-550)]

        before = engine.evaluate(account, trades, as_of=as_of)
        after = engine.evaluate(account, [make_trade(2000, days_ago=3), *trades], as_of=as_of)

        assert RuleType.DAILY_LOSS in [v.rule_type for v in before.violations]
        assert RuleType.DAILY_LOSS in [v.rule_type for v in after.violations]
        assert not after.is_compliant


class TestConfiguration:
    """Tests for the configuration error path."""

    def test_account_without_template(self, engine, make_account, as_of):
        account = make_account(with_template=False)
        with pytest.raises(ConfigurationError, match="no PropFirm template"):
            engine.evaluate(account, [], as_of=as_of)

    def test_uses_current_phase_rules(self, engine, make_account, make_trade, as_of):
        """The same trades pass phase 1 but breach phase 2 protection."""
        trades = [make_trade(900)]
        phase1 = engine.evaluate(make_account(phase=Phase.PHASE_1), trades, as_of=as_of)
        phase2 = engine.evaluate(make_account(phase=Phase.PHASE_2), trades, as_of=as_of)

        assert phase1.is_compliant
        assert phase1.phase_progress.can_advance
        assert not phase2.is_compliant


class TestSerialization:
    """Tests for the result dictionary shapes."""

    def test_to_dict(self, engine, make_account, make_trade, as_of):
        result = engine.evaluate(make_account(), [make_trade(-600)], as_of=as_of)
        data = result.to_dict()

        assert set(data) == {"isCompliant", "violations", "metrics", "phaseProgress", "evaluatedAt"}
        assert data["isCompliant"] is False
        assert data["violations"][0]["ruleType"] == "DAILY_LOSS"
        assert data["violations"][0]["severity"] == "CRITICAL"
        assert data["evaluatedAt"] == as_of.isoformat()
        assert data["phaseProgress"]["nextPhase"] is None

    def test_default_evaluated_at_is_utc(self):
        result = RuleEngineResult(
            is_compliant=True,
            violations=[],
            metrics=TradingMetrics(),
            phase_progress=PhaseProgress(),
        )
        assert result.evaluated_at.tzinfo == timezone.utc

    def test_summary(self, engine, make_account, make_trade, as_of):
        result = engine.evaluate(make_account(), [make_trade(900)], as_of=as_of)
        assert result.summary == {
            "is_compliant": True,
            "evaluated_at": as_of.isoformat(),
            "critical": 0,
            "warnings": 0,
            "can_advance": True,
            "next_phase": "PHASE_2",
        }
