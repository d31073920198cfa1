"""
PropFirm Rule Engine - 规则引擎

单一入口，组合指标计算、规则检查和阶段进度评估：
1. 解析当前阶段规则
2. 计算交易指标 (engine 层)
3. 检查规则
4. 评估阶段进度
5. 组装 RuleEngineResult

The engine is stateless: each call works only on the supplied account and
trade snapshot, so it is safe to call concurrently and repeatedly. The only
exception it raises is ConfigurationError for an account without a rule
template; every business outcome is returned as data.

使用方式:
    engine = PropFirmRuleEngine()
    result = engine.evaluate(account, trades)

    # 或
    result = evaluate(account, trades)
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Optional

from src.business.config.rules_config import ConfigurationError, PhaseRules
from src.business.compliance.models import RuleEngineResult, Severity
from src.business.compliance.phase_progress import PhaseProgressEvaluator
from src.business.compliance.rule_checker import RuleChecker
from src.data.models.account import Account
from src.data.models.trade import Trade
from src.engine.account.trading_metrics import calc_trading_metrics

logger = logging.getLogger(__name__)


class PropFirmRuleEngine:
    """规则引擎

    Holds no per-account state; the checker and progress evaluator share a
    single RuleChecker so compliance and advancement use the same rules.
    """

    def __init__(self, checker: Optional[RuleChecker] = None) -> None:
        self.checker = checker or RuleChecker()
        self.progress_evaluator = PhaseProgressEvaluator(self.checker)

    @staticmethod
    def resolve_phase_rules(account: Account) -> PhaseRules:
        """获取账户当前阶段的规则

        Raises:
            ConfigurationError: 账户未分配规则模板
        """
        if account.template is None:
            raise ConfigurationError("Account has no PropFirm template assigned")
        return account.template.rules_for(account.current_phase)

    def evaluate(
        self,
        account: Account,
        trades: Sequence[Trade],
        as_of: Optional[datetime] = None,
    ) -> RuleEngineResult:
        """评估账户合规性

        Args:
            account: 账户（须已分配规则模板）
            trades: 账户全部交易（含持仓中）
            as_of: 评估时间，决定"今日"及违规时间戳，默认当前 UTC 时间

        Returns:
            RuleEngineResult

        Raises:
            ConfigurationError: 账户未分配规则模板
        """
        rules = self.resolve_phase_rules(account)
        evaluated_at = as_of or datetime.now(timezone.utc)

        metrics = calc_trading_metrics(trades, account.initial_balance, as_of=evaluated_at)
        violations = self.checker.check(rules, metrics, account, evaluated_at)
        phase_progress = self.progress_evaluator.evaluate(rules, metrics, account, evaluated_at)

        critical = sum(1 for v in violations if v.severity == Severity.CRITICAL)
        is_compliant = critical == 0

        logger.info(
            f"Evaluated {account.account_id} ({account.current_phase.value}, {len(trades)} trades): "
            f"{'PASSED' if is_compliant else 'FAILED'}, "
            f"{critical} critical / {len(violations) - critical} warnings"
        )

        return RuleEngineResult(
            is_compliant=is_compliant,
            violations=violations,
            metrics=metrics,
            phase_progress=phase_progress,
            evaluated_at=evaluated_at,
        )


def evaluate(
    account: Account,
    trades: Sequence[Trade],
    as_of: Optional[datetime] = None,
) -> RuleEngineResult:
    """Evaluate an account with a default engine instance.

    Raises:
        ConfigurationError: Account has no rule template.
    """
    return PropFirmRuleEngine().evaluate(account, trades, as_of=as_of)
