"""
Phase Progress Evaluator - 阶段进度评估

Computes progress toward the phase profit target and whether the account
qualifies to advance to the next phase.

晋级条件（全部满足）：
1. 总利润 >= 当前阶段利润目标金额
2. 满足最少交易天数（未配置视为满足）
3. 使用同一阶段规则和指标重新检查，无 CRITICAL 违规

Phases without a profit target (typically FUNDED) report 0 progress and
never advance; has_profit_target lets callers tell the two apart.
"""

import logging
from datetime import datetime
from typing import Optional

from src.business.config.rules_config import PhaseRules
from src.business.compliance.models import PhaseProgress, Severity
from src.business.compliance.rule_checker import RuleChecker
from src.data.models.account import Account
from src.engine.models.trading import TradingMetrics

logger = logging.getLogger(__name__)


class PhaseProgressEvaluator:
    """阶段进度评估器"""

    def __init__(self, checker: Optional[RuleChecker] = None) -> None:
        """初始化

        Args:
            checker: 规则检查器，与引擎共享同一实例
        """
        self.checker = checker or RuleChecker()

    def evaluate(
        self,
        rules: PhaseRules,
        metrics: TradingMetrics,
        account: Account,
        evaluated_at: datetime,
    ) -> PhaseProgress:
        """评估阶段进度

        Args:
            rules: 当前阶段规则
            metrics: 交易指标
            account: 账户
            evaluated_at: 评估时间

        Returns:
            PhaseProgress
        """
        if not rules.has_profit_target:
            return PhaseProgress(
                profit_progress=0.0,
                days_progress=metrics.trading_days,
                can_advance=False,
                next_phase=None,
                has_profit_target=False,
            )

        target = rules.profit_target_amount
        profit_progress = max(0.0, metrics.total_profit / target * 100)

        has_met_target = metrics.total_profit >= target
        has_met_min_days = not rules.min_trading_days or metrics.trading_days >= rules.min_trading_days

        # Fresh check against current metrics, never a cached violation list
        violations = self.checker.check(rules, metrics, account, evaluated_at)
        has_no_critical = not any(v.severity == Severity.CRITICAL for v in violations)

        can_advance = has_met_target and has_met_min_days and has_no_critical
        next_phase = account.current_phase.next_phase if can_advance else None

        if can_advance:
            next_label = next_phase.value if next_phase else "none (terminal)"
            logger.info(f"{account.account_id} qualifies to advance: {account.current_phase.value} -> {next_label}")

        return PhaseProgress(
            profit_progress=profit_progress,
            days_progress=metrics.trading_days,
            can_advance=can_advance,
            next_phase=next_phase,
            has_profit_target=True,
        )
