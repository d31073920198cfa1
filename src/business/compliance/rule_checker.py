"""
Rule Checker - 规则检查器

Compares pre-computed trading metrics against the thresholds of the
account's current phase and emits violations.

设计原则：
- 只做阈值检查，不做计算（指标由 engine/account 层计算）
- 每条规则独立检查，不短路
- 违规顺序固定：日亏损 → 总亏损 → 保护规则 → 最少交易天数
- 同一个 check() 同时服务于合规判断和晋级判断，避免两份逻辑漂移
"""

import logging
from datetime import datetime

from src.business.config.rules_config import PhaseRules
from src.business.compliance.models import RuleType, RuleViolation, Severity
from src.data.models.account import Account
from src.data.models.enums import Phase
from src.engine.models.trading import TradingMetrics

logger = logging.getLogger(__name__)

# Phases where simple protection (consistency) rules apply
PROTECTED_PHASES = (Phase.PHASE_2, Phase.FUNDED)

# Total profit must be at least this multiple of the best day / best trade
PROTECTION_MULTIPLIER = 2


class RuleChecker:
    """规则检查器

    检查四类规则：
    1. Daily Loss - 当日亏损占初始资金比例 (CRITICAL)
    2. Overall Loss - 总亏损占初始资金比例 (CRITICAL)
    3. Simple Protection - 50% Daily / Trade Protection，仅 PHASE_2 和 FUNDED (CRITICAL)
    4. Minimum Trading Days - 最少交易天数 (WARNING)

    Loss limits use a strict ">" comparison: a loss exactly at the limit is
    not a violation.
    """

    def check(
        self,
        rules: PhaseRules,
        metrics: TradingMetrics,
        account: Account,
        evaluated_at: datetime,
    ) -> list[RuleViolation]:
        """检查当前阶段的全部规则

        Args:
            rules: 当前阶段规则
            metrics: 交易指标
            account: 账户（提供初始资金和当前阶段）
            evaluated_at: 评估时间，写入每条违规

        Returns:
            违规列表，按规则检查顺序排列；空列表表示完全合规
        """
        currency = account.template.currency if account.template else ""

        violations: list[RuleViolation] = []
        violations.extend(self._check_daily_loss(rules, metrics, account, evaluated_at))
        violations.extend(self._check_overall_loss(rules, metrics, account, evaluated_at))
        violations.extend(self._check_simple_protection(rules, metrics, account, evaluated_at, currency))
        violations.extend(self._check_min_trading_days(rules, metrics, evaluated_at))

        for v in violations:
            logger.debug(f"{account.account_id} {v.severity.value} {v.rule_type.value}: {v.message}")

        return violations

    @staticmethod
    def _loss_percent(loss: float, initial_balance: float) -> float | None:
        """亏损占初始资金百分比；初始资金非正时无法计算"""
        if initial_balance <= 0:
            return None
        return abs(loss) * 100 / initial_balance

    def _check_daily_loss(
        self,
        rules: PhaseRules,
        metrics: TradingMetrics,
        account: Account,
        evaluated_at: datetime,
    ) -> list[RuleViolation]:
        if metrics.daily_profit >= 0:
            return []

        daily_loss_pct = self._loss_percent(metrics.daily_profit, account.initial_balance)
        if daily_loss_pct is None:
            logger.debug(f"{account.account_id}: initial balance is not positive, skip daily loss check")
            return []

        if daily_loss_pct > rules.max_daily_loss:
            return [RuleViolation(
                rule_type=RuleType.DAILY_LOSS,
                severity=Severity.CRITICAL,
                message=f"Daily loss limit exceeded: {daily_loss_pct:.2f}% > {rules.max_daily_loss:g}%",
                current_value=daily_loss_pct,
                limit_value=rules.max_daily_loss,
                violation_time=evaluated_at,
            )]
        return []

    def _check_overall_loss(
        self,
        rules: PhaseRules,
        metrics: TradingMetrics,
        account: Account,
        evaluated_at: datetime,
    ) -> list[RuleViolation]:
        if metrics.total_profit >= 0:
            return []

        overall_loss_pct = self._loss_percent(metrics.total_profit, account.initial_balance)
        if overall_loss_pct is None:
            logger.debug(f"{account.account_id}: initial balance is not positive, skip overall loss check")
            return []

        if overall_loss_pct > rules.max_overall_loss:
            return [RuleViolation(
                rule_type=RuleType.OVERALL_LOSS,
                severity=Severity.CRITICAL,
                message=f"Overall loss limit exceeded: {overall_loss_pct:.2f}% > {rules.max_overall_loss:g}%",
                current_value=overall_loss_pct,
                limit_value=rules.max_overall_loss,
                violation_time=evaluated_at,
            )]
        return []

    def _check_simple_protection(
        self,
        rules: PhaseRules,
        metrics: TradingMetrics,
        account: Account,
        evaluated_at: datetime,
        currency: str,
    ) -> list[RuleViolation]:
        """50% Daily / Trade Protection

        总利润必须至少是最佳单日（或最佳单笔）利润的两倍，防止账户
        依靠一次运气获得资格。只在总利润为正时检查。
        """
        if account.current_phase not in PROTECTED_PHASES or not rules.consistency_rules:
            return []

        checks = []
        if rules.daily_protection_enabled:
            checks.append((RuleType.DAILY_PROTECTION, "50% Daily Protection", "best day", metrics.best_trading_day))
        if rules.trade_protection_enabled:
            checks.append((RuleType.TRADE_PROTECTION, "50% Trade Protection", "best trade", metrics.best_single_trade))

        violations: list[RuleViolation] = []
        prefix = f"{currency} " if currency else ""
        for rule_type, name, label, best in checks:
            if best <= 0:
                continue
            required = best * PROTECTION_MULTIPLIER
            if 0 < metrics.total_profit < required:
                violations.append(RuleViolation(
                    rule_type=rule_type,
                    severity=Severity.CRITICAL,
                    message=(
                        f"{name} violated: Total profit {prefix}{metrics.total_profit:.2f} "
                        f"< {PROTECTION_MULTIPLIER}x {label} {prefix}{required:.2f}"
                    ),
                    current_value=metrics.total_profit,
                    limit_value=required,
                    violation_time=evaluated_at,
                ))
        return violations

    def _check_min_trading_days(
        self,
        rules: PhaseRules,
        metrics: TradingMetrics,
        evaluated_at: datetime,
    ) -> list[RuleViolation]:
        # 0 等同于未配置
        if not rules.min_trading_days:
            return []

        if metrics.trading_days < rules.min_trading_days:
            return [RuleViolation(
                rule_type=RuleType.MIN_TRADING_DAYS,
                severity=Severity.WARNING,
                message=(
                    f"Minimum trading days not met: {metrics.trading_days} "
                    f"< {rules.min_trading_days} days"
                ),
                current_value=float(metrics.trading_days),
                limit_value=float(rules.min_trading_days),
                violation_time=evaluated_at,
            )]
        return []
