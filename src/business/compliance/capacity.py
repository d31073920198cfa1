"""
Safe Capacity - 剩余风险容量

How much more the account can lose before breaching its loss limits, and
the equity level that meets the phase profit target. Uses the absolute
amounts of the template (trusted as configured).
"""

from dataclasses import dataclass
from typing import Optional

from src.business.config.rules_config import PhaseRules
from src.engine.models.trading import TradingMetrics


@dataclass(frozen=True)
class SafeCapacity:
    """剩余可亏损额度

    Attributes:
        daily: Remaining loss room for today, None when the phase has no
            absolute daily limit.
        overall: Remaining loss room overall, None when the phase has no
            absolute overall limit.
    """

    daily: Optional[float] = None
    overall: Optional[float] = None


def calc_safe_capacity(rules: PhaseRules, metrics: TradingMetrics) -> SafeCapacity:
    """计算剩余风险容量

    daily   = max_daily_loss_amount + min(daily_profit, 0)
    overall = max_overall_loss_amount + total_profit

    Both are floored at 0. Profit earned today does not extend the daily
    room; overall profit does extend the overall room.

    Example:
        >>> # limit 500/day, 1000 overall; today -200, total +300
        >>> calc_safe_capacity(rules, metrics)
        SafeCapacity(daily=300.0, overall=1300.0)
    """
    daily = None
    if rules.max_daily_loss_amount is not None:
        daily = max(0.0, rules.max_daily_loss_amount + min(metrics.daily_profit, 0.0))

    overall = None
    if rules.max_overall_loss_amount is not None:
        overall = max(0.0, rules.max_overall_loss_amount + metrics.total_profit)

    return SafeCapacity(daily=daily, overall=overall)


def calc_target_equity(initial_balance: float, rules: PhaseRules) -> Optional[float]:
    """达到利润目标时的账户净值，无目标时返回 None"""
    if not rules.has_profit_target:
        return None
    return initial_balance + rules.profit_target_amount
