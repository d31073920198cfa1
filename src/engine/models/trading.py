"""Trading statistics models.

Pure data containers produced by the engine layer. The compliance layer only
compares these values against rule thresholds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TradingMetrics:
    """Aggregate statistics of an account's trade list.

    All values are computed by calc_trading_metrics() in
    src/engine/account/trading_metrics.py.

    Attributes:
        total_profit: Sum of gross P&L of all trades, closed (realized) and
            open (unrealized). Models the equity deviation from the
            initial balance.
        daily_profit: Gross P&L of trades opened on the evaluation date (UTC).
        best_trading_day: Highest daily P&L, floored at 0.
        best_single_trade: Highest closed-trade P&L, floored at 0.
        current_drawdown: Maximum peak-to-trough decline of the running
            balance, in % of initial balance.
        trading_days: Distinct calendar days (UTC) with at least one trade.
        total_trades: Number of trades, open and closed.
        win_rate: Winning closed trades / closed trades, in % (0-100).
        profit_factor: Gross profit / gross loss of closed trades.
            PROFIT_FACTOR_CAP when there are wins but no losses.
        closed_trades: Number of closed trades.
        open_trades: Number of open trades.
        realized_profit: Gross P&L of closed trades.
        unrealized_profit: Gross P&L of open trades.
        gross_profit: Sum of positive closed-trade P&L.
        gross_loss: Absolute sum of negative closed-trade P&L.
        daily_profits: Gross P&L per trading day, keyed "YYYY-MM-DD",
            in chronological order.
    """

    total_profit: float = 0.0
    daily_profit: float = 0.0
    best_trading_day: float = 0.0
    best_single_trade: float = 0.0
    current_drawdown: float = 0.0
    trading_days: int = 0
    total_trades: int = 0
    win_rate: float = 0.0
    profit_factor: float = 0.0

    # Breakdown
    closed_trades: int = 0
    open_trades: int = 0
    realized_profit: float = 0.0
    unrealized_profit: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    daily_profits: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase shape consumed by the dashboard."""
        return {
            "totalProfit": self.total_profit,
            "dailyProfit": self.daily_profit,
            "bestTradingDay": self.best_trading_day,
            "bestSingleTrade": self.best_single_trade,
            "currentDrawdown": self.current_drawdown,
            "tradingDays": self.trading_days,
            "totalTrades": self.total_trades,
            "winRate": self.win_rate,
            "profitFactor": self.profit_factor,
        }
