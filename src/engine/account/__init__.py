"""Account-level calculations for prop firm compliance.

This module provides calculations at the account level:
- Trading metrics (total/daily P&L, best day, best trade)
- Drawdown of the running balance
- Win rate and profit factor
"""

from src.engine.account.trading_metrics import (
    PROFIT_FACTOR_CAP,
    calc_daily_profits,
    calc_trade_drawdown,
    calc_trade_profit_factor,
    calc_trade_win_rate,
    calc_trading_metrics,
    partition_trades,
    trading_day_key,
)

__all__ = [
    "PROFIT_FACTOR_CAP",
    "calc_trading_metrics",
    "calc_daily_profits",
    "calc_trade_drawdown",
    "calc_trade_win_rate",
    "calc_trade_profit_factor",
    "partition_trades",
    "trading_day_key",
]
