"""Calculation Engine Layer.

Pure, stateless calculations over the trade snapshot supplied by the data
layer. Outputs metrics for use by the business (compliance) layer.

Architecture:
- account/: Account-level calculations
    - trading_metrics: P&L aggregation, drawdown, win rate, profit factor
- models/: Engine result models (TradingMetrics)
"""

from src.engine.account import calc_trading_metrics
from src.engine.models import TradingMetrics

__all__ = [
    "TradingMetrics",
    "calc_trading_metrics",
]
