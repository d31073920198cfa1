"""Engine layer data models.

This module provides data models for the calculation engine layer,
designed to work with data layer models (src.data.models) while
providing clean interfaces for engine functions.

Models:
    TradingMetrics: Aggregate statistics of an account's trade list
"""

from src.engine.models.trading import TradingMetrics

__all__ = [
    "TradingMetrics",
]
