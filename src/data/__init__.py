"""Data layer: trade and account contracts supplied by the ingestion layer."""

from src.data.models import Account, Phase, Trade, TradeSide

__all__ = [
    "Account",
    "Phase",
    "Trade",
    "TradeSide",
]
