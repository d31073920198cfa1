"""Data models for trading accounts and trades."""

from src.data.models.account import Account
from src.data.models.enums import Phase, TradeSide
from src.data.models.trade import Trade, parse_timestamp

__all__ = [
    "Account",
    "Phase",
    "TradeSide",
    "Trade",
    "parse_timestamp",
]
