"""Trade data model.

A Trade is an immutable record of a single MT5 position as delivered by the
trade-ingestion layer. Open trades (no close time) carry unrealized P&L,
closed trades carry realized P&L.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from src.data.models.enums import TradeSide

# MT5 HTML/Excel reports use dotted dates: "2025.01.15 10:30:00"
_MT5_TIME_FORMATS = ("%Y.%m.%d %H:%M:%S", "%Y.%m.%d %H:%M")


def parse_timestamp(value: datetime | str) -> datetime:
    """Parse a trade timestamp into a timezone-aware UTC datetime.

    Naive datetimes are treated as UTC.

    Args:
        value: datetime, ISO-8601 string (trailing "Z" allowed) or MT5
            report timestamp.

    Returns:
        Aware datetime in UTC.

    Raises:
        ValueError: Unparseable timestamp.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            for fmt in _MT5_TIME_FORMATS:
                try:
                    dt = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
            else:
                raise ValueError(f"Invalid timestamp: {value!r}") from None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class Trade:
    """Single position of a trading account.

    Attributes:
        trade_id: Unique identifier.
        symbol: Instrument symbol (e.g., "EURUSD").
        side: Buy or sell.
        volume: Position size in lots.
        open_price: Entry price.
        open_time: Entry timestamp (UTC).
        pnl_gross: Gross P&L in account currency, realized when closed,
            unrealized while open.
        close_price: Exit price, None while open.
        close_time: Exit timestamp, None while open.
        swap: Accumulated swap.
        commission: Commission charged.
        comment: Free-text broker comment.
        ticket_id: Broker ticket, when known.
    """

    trade_id: str
    symbol: str
    side: TradeSide
    volume: float
    open_price: float
    open_time: datetime
    pnl_gross: float
    close_price: float | None = None
    close_time: datetime | None = None
    swap: float = 0.0
    commission: float = 0.0
    comment: str = ""
    ticket_id: str | None = None

    @property
    def is_open(self) -> bool:
        return self.close_time is None

    @property
    def is_closed(self) -> bool:
        return self.close_time is not None

    @property
    def pnl_net(self) -> float:
        """Gross P&L including swap and commission (display only, rules use gross)."""
        return self.pnl_gross + self.swap + self.commission

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Trade:
        """Build a Trade from an ingestion record.

        Accepts camelCase keys as produced by the report parsers
        (``openTime``, ``pnlGross``, ``ticketId``) as well as snake_case.

        Raises:
            ValueError: Missing required field or invalid value.
        """

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        trade_id = pick("id", "trade_id", "tradeId", "ticketId", "ticket_id")
        open_time = pick("openTime", "open_time")
        if trade_id is None:
            raise ValueError(f"Trade record has no id: {data}")
        if open_time is None:
            raise ValueError(f"Trade {trade_id} has no open time")

        close_time = pick("closeTime", "close_time")
        close_price = pick("closePrice", "close_price")
        ticket_id = pick("ticketId", "ticket_id")

        return cls(
            trade_id=str(trade_id),
            symbol=str(pick("symbol", default="")),
            side=TradeSide.parse(pick("side", "type", default="buy")),
            volume=float(pick("volume", default=0.0)),
            open_price=float(pick("openPrice", "open_price", default=0.0)),
            open_time=parse_timestamp(open_time),
            pnl_gross=float(pick("pnlGross", "pnl_gross", "profit", default=0.0)),
            close_price=float(close_price) if close_price is not None else None,
            close_time=parse_timestamp(close_time) if close_time else None,
            swap=float(pick("swap", default=0.0)),
            commission=float(pick("commission", default=0.0)),
            comment=str(pick("comment", default="")),
            ticket_id=str(ticket_id) if ticket_id is not None else None,
        )
