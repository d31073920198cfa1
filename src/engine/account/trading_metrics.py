"""Trading metrics calculation - unified entry point.

Reduces an account's trade list into the statistics every prop firm rule
depends on: total and daily P&L, best day, best trade, drawdown, trading
days, win rate and profit factor.

The trade list is treated as an immutable snapshot: every aggregation builds
new structures (daily P&L map, time-sorted copy) and the input is never
mutated.

Example:
    >>> from src.engine.account.trading_metrics import calc_trading_metrics
    >>> metrics = calc_trading_metrics(trades, initial_balance=10000)
    >>> print(f"Win rate: {metrics.win_rate:.1f}%")
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, timezone

from src.data.models.trade import Trade
from src.engine.models.trading import TradingMetrics

# Profit factor reported when there are winning trades but no losing ones
PROFIT_FACTOR_CAP = 999.0


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def trading_day_key(value: datetime | date) -> str:
    """Calendar-day key (UTC) of a timestamp, formatted YYYY-MM-DD."""
    if isinstance(value, datetime):
        return _as_utc(value).date().isoformat()
    return value.isoformat()


def partition_trades(trades: Sequence[Trade]) -> tuple[list[Trade], list[Trade]]:
    """Split trades into (closed, open).

    A trade without close time is open.
    """
    closed = [t for t in trades if t.close_time is not None]
    open_ = [t for t in trades if t.close_time is None]
    return closed, open_


def calc_daily_profits(trades: Sequence[Trade]) -> dict[str, float]:
    """Sum gross P&L per calendar day of the trades' open time.

    Open and closed trades are both included.

    Returns:
        Mapping "YYYY-MM-DD" -> P&L, in chronological order.

    Example:
        >>> calc_daily_profits(trades)
        {'2025-01-15': 117.5, '2025-01-16': -40.0}
    """
    daily: dict[str, float] = {}
    for trade in trades:
        key = trading_day_key(trade.open_time)
        daily[key] = daily.get(key, 0.0) + trade.pnl_gross
    return dict(sorted(daily.items()))


def calc_trade_drawdown(trades: Sequence[Trade], initial_balance: float) -> float:
    """Calculate maximum drawdown of the running balance.

    The balance starts at the initial balance and each trade's P&L is
    applied in open-time order. Drawdown at each step is measured from the
    high-water mark and expressed relative to the initial balance:

        drawdown = (high_water_mark - balance) / initial_balance * 100

    Args:
        trades: Trades in any order.
        initial_balance: Starting balance.

    Returns:
        Maximum drawdown in % (e.g., 3.5 for 3.5%). 0 for no trades or a
        non-positive initial balance.

    Example:
        >>> # +500, -800, +200 on a 10,000 balance
        >>> calc_trade_drawdown(trades, 10000)
        8.0
    """
    if not trades or initial_balance <= 0:
        return 0.0

    ordered = sorted(trades, key=lambda t: _as_utc(t.open_time))

    balance = initial_balance
    high_water_mark = initial_balance
    max_drawdown = 0.0

    for trade in ordered:
        balance += trade.pnl_gross
        if balance > high_water_mark:
            high_water_mark = balance
        drawdown = (high_water_mark - balance) / initial_balance * 100
        max_drawdown = max(max_drawdown, drawdown)

    return max_drawdown


def calc_trade_win_rate(closed_trades: Sequence[Trade]) -> float:
    """Win rate of closed trades in %.

    Trades with exactly zero P&L count as neither win nor loss but stay in
    the denominator.

    Returns:
        Win rate 0-100, 0 when there are no closed trades.

    Example:
        >>> # P&L [+100, -50, +200]
        >>> round(calc_trade_win_rate(trades), 2)
        66.67
    """
    if not closed_trades:
        return 0.0
    wins = sum(1 for t in closed_trades if t.pnl_gross > 0)
    return wins / len(closed_trades) * 100


def calc_trade_profit_factor(closed_trades: Sequence[Trade]) -> tuple[float, float, float]:
    """Profit factor of closed trades.

    Profit Factor = Gross Profit / Gross Loss

    Returns:
        (profit_factor, gross_profit, gross_loss). When gross loss is zero the
        profit factor is PROFIT_FACTOR_CAP if there is any gross profit,
        otherwise 0.

    Example:
        >>> # P&L [+100, -50, +200]
        >>> calc_trade_profit_factor(trades)
        (6.0, 300.0, 50.0)
    """
    gross_profit = sum(t.pnl_gross for t in closed_trades if t.pnl_gross > 0)
    gross_loss = abs(sum(t.pnl_gross for t in closed_trades if t.pnl_gross < 0))

    if gross_loss > 0:
        profit_factor = gross_profit / gross_loss
    elif gross_profit > 0:
        profit_factor = PROFIT_FACTOR_CAP
    else:
        profit_factor = 0.0

    return profit_factor, float(gross_profit), float(gross_loss)


def calc_trading_metrics(
    trades: Sequence[Trade],
    initial_balance: float,
    as_of: datetime | None = None,
) -> TradingMetrics:
    """Calculate all trading metrics from an account's trade list.

    This is the unified entry point used by the rule engine.

    Args:
        trades: All trades of the account, open and closed.
        initial_balance: Account starting balance.
        as_of: Evaluation time, decides which day is "today".
            Defaults to the current UTC time.

    Returns:
        TradingMetrics. An empty trade list yields all-zero metrics.
    """
    if as_of is None:
        as_of = datetime.now(timezone.utc)

    closed, open_ = partition_trades(trades)

    realized = sum(t.pnl_gross for t in closed)
    unrealized = sum(t.pnl_gross for t in open_)

    daily_profits = calc_daily_profits(trades)
    today_profit = daily_profits.get(trading_day_key(as_of), 0.0)
    best_trading_day = max([*daily_profits.values(), 0.0])
    best_single_trade = max([*(t.pnl_gross for t in closed), 0.0])

    profit_factor, gross_profit, gross_loss = calc_trade_profit_factor(closed)

    return TradingMetrics(
        total_profit=float(realized + unrealized),
        daily_profit=float(today_profit),
        best_trading_day=float(best_trading_day),
        best_single_trade=float(best_single_trade),
        current_drawdown=calc_trade_drawdown(trades, initial_balance),
        trading_days=len(daily_profits),
        total_trades=len(trades),
        win_rate=calc_trade_win_rate(closed),
        profit_factor=profit_factor,
        closed_trades=len(closed),
        open_trades=len(open_),
        realized_profit=float(realized),
        unrealized_profit=float(unrealized),
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        daily_profits=daily_profits,
    )
