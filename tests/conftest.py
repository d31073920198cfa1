"""
Pytest fixtures shared by all tests.

Provides trade / account / rule factories so tests build only the data
they care about.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest

from src.business.config.rules_config import (
    PhaseRules,
    PropFirmRules,
    PropFirmTemplate,
    SimpleProtectionRules,
)
from src.data.models.account import Account
from src.data.models.enums import Phase, TradeSide
from src.data.models.trade import Trade


# Fixed evaluation time: "today" is 2025-01-20 (UTC)
AS_OF = datetime(2025, 1, 20, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def as_of() -> datetime:
    return AS_OF


@pytest.fixture
def make_trade() -> Callable[..., Trade]:
    """Trade factory.

    days_ago counts back from AS_OF; closed=False leaves the trade open.
    """
    counter = {"n": 0}

    def _make(
        pnl: float,
        days_ago: int = 0,
        hour: int = 10,
        closed: bool = True,
        symbol: str = "EURUSD",
        side: TradeSide = TradeSide.BUY,
    ) -> Trade:
        counter["n"] += 1
        day = AS_OF - timedelta(days=days_ago)
        open_time = day.replace(hour=hour, minute=0, second=0, microsecond=0)
        return Trade(
            trade_id=f"T{counter['n']:04d}",
            symbol=symbol,
            side=side,
            volume=0.1,
            open_price=1.0850,
            open_time=open_time,
            pnl_gross=pnl,
            close_price=1.0900 if closed else None,
            close_time=open_time + timedelta(hours=1) if closed else None,
        )

    return _make


@pytest.fixture
def make_phase_rules() -> Callable[..., PhaseRules]:
    """PhaseRules factory for a 10k account: 5% daily, 10% overall."""

    def _make(
        profit_target_amount: Optional[float] = 800.0,
        min_trading_days: Optional[int] = None,
        consistency_rules: bool = False,
        simple_protection: Optional[SimpleProtectionRules] = None,
        max_daily_loss: float = 5.0,
        max_overall_loss: float = 10.0,
    ) -> PhaseRules:
        return PhaseRules(
            max_daily_loss=max_daily_loss,
            max_overall_loss=max_overall_loss,
            max_daily_loss_amount=10000 * max_daily_loss / 100,
            max_overall_loss_amount=10000 * max_overall_loss / 100,
            profit_target=profit_target_amount / 100 if profit_target_amount else None,
            profit_target_amount=profit_target_amount,
            min_trading_days=min_trading_days,
            consistency_rules=consistency_rules,
            simple_protection=simple_protection,
        )

    return _make


@pytest.fixture
def make_account(make_phase_rules) -> Callable[..., Account]:
    """Account factory. `rules` is used for the account's current phase."""

    def _make(
        phase: Phase = Phase.PHASE_1,
        rules: Optional[PhaseRules] = None,
        initial_balance: float = 10000.0,
        with_template: bool = True,
    ) -> Account:
        template = None
        if with_template:
            phase_rules = {
                Phase.PHASE_1: make_phase_rules(),
                Phase.PHASE_2: make_phase_rules(profit_target_amount=500.0, consistency_rules=True),
                Phase.FUNDED: make_phase_rules(profit_target_amount=None, consistency_rules=True),
            }
            if rules is not None:
                phase_rules[phase] = rules
            template = PropFirmTemplate(
                template_id="tpl-10k",
                name="Test Challenge 10k",
                account_size=10000.0,
                rules=PropFirmRules(
                    phase1=phase_rules[Phase.PHASE_1],
                    phase2=phase_rules[Phase.PHASE_2],
                    funded=phase_rules[Phase.FUNDED],
                ),
                currency="USD",
                prop_firm="TestFirm",
            )
        return Account(
            account_id="acc-001",
            login="123456",
            initial_balance=initial_balance,
            current_phase=phase,
            template=template,
        )

    return _make
