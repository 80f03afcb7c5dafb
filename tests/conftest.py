"""Shared fixtures for the trade-analytics test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable

import pytest

from trade_analytics.core.config import Settings
from trade_analytics.core.enums import TradeDirection, TradeStatus
from trade_analytics.core.models import (
    RuleGroup,
    RuleItem,
    Strategy,
    Tag,
    TagCategory,
    Trade,
)

# 2024-03-04 was a Monday; 14:30 UTC is 09:30 in New York (EST)
BASE_TIME = datetime(2024, 3, 4, 14, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Trade helpers
# ---------------------------------------------------------------------------

def make_trade(
    trade_id: str = "t1",
    direction: TradeDirection = TradeDirection.LONG,
    status: TradeStatus = TradeStatus.WIN,
    entry_date: datetime | None = None,
    held_minutes: float | None = 30,
    quantity: float = 1.0,
    entry_price: float = 100.0,
    exit_price: float | None = 110.0,
    stop: float | None = None,
    commission: float = 0.0,
    symbol: str = "MNQ",
    playbook_id: str | None = None,
    rules_followed: Iterable[str] = (),
    tags: Iterable[str] = (),
    **extra,
) -> Trade:
    """Build a Trade; ``exit_price=None`` yields an open trade."""
    entry = entry_date or BASE_TIME
    exit_date = None
    if exit_price is not None and held_minutes is not None:
        exit_date = entry + timedelta(minutes=held_minutes)
    return Trade(
        id=trade_id,
        symbol=symbol,
        direction=direction,
        status=status,
        entry_date=entry,
        exit_date=exit_date,
        quantity=quantity,
        entry_price=entry_price,
        exit_price=exit_price,
        initial_stop_loss=stop,
        commission=commission,
        playbook_id=playbook_id,
        rules_followed=list(rules_followed),
        tags=list(tags),
        **extra,
    )


def make_pnl_trade(
    trade_id: str, pnl: float, day_offset: int = 0, minute_offset: int = 0, **kwargs
) -> Trade:
    """Long 1-lot trade from 100 whose gross P&L is exactly *pnl*."""
    status = TradeStatus.WIN if pnl > 0 else (
        TradeStatus.LOSS if pnl < 0 else TradeStatus.BREAK_EVEN
    )
    kwargs.setdefault("status", status)
    return make_trade(
        trade_id=trade_id,
        entry_date=BASE_TIME + timedelta(days=day_offset, minutes=minute_offset),
        entry_price=100.0,
        exit_price=100.0 + pnl,
        **kwargs,
    )


def make_strategy(
    strategy_id: str, groups: dict[str, dict[str, str]], name: str | None = None
) -> Strategy:
    """``groups`` maps group name -> {rule id: rule text}."""
    return Strategy(
        id=strategy_id,
        name=name or strategy_id,
        rules=[
            RuleGroup(
                id=f"{strategy_id}-{gname}",
                name=gname,
                items=[RuleItem(id=rid, text=text) for rid, text in items.items()],
            )
            for gname, items in groups.items()
        ],
    )


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def strategies() -> list[Strategy]:
    """Two playbooks sharing the "Exit / Moved to breakeven" rule."""
    return [
        make_strategy(
            "s1",
            {
                "Entry": {"r1": "Wait for pullback"},
                "Exit": {"r2": "Moved to breakeven"},
            },
            name="Breakout",
        ),
        make_strategy(
            "s2",
            {
                "Entry": {"r3": "Confirm volume"},
                "Exit": {"r4": "Moved to breakeven"},
            },
            name="Reversal",
        ),
    ]


@pytest.fixture
def tag_categories() -> list[TagCategory]:
    return [
        TagCategory(id="c1", name="Mistakes"),
        TagCategory(id="c2", name="Setups"),
    ]


@pytest.fixture
def tags() -> list[Tag]:
    return [
        Tag(id="tg1", name="FOMO", category_id="c1"),
        Tag(id="tg2", name="Late entry", category_id="c1"),
        Tag(id="tg3", name="A+ setup", category_id="c2"),
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings()
