"""Hypothesis strategies shared by the property tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from hypothesis import strategies as st

from trade_analytics.core.enums import FilterLogic, TradeDirection, TradeStatus
from trade_analytics.core.models import Tag
from trade_analytics.filters.state import GlobalFilterState

from tests.conftest import make_strategy, make_trade

START = datetime(2024, 3, 1, tzinfo=timezone.utc)

TAGS = [
    Tag(id="tg1", name="FOMO", category_id="c1"),
    Tag(id="tg2", name="Late entry", category_id="c1"),
    Tag(id="tg3", name="A+ setup", category_id="c2"),
]
TAG_IDS = [t.id for t in TAGS]

# s1/r2 and s2/r4 share the "Exit / Moved to breakeven" signature
STRATEGIES = [
    make_strategy(
        "s1", {"Entry": {"r1": "Wait for pullback"}, "Exit": {"r2": "Moved to breakeven"}}
    ),
    make_strategy(
        "s2", {"Entry": {"r3": "Confirm volume"}, "Exit": {"r4": "Moved to breakeven"}}
    ),
]
# "gone" ids were deleted from the catalog but may linger on trades and filters
STRATEGY_IDS = ["s1", "s2", "s-gone"]
RULE_IDS = ["r1", "r2", "r3", "r4", "r-gone"]


@st.composite
def trade_lists(draw, max_size: int = 12, closed_only: bool = False):
    """Lists of trades spread over three weeks with small integer P&Ls."""
    n = draw(st.integers(min_value=0, max_value=max_size))
    trades = []
    for i in range(n):
        closed = True if closed_only else draw(st.booleans())
        points = draw(st.integers(min_value=-50, max_value=50))
        trades.append(
            make_trade(
                f"t{i}",
                direction=draw(st.sampled_from(list(TradeDirection))),
                status=draw(st.sampled_from(list(TradeStatus))),
                entry_date=START
                + timedelta(
                    days=draw(st.integers(min_value=0, max_value=20)),
                    minutes=draw(st.integers(min_value=0, max_value=1439)),
                ),
                held_minutes=draw(st.integers(min_value=1, max_value=600)),
                entry_price=100.0,
                exit_price=100.0 + points if closed else None,
                stop=draw(st.sampled_from([None, 95.0, 105.0])),
                playbook_id=draw(st.none() | st.sampled_from(STRATEGY_IDS)),
                rules_followed=draw(
                    st.lists(st.sampled_from(RULE_IDS), unique=True, max_size=3)
                ),
                tags=draw(st.lists(st.sampled_from(TAG_IDS), unique=True, max_size=3)),
            )
        )
    return trades


def _bounds(values):
    return st.none() | values.map(float)


def _times():
    return st.none() | st.builds(
        "{:02d}:{:02d}".format,
        st.integers(min_value=0, max_value=23),
        st.integers(min_value=0, max_value=59),
    )


@st.composite
def filter_states(draw, logic: FilterLogic | None = None, exclude: bool | None = None):
    """States over categories whose within-category AND is never looser than OR."""
    return GlobalFilterState(
        status=draw(st.lists(st.sampled_from(list(TradeStatus)), unique=True, max_size=2)),
        direction=draw(
            st.lists(st.sampled_from(list(TradeDirection)), unique=True, max_size=2)
        ),
        strategy_ids=draw(st.lists(st.sampled_from(STRATEGY_IDS), unique=True, max_size=2)),
        rule_ids=draw(st.lists(st.sampled_from(RULE_IDS), unique=True, max_size=3)),
        include_rules=draw(st.booleans()),
        cross_strategies=draw(st.booleans()),
        tag_ids=draw(st.lists(st.sampled_from(TAG_IDS), unique=True, max_size=2)),
        days_of_week=draw(
            st.lists(st.integers(min_value=0, max_value=6), unique=True, max_size=3)
        ),
        start_time=draw(_times()),
        end_time=draw(_times()),
        exit_start_time=draw(_times()),
        exit_end_time=draw(_times()),
        min_pnl=draw(_bounds(st.integers(min_value=-30, max_value=30))),
        max_rr=draw(_bounds(st.integers(min_value=-5, max_value=5))),
        max_duration=draw(_bounds(st.integers(min_value=0, max_value=600))),
        filter_logic=logic or draw(st.sampled_from(list(FilterLogic))),
        exclude_mode=draw(st.booleans()) if exclude is None else exclude,
    )
