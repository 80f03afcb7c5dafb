"""Tests for individual filter categories."""

import pytest

from trade_analytics.core.catalog import StrategyCatalog, TagCatalog
from trade_analytics.core.enums import FilterLogic, TradeDirection, TradeStatus
from trade_analytics.filters.categories import (
    FilterContext,
    RangeCategory,
    SideCategory,
    StatusCategory,
    StrategyCategory,
    TagsCategory,
    build_categories,
    effective_strategy_ids,
    evaluate_category,
    range_measure,
)
from trade_analytics.filters.state import GlobalFilterState

from tests.conftest import make_trade

AND = FilterLogic.AND
OR = FilterLogic.OR


@pytest.fixture
def ctx(strategies, tags, tag_categories):
    return FilterContext(
        strategies=StrategyCatalog(strategies),
        tags=TagCatalog(tags, tag_categories),
    )


class TestSingleValued:
    def test_one_value_is_membership(self, ctx):
        cat = StatusCategory(frozenset({TradeStatus.WIN}), AND)
        assert evaluate_category(cat, make_trade(status=TradeStatus.WIN), ctx)
        assert not evaluate_category(cat, make_trade(status=TradeStatus.LOSS), ctx)

    def test_and_with_two_values_never_matches(self, ctx):
        cat = StatusCategory(frozenset({TradeStatus.WIN, TradeStatus.LOSS}), AND)
        assert not evaluate_category(cat, make_trade(status=TradeStatus.WIN), ctx)

    def test_or_with_two_values(self, ctx):
        cat = SideCategory(frozenset({TradeDirection.LONG, TradeDirection.SHORT}), OR)
        assert evaluate_category(cat, make_trade(direction=TradeDirection.SHORT), ctx)

    def test_strategy_requires_playbook(self, ctx):
        cat = StrategyCategory(frozenset({"s1"}), AND)
        assert evaluate_category(cat, make_trade(playbook_id="s1"), ctx)
        assert not evaluate_category(cat, make_trade(), ctx)

    def test_stale_strategy_never_matches(self, ctx):
        cat = StrategyCategory(frozenset({"gone"}), OR)
        assert not evaluate_category(cat, make_trade(playbook_id="gone"), ctx)

    def test_empty_catalog_trusts_strategy_ids(self):
        cat = StrategyCategory(frozenset({"gone"}), OR)
        assert evaluate_category(cat, make_trade(playbook_id="gone"), FilterContext())


class TestTags:
    def test_and_requires_every_tag(self, ctx):
        cat = TagsCategory(("tg1", "tg3"), AND)
        assert evaluate_category(cat, make_trade(tags=["tg3", "tg1", "tg2"]), ctx)
        assert not evaluate_category(cat, make_trade(tags=["tg1"]), ctx)

    def test_or_needs_one(self, ctx):
        cat = TagsCategory(("tg1", "tg3"), OR)
        assert evaluate_category(cat, make_trade(tags=["tg3"]), ctx)
        assert not evaluate_category(cat, make_trade(tags=["tg2"]), ctx)

    def test_stale_tag_ids(self, ctx):
        trade = make_trade(tags=["tg1", "gone"])
        assert not evaluate_category(TagsCategory(("tg1", "gone"), AND), trade, ctx)
        assert evaluate_category(TagsCategory(("tg1", "gone"), OR), trade, ctx)
        assert not evaluate_category(TagsCategory(("gone",), OR), trade, ctx)


class TestRanges:
    def test_pnl_uses_commission_rate(self, strategies):
        ctx = FilterContext(strategies=StrategyCatalog(strategies), commission_rate=2.0)
        trade = make_trade()
        assert range_measure("pnl", trade, ctx) == 8.0
        assert not evaluate_category(RangeCategory("pnl", 9.0, None), trade, ctx)

    def test_undefined_measures_fail_closed(self, ctx):
        open_trade = make_trade(exit_price=None)
        assert range_measure("pnl", open_trade, ctx) is None
        assert range_measure("duration", open_trade, ctx) is None
        assert range_measure("rr", make_trade(), ctx) is None
        assert not evaluate_category(RangeCategory("pnl", None, 100.0), open_trade, ctx)
        assert not evaluate_category(RangeCategory("rr", -100.0, None), make_trade(), ctx)

    def test_volume_and_risk(self, ctx):
        trade = make_trade(quantity=3, stop=95, lowest_price_reached=98)
        assert range_measure("volume", trade, ctx) == 3
        assert range_measure("sl_size", trade, ctx) == 5.0
        assert range_measure("actual_risk", trade, ctx) == 2.0
        assert range_measure("actual_risk_pct", trade, ctx) == pytest.approx(40.0)
        assert range_measure("rr", trade, ctx) == 2.0

    def test_zero_bounds_are_real_bounds(self, ctx):
        loser = make_trade(exit_price=95)
        assert not evaluate_category(RangeCategory("pnl", 0.0, None), loser, ctx)


class TestBuildCategories:
    def test_rules_do_not_add_strategies(self, ctx):
        state = GlobalFilterState(strategy_ids=["s1"], rule_ids=["r3"], include_rules=True)
        assert effective_strategy_ids(state, ctx.rule_resolver()) == ["s1"]
        rules_only = GlobalFilterState(rule_ids=["r3"], include_rules=True)
        assert effective_strategy_ids(rules_only, ctx.rule_resolver()) == []

    def test_strategy_owning_checked_rule_is_dropped(self, ctx):
        state = GlobalFilterState(
            strategy_ids=["s1", "s2"], rule_ids=["r2"], include_rules=True
        )
        assert effective_strategy_ids(state, ctx.rule_resolver()) == ["s2"]
        only_owner = state.model_copy(update={"strategy_ids": ["s1"]})
        assert [c.key for c in build_categories(only_owner, ctx)] == ["rules"]

    def test_owning_strategy_kept_while_rules_inactive(self, ctx):
        state = GlobalFilterState(strategy_ids=["s1"], rule_ids=["r2"])
        assert effective_strategy_ids(state, ctx.rule_resolver()) == ["s1"]

    def test_context_always_has_resolver(self, strategies):
        ctx = FilterContext(strategies=StrategyCatalog(strategies))
        assert ctx.rule_resolver().catalog is ctx.strategies

    def test_cross_strategy_bypasses_strategy_filter(self, ctx):
        state = GlobalFilterState(
            strategy_ids=["s1"], rule_ids=["r2"], include_rules=True, cross_strategies=True
        )
        assert effective_strategy_ids(state, ctx.rule_resolver()) == []
        assert [c.key for c in build_categories(state, ctx)] == ["rules"]
        assert state.active_filter_count == 1

    def test_cross_flag_without_rules_keeps_strategies(self, ctx):
        state = GlobalFilterState(strategy_ids=["s1"], cross_strategies=True)
        assert [c.key for c in build_categories(state, ctx)] == ["strategy"]

    def test_order(self, ctx):
        state = GlobalFilterState(
            min_rr=1,
            days_of_week=[1],
            start_time="09:00",
            direction=[TradeDirection.LONG],
            min_duration=1,
        )
        assert [c.key for c in build_categories(state, ctx)] == [
            "side",
            "days",
            "entry_time",
            "duration",
            "rr",
        ]
