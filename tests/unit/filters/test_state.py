"""Tests for GlobalFilterState validation and activity tracking."""

import pytest
from pydantic import ValidationError

from trade_analytics.core.enums import FilterLogic, TradeDirection, TradeStatus
from trade_analytics.core.errors import InvalidTimeOfDayError
from trade_analytics.filters.state import DEFAULT_FILTERS, GlobalFilterState, parse_time_of_day


class TestParseTimeOfDay:
    @pytest.mark.parametrize("value", ["00:00", "09:30", "23:59"])
    def test_valid(self, value):
        assert parse_time_of_day(value) == value

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_unset(self, value):
        assert parse_time_of_day(value) is None

    @pytest.mark.parametrize("value", ["9:30", "24:00", "12:60", "noon", 930])
    def test_invalid(self, value):
        with pytest.raises(InvalidTimeOfDayError):
            parse_time_of_day(value)


class TestStateParsing:
    def test_defaults_are_inactive(self):
        assert DEFAULT_FILTERS.active_filter_count == 0
        assert DEFAULT_FILTERS.filter_logic is FilterLogic.AND
        assert not DEFAULT_FILTERS.exclude_mode

    def test_camel_case_payload(self):
        state = GlobalFilterState.model_validate(
            {
                "status": ["Win", "Loss"],
                "direction": ["Short"],
                "minPnL": 5,
                "maxRR": 3,
                "minSLSize": 2,
                "minActualRiskPct": 10,
                "daysOfWeek": [1, 5],
                "filterLogic": "OR",
                "excludeMode": True,
                "crossStrategies": True,
                "startTime": "09:30",
            }
        )
        assert state.status == [TradeStatus.WIN, TradeStatus.LOSS]
        assert state.direction == [TradeDirection.SHORT]
        assert state.min_pnl == 5
        assert state.max_rr == 3
        assert state.min_sl_size == 2
        assert state.min_actual_risk_pct == 10
        assert state.filter_logic is FilterLogic.OR
        assert state.exclude_mode
        assert state.cross_strategies
        assert state.start_time == "09:30"

    def test_invalid_time_rejected(self):
        with pytest.raises(InvalidTimeOfDayError):
            GlobalFilterState(start_time="9am")

    def test_day_out_of_range(self):
        with pytest.raises(ValidationError):
            GlobalFilterState(days_of_week=[7])


class TestActivity:
    def test_rules_need_include_flag(self):
        state = GlobalFilterState(rule_ids=["r1"])
        assert not state.rules_active
        assert state.active_category_keys() == []
        assert GlobalFilterState(rule_ids=["r1"], include_rules=True).rules_active

    def test_category_order(self):
        state = GlobalFilterState(
            max_actual_risk_pct=50,
            tag_ids=["tg1"],
            status=[TradeStatus.WIN],
            exit_end_time="16:00",
            min_duration=5,
            direction=[TradeDirection.LONG],
        )
        assert state.active_category_keys() == [
            "status",
            "side",
            "tags",
            "exit_time",
            "duration",
            "actual_risk_pct",
        ]
        assert state.active_filter_count == 6

    def test_flags_are_not_categories(self):
        state = GlobalFilterState(
            exclude_mode=True, filter_logic=FilterLogic.OR, cross_strategies=True
        )
        assert state.active_filter_count == 0

    def test_cross_strategy_rules_replace_strategy(self):
        state = GlobalFilterState(
            strategy_ids=["s1"], rule_ids=["r2"], include_rules=True, cross_strategies=True
        )
        assert state.active_category_keys() == ["rules"]
        strict = state.model_copy(update={"cross_strategies": False})
        assert strict.active_category_keys() == ["strategy", "rules"]

    def test_zero_bound_is_active(self):
        assert GlobalFilterState(min_pnl=0).active_category_keys() == ["pnl"]

    def test_reset(self):
        state = GlobalFilterState(status=[TradeStatus.WIN], exclude_mode=True)
        assert state.reset() == DEFAULT_FILTERS
