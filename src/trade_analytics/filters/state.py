"""Global filter state, the declarative description of a trade slice.

Built by the filter UI, applied as a pure function on every change and
never stored on a trade.  A field group left at its default is an
inactive category and does not take part in the match at all.
"""

from __future__ import annotations

import re
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from trade_analytics.core.enums import FilterLogic, TradeDirection, TradeStatus
from trade_analytics.core.errors import InvalidTimeOfDayError

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

DayOfWeek = Annotated[int, Field(ge=0, le=6)]  # 0 = Sunday


def parse_time_of_day(value: Any) -> str | None:
    """Validate a zero-padded 24h ``HH:MM``; blank means unset."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidTimeOfDayError(value)
    text = value.strip()
    if not text:
        return None
    if not _HHMM.match(text):
        raise InvalidTimeOfDayError(value)
    return text


class GlobalFilterState(BaseModel):
    """Independent category specs plus three combination flags."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Single-valued on a trade
    status: list[TradeStatus] = Field(default_factory=list)
    direction: list[TradeDirection] = Field(default_factory=list)
    strategy_ids: list[str] = Field(default_factory=list)

    # Multi-valued on a trade
    rule_ids: list[str] = Field(default_factory=list)
    tag_ids: list[str] = Field(default_factory=list)

    days_of_week: list[DayOfWeek] = Field(default_factory=list)

    # Wall-clock windows (HH:MM, 24h)
    start_time: str | None = None
    end_time: str | None = None
    exit_start_time: str | None = None
    exit_end_time: str | None = None

    # Minutes
    min_duration: float | None = None
    max_duration: float | None = None

    # Numeric ranges
    min_volume: float | None = None
    max_volume: float | None = None
    min_pnl: float | None = Field(default=None, alias="minPnL")
    max_pnl: float | None = Field(default=None, alias="maxPnL")
    min_rr: float | None = Field(default=None, alias="minRR")
    max_rr: float | None = Field(default=None, alias="maxRR")
    min_sl_size: float | None = Field(default=None, alias="minSLSize")
    max_sl_size: float | None = Field(default=None, alias="maxSLSize")
    min_actual_risk: float | None = None
    max_actual_risk: float | None = None
    min_actual_risk_pct: float | None = None
    max_actual_risk_pct: float | None = None

    # Mode flags
    include_rules: bool = False
    exclude_mode: bool = False
    filter_logic: FilterLogic = FilterLogic.AND
    cross_strategies: bool = False

    @field_validator(
        "start_time", "end_time", "exit_start_time", "exit_end_time", mode="before"
    )
    @classmethod
    def _time_of_day(cls, value: Any) -> str | None:
        return parse_time_of_day(value)

    # ------------------------------------------------------------------ #
    # Activity                                                             #
    # ------------------------------------------------------------------ #

    @property
    def rules_active(self) -> bool:
        return self.include_rules and bool(self.rule_ids)

    def active_category_keys(self) -> list[str]:
        """Keys of the non-default field groups, in evaluation order.

        Cross-strategy rule matching replaces the strategy category, so
        it is not counted then.  Pruning strategies that own a checked
        rule needs the catalog and is left to the composer, which still
        keeps the rules category in that case.
        """
        keys: list[str] = []
        if self.status:
            keys.append("status")
        if self.direction:
            keys.append("side")
        if self.strategy_ids and not (self.rules_active and self.cross_strategies):
            keys.append("strategy")
        if self.rules_active:
            keys.append("rules")
        if self.tag_ids:
            keys.append("tags")
        if self.days_of_week:
            keys.append("days")
        if self.start_time or self.end_time:
            keys.append("entry_time")
        if self.exit_start_time or self.exit_end_time:
            keys.append("exit_time")
        for key, low, high in self.range_bounds():
            if low is not None or high is not None:
                keys.append(key)
        return keys

    @property
    def active_filter_count(self) -> int:
        return len(self.active_category_keys())

    def range_bounds(self) -> list[tuple[str, float | None, float | None]]:
        """(key, min, max) of every numeric range group, in evaluation order."""
        return [
            ("duration", self.min_duration, self.max_duration),
            ("volume", self.min_volume, self.max_volume),
            ("pnl", self.min_pnl, self.max_pnl),
            ("rr", self.min_rr, self.max_rr),
            ("sl_size", self.min_sl_size, self.max_sl_size),
            ("actual_risk", self.min_actual_risk, self.max_actual_risk),
            ("actual_risk_pct", self.min_actual_risk_pct, self.max_actual_risk_pct),
        ]

    def reset(self) -> GlobalFilterState:
        return GlobalFilterState()


DEFAULT_FILTERS = GlobalFilterState()
