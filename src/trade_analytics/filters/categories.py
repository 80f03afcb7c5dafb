"""Filter categories as a closed set of predicate specs.

Each active field group of a :class:`GlobalFilterState` becomes one
frozen category object.  :func:`evaluate_category` dispatches on the
category type; the composer only ever sees "a list of independent
predicates combined by one boolean policy".

Single-valued categories (status, side, strategy) under AND logic with
more than one selected value can never match: a trade cannot hold two
distinct values of a single-valued field at once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Literal, Union

from trade_analytics.core.catalog import StrategyCatalog, TagCatalog
from trade_analytics.core.enums import FilterLogic, TradeDirection, TradeStatus
from trade_analytics.core.interfaces import MultiplierLookup
from trade_analytics.core.models import Trade
from trade_analytics.journal.metrics import (
    actual_risk_pct,
    actual_risk_points,
    calculate_pnl,
    calculate_r_multiple,
    stop_loss_size,
    unit_multiplier,
)

from .predicates import (
    check_optional_range,
    day_of_week,
    duration_minutes,
    entry_time_matches,
    exit_time_matches,
)
from .rules import RuleResolver
from .state import GlobalFilterState

logger = logging.getLogger(__name__)

RangeKind = Literal[
    "duration", "volume", "pnl", "rr", "sl_size", "actual_risk", "actual_risk_pct"
]


@dataclass(frozen=True)
class FilterContext:
    """Read-only inputs shared by every category during one evaluation."""

    strategies: StrategyCatalog = field(default_factory=StrategyCatalog)
    tags: TagCatalog = field(default_factory=TagCatalog)
    commission_rate: float = 0.0
    display_tz: tzinfo = timezone.utc
    multiplier: MultiplierLookup = unit_multiplier
    resolver: RuleResolver | None = None

    def __post_init__(self) -> None:
        if self.resolver is None:
            object.__setattr__(self, "resolver", RuleResolver(self.strategies))

    def rule_resolver(self) -> RuleResolver:
        if self.resolver is None:
            raise RuntimeError("FilterContext built without a rule resolver")
        return self.resolver


# ------------------------------------------------------------------ #
# Category specs                                                       #
# ------------------------------------------------------------------ #

@dataclass(frozen=True)
class StatusCategory:
    values: frozenset[TradeStatus]
    logic: FilterLogic
    key: str = "status"


@dataclass(frozen=True)
class SideCategory:
    values: frozenset[TradeDirection]
    logic: FilterLogic
    key: str = "side"


@dataclass(frozen=True)
class StrategyCategory:
    strategy_ids: frozenset[str]
    logic: FilterLogic
    key: str = "strategy"


@dataclass(frozen=True)
class RulesCategory:
    rule_ids: tuple[str, ...]
    logic: FilterLogic
    cross_strategies: bool = False
    key: str = "rules"


@dataclass(frozen=True)
class TagsCategory:
    tag_ids: tuple[str, ...]
    logic: FilterLogic
    key: str = "tags"


@dataclass(frozen=True)
class DaysCategory:
    days: frozenset[int]
    key: str = "days"


@dataclass(frozen=True)
class EntryTimeCategory:
    start: str | None
    end: str | None
    key: str = "entry_time"


@dataclass(frozen=True)
class ExitTimeCategory:
    start: str | None
    end: str | None
    key: str = "exit_time"


@dataclass(frozen=True)
class RangeCategory:
    kind: RangeKind
    minimum: float | None
    maximum: float | None

    @property
    def key(self) -> str:
        return self.kind


FilterCategory = Union[
    StatusCategory,
    SideCategory,
    StrategyCategory,
    RulesCategory,
    TagsCategory,
    DaysCategory,
    EntryTimeCategory,
    ExitTimeCategory,
    RangeCategory,
]


# ------------------------------------------------------------------ #
# Evaluation                                                           #
# ------------------------------------------------------------------ #

def _single_valued(value: object, selected: frozenset, logic: FilterLogic) -> bool:
    if logic is FilterLogic.AND and len(selected) > 1:
        return False
    return value in selected


def _multi_valued(held: list[str], selected: tuple[str, ...], logic: FilterLogic) -> bool:
    held_set = set(held)
    if logic is FilterLogic.AND:
        return all(v in held_set for v in selected)
    return any(v in held_set for v in selected)


def range_measure(kind: RangeKind, trade: Trade, ctx: FilterContext) -> float | None:
    """The trade's value for a numeric range category; ``None`` if undefined."""
    match kind:
        case "duration":
            return duration_minutes(trade)
        case "volume":
            return trade.quantity
        case "pnl":
            if not trade.is_closed:
                return None
            return calculate_pnl(trade, ctx.commission_rate, ctx.multiplier)
        case "rr":
            return calculate_r_multiple(trade, ctx.commission_rate, ctx.multiplier)
        case "sl_size":
            return stop_loss_size(trade)
        case "actual_risk":
            return actual_risk_points(trade)
        case "actual_risk_pct":
            return actual_risk_pct(trade)
    raise ValueError(f"Unknown range category: {kind!r}")


def evaluate_category(category: FilterCategory, trade: Trade, ctx: FilterContext) -> bool:
    """Whether *trade* satisfies one category."""
    match category:
        case StatusCategory(values=values, logic=logic):
            return _single_valued(trade.status, values, logic)

        case SideCategory(values=values, logic=logic):
            return _single_valued(trade.direction, values, logic)

        case StrategyCategory(strategy_ids=ids, logic=logic):
            if trade.playbook_id is None:
                return False
            if len(ctx.strategies) and trade.playbook_id not in ctx.strategies:
                return False
            return _single_valued(trade.playbook_id, ids, logic)

        case RulesCategory(rule_ids=ids, logic=logic, cross_strategies=cross):
            return ctx.rule_resolver().matches(trade, list(ids), logic, cross)

        case TagsCategory(tag_ids=ids, logic=logic):
            known = tuple(ctx.tags.known(ids))
            if logic is FilterLogic.AND and len(known) < len(ids):
                return False
            return _multi_valued(trade.tags, known, logic)

        case DaysCategory(days=days):
            return day_of_week(trade) in days

        case EntryTimeCategory(start=start, end=end):
            return entry_time_matches(trade, start, end, ctx.display_tz)

        case ExitTimeCategory(start=start, end=end):
            return exit_time_matches(trade, start, end, ctx.display_tz)

        case RangeCategory(kind=kind, minimum=low, maximum=high):
            return check_optional_range(range_measure(kind, trade, ctx), low, high)

    raise TypeError(f"Unsupported filter category: {category!r}")


# ------------------------------------------------------------------ #
# Construction                                                         #
# ------------------------------------------------------------------ #

def effective_strategy_ids(
    state: GlobalFilterState, resolver: RuleResolver
) -> list[str]:
    """Strategy ids that filter on their own.

    Checking a rule also selects its owning strategy, so with rules
    active a selected strategy that owns a checked rule is matched only
    through the rules category.  In cross-strategy mode with rules active the
    strategy filter gives way to signature matching entirely.
    """
    if not state.rules_active:
        return list(state.strategy_ids)
    if state.cross_strategies:
        return []
    owners = resolver.strategies_owning(state.rule_ids)
    implied = [sid for sid in state.strategy_ids if sid in owners]
    if implied:
        logger.debug("Strategies covered by rule selections: %s", implied)
    return [sid for sid in state.strategy_ids if sid not in owners]


def build_categories(
    state: GlobalFilterState, ctx: FilterContext
) -> list[FilterCategory]:
    """Active categories of *state*, in fixed evaluation order."""
    logic = state.filter_logic
    categories: list[FilterCategory] = []

    if state.status:
        categories.append(StatusCategory(frozenset(state.status), logic))
    if state.direction:
        categories.append(SideCategory(frozenset(state.direction), logic))

    strategy_ids = effective_strategy_ids(state, ctx.rule_resolver())
    if strategy_ids:
        categories.append(StrategyCategory(frozenset(strategy_ids), logic))

    if state.rules_active:
        categories.append(
            RulesCategory(tuple(state.rule_ids), logic, state.cross_strategies)
        )
    if state.tag_ids:
        categories.append(TagsCategory(tuple(state.tag_ids), logic))
    if state.days_of_week:
        categories.append(DaysCategory(frozenset(state.days_of_week)))
    if state.start_time or state.end_time:
        categories.append(EntryTimeCategory(state.start_time, state.end_time))
    if state.exit_start_time or state.exit_end_time:
        categories.append(ExitTimeCategory(state.exit_start_time, state.exit_end_time))

    for kind, low, high in state.range_bounds():
        if low is not None or high is not None:
            categories.append(RangeCategory(kind, low, high))

    logger.debug(
        "Active filter categories: %s", [c.key for c in categories]
    )
    return categories
