"""Filter composer: turns a filter state and date range into a trade subset.

Algorithm
---------
1. Date gate: keep trades whose entry calendar day, in the reference
   timezone, falls inside the date range.  Always applied, never
   inverted.
2. Build the active categories (inactive ones do not participate).
3. Each category decides its own within-category combination.
4. Combine across categories: AND needs every category, OR any one.
   No active categories means everything past the date gate passes.
5. Exclude mode inverts the combined category match.
6. Survivors keep the store's order.

Usage::

    composer = FilterComposer(strategies=catalog, tags=tag_catalog,
                              settings=settings)
    subset = composer.apply(trades, state, DateRange(start_date=..., end_date=...))
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Iterable

from trade_analytics.core.catalog import StrategyCatalog, TagCatalog
from trade_analytics.core.config import Settings
from trade_analytics.core.enums import FilterLogic
from trade_analytics.core.interfaces import MultiplierLookup
from trade_analytics.core.models import DateRange, Trade, UserSettings
from trade_analytics.core.timeutils import calendar_day
from trade_analytics.journal.metrics import table_multiplier

from .categories import FilterCategory, FilterContext, build_categories, evaluate_category
from .rules import RuleResolver
from .state import GlobalFilterState

logger = logging.getLogger(__name__)


def apply_date_range(
    trades: Iterable[Trade], date_range: DateRange | None, tz: tzinfo
) -> list[Trade]:
    """Trades whose entry calendar day in *tz* lies within *date_range*."""
    trades = list(trades)
    if date_range is None or date_range.is_all_time:
        return trades
    return [t for t in trades if date_range.contains(calendar_day(t.entry_date, tz))]


def combine(
    trade: Trade,
    categories: list[FilterCategory],
    ctx: FilterContext,
    logic: FilterLogic,
) -> bool:
    """Cross-category match of one trade (before exclude mode)."""
    if logic is FilterLogic.AND:
        return all(evaluate_category(c, trade, ctx) for c in categories)
    return any(evaluate_category(c, trade, ctx) for c in categories)


class FilterComposer:
    """Apply :class:`GlobalFilterState` + :class:`DateRange` to trades.

    Parameters
    ----------
    strategies : StrategyCatalog
        Snapshot used for rule resolution and stale-id detection.
    tags : TagCatalog
        Snapshot used for stale tag-id detection.
    settings : Settings
        Timezones, instrument multipliers and default commission rate.
    user_settings : UserSettings | None
        Per-user commission rate; overrides the settings default.
    """

    def __init__(
        self,
        strategies: StrategyCatalog | None = None,
        tags: TagCatalog | None = None,
        settings: Settings | None = None,
        user_settings: UserSettings | None = None,
        multiplier: MultiplierLookup | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._strategies = strategies or StrategyCatalog()
        self._tags = tags or TagCatalog()
        user = user_settings or self._settings.user_settings()
        self._ctx = FilterContext(
            strategies=self._strategies,
            tags=self._tags,
            commission_rate=user.commission_per_unit,
            display_tz=self._settings.time.display_tz,
            multiplier=multiplier
            or table_multiplier(self._settings.analytics.instrument_multipliers),
            resolver=RuleResolver(self._strategies),
        )

    @property
    def context(self) -> FilterContext:
        return self._ctx

    @property
    def reference_tz(self) -> tzinfo:
        return self._settings.time.reference_tz

    def categories(self, state: GlobalFilterState) -> list[FilterCategory]:
        return build_categories(state, self._ctx)

    def describe(self, state: GlobalFilterState) -> dict[str, object]:
        """Loggable summary of what *state* filters on."""
        return {
            "categories": [c.key for c in self.categories(state)],
            "logic": state.filter_logic.value,
            "exclude_mode": state.exclude_mode,
            "tags_by_category": {
                self._tags.category_name(cid): ids
                for cid, ids in self._tags.group_by_category(state.tag_ids).items()
            },
        }

    def matches(self, trade: Trade, state: GlobalFilterState) -> bool:
        """Category verdict for one trade, exclude mode applied."""
        categories = self.categories(state)
        if not categories:
            return True
        matched = combine(trade, categories, self._ctx, state.filter_logic)
        return not matched if state.exclude_mode else matched

    def apply(
        self,
        trades: Iterable[Trade],
        state: GlobalFilterState | None = None,
        date_range: DateRange | None = None,
    ) -> list[Trade]:
        state = state or GlobalFilterState()
        in_range = apply_date_range(trades, date_range, self.reference_tz)

        categories = self.categories(state)
        if not categories:
            return in_range

        logic = state.filter_logic
        result = [
            t
            for t in in_range
            if combine(t, categories, self._ctx, logic) != state.exclude_mode
        ]
        logger.debug(
            "Filter %s/%s%s: %d of %d trades in range",
            logic.value,
            ",".join(c.key for c in categories),
            " (exclude)" if state.exclude_mode else "",
            len(result),
            len(in_range),
        )
        return result


def filter_trades(
    trades: Iterable[Trade],
    state: GlobalFilterState | None = None,
    date_range: DateRange | None = None,
    *,
    strategies: Iterable | None = None,
    tags: Iterable | None = None,
    settings: Settings | None = None,
    user_settings: UserSettings | None = None,
) -> list[Trade]:
    """Functional shortcut around :class:`FilterComposer`.

    *strategies* / *tags* accept catalogs or plain iterables of
    ``Strategy`` / ``Tag`` records.
    """
    if strategies is not None and not isinstance(strategies, StrategyCatalog):
        strategies = StrategyCatalog(strategies)
    if tags is not None and not isinstance(tags, TagCatalog):
        tags = TagCatalog(tags)
    composer = FilterComposer(
        strategies=strategies,
        tags=tags,
        settings=settings,
        user_settings=user_settings,
    )
    return composer.apply(trades, state, date_range)
