"""Journal analytics facade.

Wires the trade store, the strategy/tag catalogs and settings to the
filter composer and the metrics engine.  Holds the current filter state
and date range; every read re-runs the pure pipeline over a fresh store
snapshot:

    store snapshot -> FilterComposer -> filtered trades -> DashboardStats

Callers with large journals memoize on (store version, filters, range).
"""

from __future__ import annotations

from typing import Iterable

from trade_analytics.core.catalog import StrategyCatalog, TagCatalog
from trade_analytics.core.config import Settings
from trade_analytics.core.interfaces import ITradeStore
from trade_analytics.core.models import (
    DateRange,
    Strategy,
    Tag,
    TagCategory,
    Trade,
    UserSettings,
)
from trade_analytics.filters.composer import FilterComposer
from trade_analytics.filters.state import GlobalFilterState
from trade_analytics.journal.metrics import table_multiplier
from trade_analytics.journal.summary import DashboardStats, compute_dashboard_stats
from trade_analytics.observability.logger import get_logger, new_evaluation_id

logger = get_logger(__name__)


class TradeAnalytics:
    """Current-selection view over a trade journal.

    Parameters
    ----------
    store : ITradeStore
        Source of trades; read as a snapshot on every evaluation.
    strategies : Iterable[Strategy]
        Strategy/rule catalog.
    tags, tag_categories : Iterable[Tag], Iterable[TagCategory]
        Tag catalog.
    settings : Settings
        Library configuration.
    user_settings : UserSettings | None
        Per-user commission rate; defaults to the configured one.
    """

    def __init__(
        self,
        store: ITradeStore,
        strategies: Iterable[Strategy] = (),
        tags: Iterable[Tag] = (),
        tag_categories: Iterable[TagCategory] = (),
        settings: Settings | None = None,
        user_settings: UserSettings | None = None,
    ) -> None:
        self._store = store
        self._settings = settings or Settings()
        self._user = user_settings or self._settings.user_settings()
        self._strategies = StrategyCatalog(strategies)
        self._tags = TagCatalog(tags, tag_categories)
        self._filters = GlobalFilterState()
        self._date_range = DateRange.all_time()

    # ------------------------------------------------------------------ #
    # Selection state                                                      #
    # ------------------------------------------------------------------ #

    @property
    def filters(self) -> GlobalFilterState:
        return self._filters

    def set_filters(self, filters: GlobalFilterState) -> None:
        self._filters = filters

    def reset_filters(self) -> None:
        self._filters = self._filters.reset()

    @property
    def active_filter_count(self) -> int:
        return self._filters.active_filter_count

    @property
    def date_range(self) -> DateRange:
        return self._date_range

    def set_date_range(self, date_range: DateRange) -> None:
        self._date_range = date_range

    def set_strategies(self, strategies: Iterable[Strategy]) -> None:
        self._strategies = StrategyCatalog(strategies)

    def set_tags(
        self, tags: Iterable[Tag], tag_categories: Iterable[TagCategory] = ()
    ) -> None:
        self._tags = TagCatalog(tags, tag_categories)

    # ------------------------------------------------------------------ #
    # Evaluation                                                           #
    # ------------------------------------------------------------------ #

    def _composer(self) -> FilterComposer:
        return FilterComposer(
            strategies=self._strategies,
            tags=self._tags,
            settings=self._settings,
            user_settings=self._user,
        )

    def filtered_trades(self) -> list[Trade]:
        """Trades in the date range that pass the current filters."""
        composer = self._composer()
        trades = self._store.list()
        result = composer.apply(trades, self._filters, self._date_range)
        logger.debug(
            "filtered_trades",
            total=len(trades),
            selected=len(result),
            **composer.describe(self._filters),
        )
        return result

    def stats(self) -> DashboardStats:
        """Metrics bundle for the current selection."""
        eid = new_evaluation_id()
        settings = self._settings.model_copy(
            update={
                "analytics": self._settings.analytics.model_copy(
                    update={"commission_per_unit": self._user.commission_per_unit}
                )
            }
        )
        selected = self.filtered_trades()
        stats = compute_dashboard_stats(
            selected,
            settings,
            table_multiplier(settings.analytics.instrument_multipliers),
        )
        logger.info(
            "dashboard_stats",
            evaluation=eid,
            trades=stats.count,
            total_pnl=stats.total_pnl,
            zella_score=stats.zella_score,
        )
        return stats
