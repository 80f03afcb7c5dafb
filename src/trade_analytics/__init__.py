"""Trade journal analytics engine.

Filters a journal of trades through a composable filter state and
derives performance metrics, streaks, a composite score and equity
curve data from the selection.
"""

from .analytics import TradeAnalytics
from .core.config import Settings, load_settings
from .core.enums import FilterLogic, TradeDirection, TradeStatus
from .core.models import DateRange, Strategy, Tag, TagCategory, Trade, UserSettings
from .filters import FilterComposer, GlobalFilterState, filter_trades
from .journal import DashboardStats, compute_dashboard_stats
from .storage.memory import InMemoryTradeStore

__version__ = "0.1.0"

__all__ = [
    "TradeAnalytics",
    "Settings",
    "load_settings",
    "FilterLogic",
    "TradeDirection",
    "TradeStatus",
    "DateRange",
    "Strategy",
    "Tag",
    "TagCategory",
    "Trade",
    "UserSettings",
    "FilterComposer",
    "GlobalFilterState",
    "filter_trades",
    "DashboardStats",
    "compute_dashboard_stats",
    "InMemoryTradeStore",
]
