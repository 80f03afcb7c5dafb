"""Daily cumulative P&L and drawdown series.

Walks every calendar day (reference timezone) from the first to the
last closed trade's entry day.  Days without trades are still emitted
with zero daily P&L so the curve has no gaps; they carry the running
totals forward unchanged.

Drawdown is measured against a high-water mark that starts at 0 (flat
equity), so it is never positive.

Usage::

    points = build_chart_data(closed, commission_rate=0.5, tz=ZoneInfo("America/New_York"))
    bounds = chart_bounds(points)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, timedelta, timezone, tzinfo
from typing import Any, Iterable

from trade_analytics.core.interfaces import MultiplierLookup
from trade_analytics.core.models import Trade

from .metrics import unit_multiplier
from .streaks import daily_pnl


@dataclass(frozen=True)
class ChartPoint:
    date: date
    daily_pnl: float
    cumulative_pnl: float
    drawdown: float  # cumulative - running peak, <= 0
    has_trades: bool

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


@dataclass(frozen=True)
class ChartBounds:
    min_daily: float = 0.0
    max_daily: float = 0.0
    min_cumulative: float = 0.0
    max_cumulative: float = 0.0
    min_drawdown: float = 0.0


def build_chart_data(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    tz: tzinfo = timezone.utc,
    multiplier: MultiplierLookup = unit_multiplier,
) -> list[ChartPoint]:
    """One :class:`ChartPoint` per calendar day; open trades are ignored."""
    days = daily_pnl(trades, commission_rate, tz, multiplier)
    if not days:
        return []

    first = min(days)
    last = max(days)

    points: list[ChartPoint] = []
    cumulative = 0.0
    peak = 0.0
    day = first
    while day <= last:
        traded = day in days
        pnl = days.get(day, 0.0)
        if traded:
            cumulative = round(cumulative + pnl, 2)
        peak = max(peak, cumulative)
        points.append(
            ChartPoint(
                date=day,
                daily_pnl=pnl,
                cumulative_pnl=cumulative,
                drawdown=round(cumulative - peak, 2),
                has_trades=traded,
            )
        )
        day += timedelta(days=1)
    return points


def chart_bounds(points: Iterable[ChartPoint]) -> ChartBounds:
    """Axis extents for the three charts; each range includes 0."""
    min_daily = max_daily = min_cum = max_cum = min_dd = 0.0
    for p in points:
        min_daily = min(min_daily, p.daily_pnl)
        max_daily = max(max_daily, p.daily_pnl)
        min_cum = min(min_cum, p.cumulative_pnl)
        max_cum = max(max_cum, p.cumulative_pnl)
        min_dd = min(min_dd, p.drawdown)
    return ChartBounds(
        min_daily=min_daily,
        max_daily=max_daily,
        min_cumulative=min_cum,
        max_cumulative=max_cum,
        min_drawdown=min_dd,
    )
