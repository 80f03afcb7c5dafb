"""Dashboard metrics bundle.

Aggregates every derived statistic the dashboard needs from one
(already filtered) trade collection.  Only closed trades are counted,
apart from the open-trade tally.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable

from trade_analytics.core.config import Settings
from trade_analytics.core.interfaces import MultiplierLookup
from trade_analytics.core.models import Trade

from .equity_curve import ChartBounds, ChartPoint, build_chart_data, chart_bounds
from .metrics import (
    DayStats,
    HoldTimes,
    RAverages,
    calculate_adjusted_win_rate,
    calculate_avg_hold_times,
    calculate_avg_r,
    calculate_avg_trade_pnl,
    calculate_avg_win_loss,
    calculate_day_stats,
    calculate_expectancy,
    calculate_gross_stats,
    calculate_max_drawdown,
    calculate_pnl,
    calculate_profit_factor,
    calculate_total_commissions,
    closed_trades,
    table_multiplier,
)
from .score import ScoreDetail, calculate_zella_score
from .streaks import StreakStats, calculate_streaks, daily_pnl

logger = logging.getLogger(__name__)


@dataclass
class DashboardStats:
    """Everything the dashboard renders for one trade selection."""

    total_pnl: float = 0.0
    count: int = 0
    profit_factor: float | None = None
    avg_win: float = 0.0
    avg_loss: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0

    avg_trade_pnl: float = 0.0
    expectancy: float = 0.0
    total_commissions: float = 0.0
    max_drawdown: float = 0.0
    open_trades: int = 0

    wins_count: int = 0
    losses_count: int = 0
    break_even_count: int = 0
    adjusted_win_rate: int = 0

    winning_days: int = 0
    losing_days: int = 0
    break_even_days: int = 0
    adjusted_day_win_rate: int = 0
    day_stats: DayStats = field(default_factory=DayStats)

    hold_times: HoldTimes = field(default_factory=HoldTimes)
    r_averages: RAverages = field(default_factory=RAverages)

    zella_score: float = 0.0
    zella_details: list[ScoreDetail] = field(default_factory=list)
    streaks: StreakStats = field(default_factory=StreakStats)

    chart_data: list[ChartPoint] = field(default_factory=list)
    chart_bounds: ChartBounds = field(default_factory=ChartBounds)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_pnl": self.total_pnl,
            "count": self.count,
            "profit_factor": self.profit_factor,
            "avg_win": self.avg_win,
            "avg_loss": self.avg_loss,
            "gross_profit": self.gross_profit,
            "gross_loss": self.gross_loss,
            "avg_trade_pnl": self.avg_trade_pnl,
            "expectancy": self.expectancy,
            "total_commissions": self.total_commissions,
            "max_drawdown": self.max_drawdown,
            "open_trades": self.open_trades,
            "wins_count": self.wins_count,
            "losses_count": self.losses_count,
            "break_even_count": self.break_even_count,
            "adjusted_win_rate": self.adjusted_win_rate,
            "winning_days": self.winning_days,
            "losing_days": self.losing_days,
            "break_even_days": self.break_even_days,
            "adjusted_day_win_rate": self.adjusted_day_win_rate,
            **asdict(self.day_stats),
            "avg_hold_minutes": asdict(self.hold_times),
            "r_averages": asdict(self.r_averages),
            "zella_score": self.zella_score,
            "zella_details": [d.to_dict() for d in self.zella_details],
            **self.streaks.to_dict(),
            "chart_data": [p.to_dict() for p in self.chart_data],
            "chart_bounds": asdict(self.chart_bounds),
        }


def compute_dashboard_stats(
    trades: Iterable[Trade],
    settings: Settings | None = None,
    multiplier: MultiplierLookup | None = None,
) -> DashboardStats:
    """Build the full metrics bundle for *trades*.

    Commission rate, drawdown goal, reference timezone and instrument
    multipliers come from *settings* (defaults when omitted).
    """
    settings = settings or Settings()
    rate = settings.analytics.commission_per_unit
    tz = settings.time.reference_tz
    if multiplier is None:
        multiplier = table_multiplier(settings.analytics.instrument_multipliers)

    trades = list(trades)
    closed = closed_trades(trades)
    pnls = [calculate_pnl(t, rate, multiplier) for t in closed]

    wins = sum(1 for p in pnls if p > 0)
    losses = sum(1 for p in pnls if p < 0)

    days = daily_pnl(closed, rate, tz, multiplier)
    winning_days = sum(1 for p in days.values() if p > 0)
    losing_days = sum(1 for p in days.values() if p < 0)
    decisive_days = winning_days + losing_days

    gross = calculate_gross_stats(closed, rate, multiplier)
    avg = calculate_avg_win_loss(closed, rate, multiplier)
    score = calculate_zella_score(
        closed, rate, settings.analytics.max_drawdown_goal, multiplier
    )
    chart = build_chart_data(closed, rate, tz, multiplier)

    stats = DashboardStats(
        total_pnl=round(sum(pnls), 2),
        count=len(closed),
        profit_factor=calculate_profit_factor(closed, rate, multiplier),
        avg_win=avg.avg_win,
        avg_loss=avg.avg_loss,
        gross_profit=gross.gross_profit,
        gross_loss=gross.gross_loss,
        avg_trade_pnl=calculate_avg_trade_pnl(closed, rate, multiplier),
        expectancy=calculate_expectancy(closed, rate, multiplier),
        total_commissions=calculate_total_commissions(closed, rate),
        max_drawdown=calculate_max_drawdown(closed, rate, multiplier),
        open_trades=len(trades) - len(closed),
        wins_count=wins,
        losses_count=losses,
        break_even_count=len(pnls) - wins - losses,
        adjusted_win_rate=calculate_adjusted_win_rate(closed, rate, multiplier),
        winning_days=winning_days,
        losing_days=losing_days,
        break_even_days=len(days) - decisive_days,
        adjusted_day_win_rate=(
            round(winning_days / decisive_days * 100) if decisive_days else 0
        ),
        day_stats=calculate_day_stats(days),
        hold_times=calculate_avg_hold_times(closed, rate, multiplier),
        r_averages=calculate_avg_r(closed, rate, multiplier),
        zella_score=score.score,
        zella_details=score.details,
        streaks=calculate_streaks(closed, rate, tz, multiplier),
        chart_data=chart,
        chart_bounds=chart_bounds(chart),
    )
    logger.debug(
        "Dashboard stats: %d closed trades, total P&L %.2f", stats.count, stats.total_pnl
    )
    return stats
