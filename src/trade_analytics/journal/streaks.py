"""Win/loss streaks at trade and day granularity.

Trade level: each closed trade is a win (net P&L > 0), a loss (< 0) or
neutral (exactly 0).  A neutral trade resets both running streaks
without starting a new one.

Day level: trades are grouped by entry calendar day in the reference
timezone and a day is won or lost by the sign of its summed net P&L.
A zero-P&L day breaks both streak types.

Current streaks are signed: +N for N consecutive wins ending at the
most recent trade/day, -N for losses, 0 when the latest one is neutral.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import date, timezone, tzinfo
from typing import Iterable

from trade_analytics.core.interfaces import MultiplierLookup
from trade_analytics.core.models import Trade
from trade_analytics.core.timeutils import calendar_day

from .metrics import calculate_pnl, closed_trades, sort_by_entry, unit_multiplier


@dataclass(frozen=True)
class StreakStats:
    current_trade_streak: int = 0
    max_trade_win_streak: int = 0
    max_trade_loss_streak: int = 0
    current_day_streak: int = 0
    max_day_win_streak: int = 0
    max_day_loss_streak: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def signed_run_stats(values: Iterable[float]) -> tuple[int, int, int]:
    """(current, max_win, max_loss) for a chronological series of P&Ls."""
    current = 0
    max_win = 0
    max_loss = 0
    for value in values:
        sign = _sign(value)
        if sign > 0:
            current = current + 1 if current > 0 else 1
            max_win = max(max_win, current)
        elif sign < 0:
            current = current - 1 if current < 0 else -1
            max_loss = max(max_loss, -current)
        else:
            current = 0
    return current, max_win, max_loss


def daily_pnl(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    tz: tzinfo = timezone.utc,
    multiplier: MultiplierLookup = unit_multiplier,
) -> dict[date, float]:
    """Summed net P&L per entry calendar day, in chronological order."""
    days: dict[date, float] = defaultdict(float)
    for t in sort_by_entry(closed_trades(trades)):
        days[calendar_day(t.entry_date, tz)] += calculate_pnl(t, commission_rate, multiplier)
    return {day: round(days[day], 2) for day in sorted(days)}


def calculate_streaks(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    tz: tzinfo = timezone.utc,
    multiplier: MultiplierLookup = unit_multiplier,
) -> StreakStats:
    """Trade and day streaks over the closed trades in *trades*.

    Open trades are ignored.  Trades are walked in entry-time order
    (stable for equal timestamps).
    """
    ordered = sort_by_entry(closed_trades(trades))
    if not ordered:
        return StreakStats()

    trade_pnls = [calculate_pnl(t, commission_rate, multiplier) for t in ordered]
    current_trade, max_trade_win, max_trade_loss = signed_run_stats(trade_pnls)

    days = daily_pnl(ordered, commission_rate, tz, multiplier)
    current_day, max_day_win, max_day_loss = signed_run_stats(days.values())

    return StreakStats(
        current_trade_streak=current_trade,
        max_trade_win_streak=max_trade_win,
        max_trade_loss_streak=max_trade_loss,
        current_day_streak=current_day,
        max_day_win_streak=max_day_win,
        max_day_loss_streak=max_day_loss,
    )
