"""Per-trade and aggregate performance metrics.

All functions are pure.  Monetary values are net of commission and
rounded to cents per trade, so a trade that nets exactly zero is a
break-even rather than a floating-point dust win or loss.

Commission policy: a positive per-unit ``commission_rate`` (from user
settings) replaces the trade's own flat ``commission`` field.

Undefined ratios (zero risk, zero loss, zero drawdown) are returned as
``None``, never as NaN or infinity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from trade_analytics.core.enums import TradeDirection
from trade_analytics.core.interfaces import MultiplierLookup
from trade_analytics.core.models import Trade
from trade_analytics.core.timeutils import as_utc

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------ #
# Instrument multipliers                                               #
# ------------------------------------------------------------------ #

def unit_multiplier(symbol: str) -> float:
    """Default lookup: every instrument moves 1 currency unit per point."""
    return 1.0


def table_multiplier(table: Mapping[str, float]) -> MultiplierLookup:
    """Lookup by exact upper-cased symbol, falling back to 1."""
    normalized = {k.upper(): float(v) for k, v in table.items()}

    def lookup(symbol: str) -> float:
        return normalized.get(symbol.upper(), 1.0)

    return lookup


# ------------------------------------------------------------------ #
# Per-trade                                                            #
# ------------------------------------------------------------------ #

def effective_commission(trade: Trade, commission_rate: float = 0.0) -> float:
    if commission_rate > 0:
        return commission_rate * trade.quantity
    return trade.commission or 0.0


def calculate_pnl(
    trade: Trade,
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> float:
    """Net P&L of a closed trade.  Open trades yield 0.0."""
    if trade.exit_price is None:
        return 0.0
    gross = (
        (trade.exit_price - trade.entry_price)
        * trade.quantity
        * multiplier(trade.symbol)
        * trade.direction.sign
    )
    return round(gross - effective_commission(trade, commission_rate), 2)


def initial_risk_amount(
    trade: Trade, multiplier: MultiplierLookup = unit_multiplier
) -> float | None:
    """Currency risk implied by the initial stop (1R)."""
    if trade.initial_stop_loss is None:
        return None
    return (
        abs(trade.entry_price - trade.initial_stop_loss)
        * trade.quantity
        * multiplier(trade.symbol)
    )


def calculate_r_multiple(
    trade: Trade,
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> float | None:
    """Net P&L expressed in units of initial risk.

    Returns ``None`` for open trades, trades without a stop, and trades
    whose stop sits at the entry price (zero risk).
    """
    if trade.exit_price is None:
        return None
    risk = initial_risk_amount(trade, multiplier)
    if not risk:
        return None
    return round(calculate_pnl(trade, commission_rate, multiplier) / risk, 2)


def calculate_net_mfe(
    trade: Trade,
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> float:
    """Max favourable excursion in currency, net of commission."""
    mult = multiplier(trade.symbol)
    gross = 0.0
    if trade.direction is TradeDirection.LONG:
        if trade.highest_price_reached is not None:
            gross = (trade.highest_price_reached - trade.entry_price) * trade.quantity * mult
    elif trade.lowest_price_reached is not None:
        gross = (trade.entry_price - trade.lowest_price_reached) * trade.quantity * mult
    return round(gross - effective_commission(trade, commission_rate), 2)


def calculate_net_mae(
    trade: Trade,
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> float:
    """Max adverse excursion as the P&L at the worst point (usually negative)."""
    mult = multiplier(trade.symbol)
    gross = 0.0
    if trade.direction is TradeDirection.LONG:
        if trade.lowest_price_reached is not None:
            gross = (trade.lowest_price_reached - trade.entry_price) * trade.quantity * mult
    elif trade.highest_price_reached is not None:
        gross = (trade.entry_price - trade.highest_price_reached) * trade.quantity * mult
    return round(gross - effective_commission(trade, commission_rate), 2)


# ------------------------------------------------------------------ #
# Price-unit risk measures (used by range filters)                     #
# ------------------------------------------------------------------ #

def stop_loss_size(trade: Trade) -> float | None:
    """Distance between entry and initial stop, in price points."""
    if trade.initial_stop_loss is None:
        return None
    return abs(trade.entry_price - trade.initial_stop_loss)


def actual_risk_points(trade: Trade) -> float:
    """How far price moved against the entry, in price points.

    A missing extreme counts as "never moved against", i.e. 0.
    """
    if trade.direction is TradeDirection.LONG:
        low = trade.lowest_price_reached
        return trade.entry_price - (low if low is not None else trade.entry_price)
    high = trade.highest_price_reached
    return (high if high is not None else trade.entry_price) - trade.entry_price


def actual_risk_pct(trade: Trade) -> float | None:
    """Adverse move as a percentage of the stop distance."""
    sl_size = stop_loss_size(trade)
    if not sl_size:
        return None
    return actual_risk_points(trade) / sl_size * 100


@dataclass(frozen=True)
class TradeRiskMetrics:
    """Risk/reward figures for one trade, in currency.

    ``initial_risk_amt`` and ``actual_risk_amt`` include commission:
    getting stopped out costs the commission too.
    """

    initial_risk_amt: float
    actual_risk_amt: float
    best_pnl: float
    actual_risk_pct: float
    best_rr: float


def calculate_trade_risk_metrics(
    trade: Trade,
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> TradeRiskMetrics:
    mult = multiplier(trade.symbol)
    qty = trade.quantity
    entry = trade.entry_price
    comm = effective_commission(trade, commission_rate)

    gross_risk = initial_risk_amount(trade, multiplier)
    initial_risk = gross_risk + comm if gross_risk else 0.0

    actual_risk = max(0.0, actual_risk_points(trade) * qty * mult) + comm

    if trade.direction is TradeDirection.LONG:
        best_exit = _first_set(trade.best_exit_price, trade.highest_price_reached, entry)
        gross_best = (best_exit - entry) * qty * mult
    else:
        best_exit = _first_set(trade.best_exit_price, trade.lowest_price_reached, entry)
        gross_best = (entry - best_exit) * qty * mult
    best_pnl = gross_best - comm

    return TradeRiskMetrics(
        initial_risk_amt=initial_risk,
        actual_risk_amt=actual_risk,
        best_pnl=best_pnl,
        actual_risk_pct=actual_risk / initial_risk * 100 if initial_risk > 0 else 0.0,
        best_rr=best_pnl / initial_risk if initial_risk > 0 else 0.0,
    )


def _first_set(*values: float | None) -> float:
    for value in values:
        if value is not None:
            return value
    return 0.0


# ------------------------------------------------------------------ #
# Aggregates                                                           #
# ------------------------------------------------------------------ #

def closed_trades(trades: Iterable[Trade]) -> list[Trade]:
    """Trades with an exit price, in input order."""
    return [t for t in trades if t.is_closed]


def sort_by_entry(trades: Iterable[Trade]) -> list[Trade]:
    """Stable ascending sort on entry time."""
    return sorted(trades, key=lambda t: as_utc(t.entry_date))


@dataclass(frozen=True)
class GrossStats:
    gross_profit: float
    gross_loss: float  # Positive magnitude of summed losses


@dataclass(frozen=True)
class AvgWinLoss:
    avg_win: float
    avg_loss: float  # Negative (or 0.0 when there are no losers)


@dataclass(frozen=True)
class Extremes:
    largest_win: float
    largest_loss: float


def calculate_gross_stats(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> GrossStats:
    profit = 0.0
    loss = 0.0
    for t in closed_trades(trades):
        pnl = calculate_pnl(t, commission_rate, multiplier)
        if pnl > 0:
            profit += pnl
        elif pnl < 0:
            loss += abs(pnl)
    return GrossStats(gross_profit=round(profit, 2), gross_loss=round(loss, 2))


def calculate_profit_factor(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> float | None:
    """Gross profit / gross loss.  ``None`` when nothing was lost."""
    gross = calculate_gross_stats(trades, commission_rate, multiplier)
    if gross.gross_loss == 0:
        return None
    return round(gross.gross_profit / gross.gross_loss, 2)


def calculate_avg_win_loss(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> AvgWinLoss:
    """Mean winner and mean loser; exact break-evens count as neither."""
    pnls = [calculate_pnl(t, commission_rate, multiplier) for t in closed_trades(trades)]
    wins = [p for p in pnls if p > 0]
    losses = [p for p in pnls if p < 0]
    return AvgWinLoss(
        avg_win=sum(wins) / len(wins) if wins else 0.0,
        avg_loss=sum(losses) / len(losses) if losses else 0.0,
    )


def calculate_extremes(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> Extremes:
    largest_win = 0.0
    largest_loss = 0.0
    for t in closed_trades(trades):
        pnl = calculate_pnl(t, commission_rate, multiplier)
        largest_win = max(largest_win, pnl)
        largest_loss = min(largest_loss, pnl)
    return Extremes(largest_win=largest_win, largest_loss=largest_loss)


def calculate_win_rate(trades: Iterable[Trade]) -> int:
    """Whole-percent win rate from user-asserted status.

    Break-even statuses are excluded from both numerator and denominator.
    """
    decisive = [t for t in trades if t.status.is_win or t.status.is_loss]
    if not decisive:
        return 0
    winners = sum(1 for t in decisive if t.status.is_win)
    return round(winners / len(decisive) * 100)


def calculate_adjusted_win_rate(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> int:
    """Whole-percent win rate from net P&L sign, ignoring exact zeros."""
    pnls = [calculate_pnl(t, commission_rate, multiplier) for t in closed_trades(trades)]
    wins = sum(1 for p in pnls if p > 0)
    losses = sum(1 for p in pnls if p < 0)
    if wins + losses == 0:
        return 0
    return round(wins / (wins + losses) * 100)


def calculate_max_drawdown(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> float:
    """Largest peak-to-trough fall of trade-by-trade equity (>= 0).

    Equity starts flat at 0, so an opening losing run counts as drawdown.
    """
    peak = 0.0
    equity = 0.0
    max_dd = 0.0
    for t in sort_by_entry(closed_trades(trades)):
        equity += calculate_pnl(t, commission_rate, multiplier)
        peak = max(peak, equity)
        max_dd = max(max_dd, peak - equity)
    return round(max_dd, 2)


def calculate_recovery_factor(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> float | None:
    """Net profit / max drawdown.  ``None`` when there was no drawdown."""
    trades = closed_trades(trades)
    total = sum(calculate_pnl(t, commission_rate, multiplier) for t in trades)
    max_dd = calculate_max_drawdown(trades, commission_rate, multiplier)
    if max_dd == 0:
        return None
    return round(total / max_dd, 2)


def calculate_avg_actual_risk_pct(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> float:
    """Average of actual risk taken as a percentage of planned risk."""
    ratios: list[float] = []
    for t in trades:
        if t.initial_stop_loss is None:
            continue
        metrics = calculate_trade_risk_metrics(t, commission_rate, multiplier)
        if metrics.initial_risk_amt > 0:
            ratios.append(metrics.actual_risk_amt / metrics.initial_risk_amt)
    if not ratios:
        return 0.0
    return sum(ratios) / len(ratios) * 100


def calculate_total_commissions(
    trades: Iterable[Trade], commission_rate: float = 0.0
) -> float:
    """Commission paid across the closed trades."""
    return round(
        sum(effective_commission(t, commission_rate) for t in closed_trades(trades)), 2
    )


def calculate_avg_trade_pnl(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> float:
    """Net P&L per closed trade; 0.0 with nothing closed."""
    pnls = [calculate_pnl(t, commission_rate, multiplier) for t in closed_trades(trades)]
    return sum(pnls) / len(pnls) if pnls else 0.0


def calculate_expectancy(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> float:
    """Win rate x average win + loss rate x average loss.

    Break-evens dilute both rates, so the result equals the average
    trade P&L.
    """
    closed = closed_trades(trades)
    if not closed:
        return 0.0
    pnls = [calculate_pnl(t, commission_rate, multiplier) for t in closed]
    avg = calculate_avg_win_loss(closed, commission_rate, multiplier)
    win_rate = sum(1 for p in pnls if p > 0) / len(pnls)
    loss_rate = sum(1 for p in pnls if p < 0) / len(pnls)
    return win_rate * avg.avg_win + loss_rate * avg.avg_loss


# ------------------------------------------------------------------ #
# Hold time                                                            #
# ------------------------------------------------------------------ #

@dataclass(frozen=True)
class HoldTimes:
    """Average minutes held; ``None`` where no trade qualifies."""

    avg_all: float | None = None
    avg_win: float | None = None
    avg_loss: float | None = None


def hold_minutes(trade: Trade) -> float | None:
    if trade.exit_date is None:
        return None
    return (as_utc(trade.exit_date) - as_utc(trade.entry_date)).total_seconds() / 60


def calculate_avg_hold_times(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> HoldTimes:
    """Average hold of all, winning and losing closed trades (by net P&L)."""
    every: list[float] = []
    wins: list[float] = []
    losses: list[float] = []
    for t in closed_trades(trades):
        minutes = hold_minutes(t)
        if minutes is None:
            continue
        every.append(minutes)
        pnl = calculate_pnl(t, commission_rate, multiplier)
        if pnl > 0:
            wins.append(minutes)
        elif pnl < 0:
            losses.append(minutes)
    return HoldTimes(
        avg_all=_mean(every),
        avg_win=_mean(wins),
        avg_loss=_mean(losses),
    )


def _mean(values: list[float]) -> float | None:
    return sum(values) / len(values) if values else None


# ------------------------------------------------------------------ #
# Planned vs realized R                                                #
# ------------------------------------------------------------------ #

@dataclass(frozen=True)
class RAverages:
    avg_planned_r: float = 0.0
    avg_realized_r: float = 0.0
    count: int = 0


def calculate_planned_r(trade: Trade) -> float | None:
    """Target distance over stop distance, in price points."""
    if trade.take_profit_target is None:
        return None
    sl_size = stop_loss_size(trade)
    if not sl_size:
        return None
    return abs(trade.take_profit_target - trade.entry_price) / sl_size


def calculate_avg_r(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> RAverages:
    """Average planned and realized R over trades with a defined R-multiple.

    A trade without a profit target counts its realized R as planned.
    """
    planned = 0.0
    realized = 0.0
    count = 0
    for t in closed_trades(trades):
        r = calculate_r_multiple(t, commission_rate, multiplier)
        if r is None:
            continue
        target_r = calculate_planned_r(t)
        planned += r if target_r is None else target_r
        realized += r
        count += 1
    if not count:
        return RAverages()
    return RAverages(
        avg_planned_r=round(planned / count, 2),
        avg_realized_r=round(realized / count, 2),
        count=count,
    )


# ------------------------------------------------------------------ #
# Day aggregates                                                       #
# ------------------------------------------------------------------ #

@dataclass(frozen=True)
class DayStats:
    """Aggregates over per-day net P&L (see ``streaks.daily_pnl``)."""

    trading_days: int = 0
    avg_daily_pnl: float = 0.0
    avg_winning_day: float = 0.0
    avg_losing_day: float = 0.0  # Negative (or 0.0 without losing days)
    largest_profit_day: float = 0.0
    largest_loss_day: float = 0.0


def calculate_day_stats(days: Mapping[Any, float]) -> DayStats:
    """Summarise a day -> net P&L mapping.

    The largest profit and loss days are the max and min day totals, so
    a journal of only losing days reports a negative "largest profit".
    """
    values = list(days.values())
    if not values:
        return DayStats()
    winning = [v for v in values if v > 0]
    losing = [v for v in values if v < 0]
    return DayStats(
        trading_days=len(values),
        avg_daily_pnl=round(sum(values) / len(values), 2),
        avg_winning_day=round(sum(winning) / len(winning), 2) if winning else 0.0,
        avg_losing_day=round(sum(losing) / len(losing), 2) if losing else 0.0,
        largest_profit_day=max(values),
        largest_loss_day=min(values),
    )
