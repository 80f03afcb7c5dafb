"""Composite performance score ("Zella score").

Six normalized sub-scores (each 0-100) are combined into a weighted
average, producing a single 0-100 number plus per-dimension details
suitable for a radar chart:

    Dimension        Input                                 Weight
    ─────────────────────────────────────────────────────────────
    Win %            status win rate, 60% scores 100       0.15
    Profit Factor    gross profit / gross loss             0.25
    RR               avg win / |avg loss|                  0.20
    Recovery         net profit / max drawdown             0.10
    Max DD           max drawdown vs. the user's goal      0.20
    Consistency      dispersion of P&L vs. net profit      0.10

Profit factor and RR share one piecewise-linear curve:

    x >= 2.6         100
    2.0 <= x < 2.6   (100/3)x + 40/3
    1.0 <= x < 2.0   50x - 20
    0.5 <= x < 1.0   60x - 30
    x < 0.5          0

Usage::

    result = calculate_zella_score(trades, commission_rate=0.5,
                                   max_drawdown_goal=1000)
    print(result.score)                       # 72.4
    print([d.subject for d in result.details])
"""

from __future__ import annotations

import logging
import statistics
from dataclasses import dataclass, field
from typing import Any, Iterable

from trade_analytics.core.interfaces import MultiplierLookup
from trade_analytics.core.models import Trade

from .metrics import (
    calculate_avg_win_loss,
    calculate_max_drawdown,
    calculate_pnl,
    calculate_profit_factor,
    calculate_win_rate,
    closed_trades,
    unit_multiplier,
)

logger = logging.getLogger(__name__)

FULL_MARK = 100.0

# Detail order is part of the contract.
SUBJECTS = ("Win %", "Profit Factor", "RR", "Recovery", "Max DD", "Consistency")

_WEIGHTS: dict[str, float] = {
    "Win %": 0.15,
    "Profit Factor": 0.25,
    "RR": 0.20,
    "Recovery": 0.10,
    "Max DD": 0.20,
    "Consistency": 0.10,
}

# Win rate (percent) that earns a full win score
_WIN_RATE_TARGET = 60.0

# (lower bound, upper bound, score at lower, score at upper); checked top-down
_RECOVERY_BANDS: list[tuple[float, float, float, float]] = [
    (3.5, 3.5, 100.0, 100.0),
    (3.0, 3.5, 70.0, 99.0),
    (2.5, 3.0, 60.0, 69.0),
    (2.0, 2.5, 50.0, 59.0),
    (1.5, 2.0, 30.0, 49.0),
    (1.0, 1.5, 1.0, 29.0),
]

# Recovery factor credited when there was no drawdown at all
_NO_DRAWDOWN_RECOVERY = 10.0


@dataclass(frozen=True)
class ScoreDetail:
    """One radar-chart axis."""

    subject: str
    A: float  # Normalized score out of full_mark
    full_mark: float = FULL_MARK

    def to_dict(self) -> dict[str, Any]:
        return {"subject": self.subject, "A": self.A, "fullMark": self.full_mark}


@dataclass(frozen=True)
class ZellaScore:
    score: float
    details: list[ScoreDetail] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "details": [d.to_dict() for d in self.details]}


# ------------------------------------------------------------------ #
# Sub-score curves                                                     #
# ------------------------------------------------------------------ #

def _clamp(score: float) -> float:
    return max(0.0, min(FULL_MARK, score))


def ratio_score(value: float) -> float:
    """Shared curve for profit factor and reward/risk ratio."""
    if value >= 2.6:
        return 100.0
    if value >= 2.0:
        return (100 / 3) * value + (40 / 3)
    if value >= 1.0:
        return 50 * value - 20
    if value >= 0.5:
        return 60 * value - 30
    return 0.0


def win_rate_score(win_rate_pct: float) -> float:
    return _clamp(win_rate_pct / _WIN_RATE_TARGET * 100)


def recovery_score(recovery_factor: float) -> float:
    for low, high, score_low, score_high in _RECOVERY_BANDS:
        if recovery_factor >= low:
            if high <= low or recovery_factor >= high:
                return score_high
            progress = (recovery_factor - low) / (high - low)
            return score_low + progress * (score_high - score_low)
    return 0.0


def drawdown_score(max_drawdown: float, max_drawdown_goal: float) -> float:
    """``100 - 25x - 125x^2`` with ``x = drawdown / goal``, floored at 0.

    Without a goal any drawdown scores 0 and none scores 100.
    """
    if max_drawdown_goal > 0:
        x = abs(max_drawdown) / max_drawdown_goal
        return _clamp(100 - 25 * x - 125 * x ** 2)
    return 100.0 if max_drawdown == 0 else 0.0


def consistency_score(pnls: list[float], total_pnl: float) -> float:
    """Penalize P&L dispersion relative to net profit.

    Zero-P&L trades are left out.  Unprofitable records score 0.
    """
    relevant = [p for p in pnls if p != 0]
    if total_pnl <= 0 or not relevant:
        return 0.0
    spread = statistics.pstdev(relevant)
    return _clamp(100 - spread / total_pnl * 100)


# ------------------------------------------------------------------ #
# Composite                                                            #
# ------------------------------------------------------------------ #

def _round1(value: float) -> float:
    return round(value, 1)


def calculate_zella_score(
    trades: Iterable[Trade],
    commission_rate: float = 0.0,
    max_drawdown_goal: float = 0.0,
    multiplier: MultiplierLookup = unit_multiplier,
) -> ZellaScore:
    """Score the closed trades in *trades*.

    Deterministic for a given trade set; the score is always within
    [0, 100] and ``details`` always lists :data:`SUBJECTS` in order.
    """
    closed = closed_trades(trades)
    if not closed:
        return ZellaScore(
            score=0.0,
            details=[ScoreDetail(subject=s, A=0.0) for s in SUBJECTS],
        )

    pnls = [calculate_pnl(t, commission_rate, multiplier) for t in closed]
    total_pnl = sum(pnls)

    profit_factor = calculate_profit_factor(closed, commission_rate, multiplier)
    if profit_factor is None:
        pf_score = 100.0 if total_pnl > 0 else 0.0
    else:
        pf_score = ratio_score(profit_factor)

    avg = calculate_avg_win_loss(closed, commission_rate, multiplier)
    rr = avg.avg_win / abs(avg.avg_loss) if avg.avg_loss else 0.0

    max_dd = calculate_max_drawdown(closed, commission_rate, multiplier)
    if max_dd > 0:
        recovery = total_pnl / max_dd
    else:
        recovery = _NO_DRAWDOWN_RECOVERY if total_pnl > 0 else 0.0

    sub_scores = {
        "Win %": win_rate_score(calculate_win_rate(closed)),
        "Profit Factor": _clamp(pf_score),
        "RR": _clamp(ratio_score(rr)),
        "Recovery": _clamp(recovery_score(recovery)),
        "Max DD": drawdown_score(max_dd, max_drawdown_goal),
        "Consistency": consistency_score(pnls, total_pnl),
    }
    weighted = sum(sub_scores[s] * _WEIGHTS[s] for s in SUBJECTS)

    result = ZellaScore(
        score=_round1(_clamp(weighted)),
        details=[ScoreDetail(subject=s, A=_round1(sub_scores[s])) for s in SUBJECTS],
    )
    logger.debug(
        "Zella score %.1f over %d closed trades", result.score, len(closed)
    )
    return result
