"""Reusable range and day/time predicates for filter categories."""

from __future__ import annotations

import math
from datetime import tzinfo

from trade_analytics.core.models import Trade
from trade_analytics.core.timeutils import as_utc, wall_clock_hhmm


def check_range(
    value: float, minimum: float | None = None, maximum: float | None = None
) -> bool:
    """Inclusive on both bounds; a missing bound leaves that side open."""
    if minimum is not None and value < minimum:
        return False
    if maximum is not None and value > maximum:
        return False
    return True


def check_optional_range(
    value: float | None, minimum: float | None = None, maximum: float | None = None
) -> bool:
    """:func:`check_range` that fails closed on an undefined value."""
    if value is None:
        return False
    return check_range(value, minimum, maximum)


def check_time_window(hhmm: str, start: str | None, end: str | None) -> bool:
    """Lexical ``HH:MM`` window test, valid because the format is zero-padded."""
    if start and hhmm < start:
        return False
    if end and hhmm > end:
        return False
    return True


def entry_time_matches(
    trade: Trade, start: str | None, end: str | None, display_tz: tzinfo
) -> bool:
    return check_time_window(wall_clock_hhmm(trade.entry_date, display_tz), start, end)


def exit_time_matches(
    trade: Trade, start: str | None, end: str | None, display_tz: tzinfo
) -> bool:
    if trade.exit_date is None:
        return False
    return check_time_window(wall_clock_hhmm(trade.exit_date, display_tz), start, end)


def day_of_week(trade: Trade) -> int:
    """Entry weekday, 0 = Sunday .. 6 = Saturday.

    Taken from the timestamp as recorded on the trade, not shifted into
    the display timezone.
    """
    return (trade.entry_date.weekday() + 1) % 7


def duration_minutes(trade: Trade) -> int | None:
    """Whole minutes held (floored); ``None`` while the trade is open."""
    if trade.exit_date is None:
        return None
    seconds = (as_utc(trade.exit_date) - as_utc(trade.entry_date)).total_seconds()
    return math.floor(seconds / 60)
