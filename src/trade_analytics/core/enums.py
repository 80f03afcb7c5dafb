"""Enumerations used across the trade journal."""

from enum import Enum


class TradeDirection(str, Enum):
    LONG = "Long"
    SHORT = "Short"

    @property
    def sign(self) -> int:
        """+1 for long, -1 for short."""
        return 1 if self is TradeDirection.LONG else -1


class TradeStatus(str, Enum):
    """User-asserted outcome label.  Not derived from P&L."""

    WIN = "Win"
    SMALL_WIN = "Small Win"
    BREAK_EVEN = "Break Even"
    SMALL_LOSS = "Small Loss"
    LOSS = "Loss"

    @property
    def is_win(self) -> bool:
        return self in (TradeStatus.WIN, TradeStatus.SMALL_WIN)

    @property
    def is_loss(self) -> bool:
        return self in (TradeStatus.LOSS, TradeStatus.SMALL_LOSS)


class FilterLogic(str, Enum):
    AND = "AND"
    OR = "OR"
