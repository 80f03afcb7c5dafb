"""In-memory trade store.

Reference implementation of :class:`ITradeStore`.  New trades are
placed at the front of the collection, matching the newest-first order
in which the journal front end lists them.
"""

from __future__ import annotations

import logging
from typing import Iterable

from trade_analytics.core.errors import DuplicateTradeError, UnknownTradeError
from trade_analytics.core.models import Trade

logger = logging.getLogger(__name__)


class InMemoryTradeStore:
    """Dict-backed trade store with newest-first ordering."""

    def __init__(self, trades: Iterable[Trade] = ()) -> None:
        self._order: list[str] = []
        self._trades: dict[str, Trade] = {}
        for trade in trades:
            if trade.id in self._trades:
                raise DuplicateTradeError(trade.id)
            self._trades[trade.id] = trade
            self._order.append(trade.id)

    def __len__(self) -> int:
        return len(self._order)

    def list(self) -> list[Trade]:
        """Snapshot of all trades in store order."""
        return [self._trades[tid] for tid in self._order]

    def get(self, trade_id: str) -> Trade:
        try:
            return self._trades[trade_id]
        except KeyError:
            raise UnknownTradeError(trade_id) from None

    def add(self, trade: Trade) -> Trade:
        if trade.id in self._trades:
            raise DuplicateTradeError(trade.id)
        self._trades[trade.id] = trade
        self._order.insert(0, trade.id)
        logger.debug("Trade %s added (%d stored)", trade.id, len(self._order))
        return trade

    def update(self, trade: Trade) -> Trade:
        if trade.id not in self._trades:
            raise UnknownTradeError(trade.id)
        self._trades[trade.id] = trade
        return trade

    def delete(self, trade_id: str) -> None:
        if trade_id not in self._trades:
            raise UnknownTradeError(trade_id)
        del self._trades[trade_id]
        self._order.remove(trade_id)
        logger.debug("Trade %s deleted (%d stored)", trade_id, len(self._order))
