"""Protocol interfaces for the trade analytics engine.

The engine consumes its collaborators only through these protocols.
Implementations (in-memory, database-backed, ...) can be swapped
without changing callers.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from .models import Trade

# Symbol -> contract multiplier
MultiplierLookup = Callable[[str], float]


# ---------------------------------------------------------------------------
# Trade store
# ---------------------------------------------------------------------------

@runtime_checkable
class ITradeStore(Protocol):
    """Source of the mutable trade collection.

    The engine only ever reads a snapshot via :meth:`list`.
    """

    def list(self) -> list[Trade]: ...

    def get(self, trade_id: str) -> Trade: ...

    def add(self, trade: Trade) -> Trade: ...

    def update(self, trade: Trade) -> Trade: ...

    def delete(self, trade_id: str) -> None: ...
