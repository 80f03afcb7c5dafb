"""Global trade filtering.

GlobalFilterState   Declarative filter selection
FilterComposer      Applies a state and date range to a trade collection
RuleResolver        Strict and cross-strategy rule matching
"""

from .composer import FilterComposer, filter_trades
from .rules import RuleResolver, RuleSignature
from .state import DEFAULT_FILTERS, GlobalFilterState

__all__ = [
    "FilterComposer",
    "filter_trades",
    "RuleResolver",
    "RuleSignature",
    "DEFAULT_FILTERS",
    "GlobalFilterState",
]
