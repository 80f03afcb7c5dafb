"""Rule resolution and cross-strategy rule matching.

Rule items are stored by id, but two items in different strategies are
"the same rule" when their ``(group name, item text)`` pair matches
exactly after trimming (case-sensitive).  Writing "Moved to breakeven"
under an "Exit" group in two playbooks therefore lets one selection
match trades from both.

Two modes:

strict
    A trade matches the literal selected ids found in its
    ``rules_followed``.
cross-strategy
    Selected ids are resolved to content signatures.  Under AND, every
    required signature must be among the signatures of the rules the
    trade followed, resolved in the trade's *own* strategy.  Under OR,
    the signatures are expanded back to every id (in any strategy) that
    carries one of them, and the trade matches on any overlap.

Ids that no longer exist in the catalog never match.  With an empty
catalog there is nothing to resolve and both modes compare literal ids.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, NamedTuple

from trade_analytics.core.catalog import StrategyCatalog
from trade_analytics.core.enums import FilterLogic
from trade_analytics.core.models import Trade


class RuleSignature(NamedTuple):
    group_name: str
    item_text: str

    @classmethod
    def of(cls, group_name: str, item_text: str) -> RuleSignature:
        return cls(group_name.strip(), item_text.strip())


class RuleResolver:
    """Resolve rule ids against a strategy catalog snapshot."""

    def __init__(self, catalog: StrategyCatalog) -> None:
        self._catalog = catalog
        self._signatures_by_id: dict[str, set[RuleSignature]] = defaultdict(set)
        self._ids_by_signature: dict[RuleSignature, set[str]] = defaultdict(set)
        # (strategy id, rule id) -> signature, for per-strategy resolution
        self._by_strategy: dict[tuple[str, str], RuleSignature] = {}

        for strategy, group, item in catalog.all_rule_entries():
            sig = RuleSignature.of(group.name, item.text)
            self._signatures_by_id[item.id].add(sig)
            self._ids_by_signature[sig].add(item.id)
            self._by_strategy[(strategy.id, item.id)] = sig

    @property
    def catalog(self) -> StrategyCatalog:
        return self._catalog

    def is_known(self, rule_id: str) -> bool:
        """Whether *rule_id* exists; an empty catalog vouches for every id."""
        if len(self._catalog) == 0:
            return True
        return rule_id in self._signatures_by_id

    def signatures_for(self, rule_ids: Iterable[str]) -> set[RuleSignature]:
        """Union of the signatures carried by *rule_ids* in any strategy."""
        found: set[RuleSignature] = set()
        for rid in rule_ids:
            found |= self._signatures_by_id.get(rid, set())
        return found

    def trade_signatures(self, trade: Trade) -> set[RuleSignature]:
        """Signatures of the rules *trade* followed, in its own strategy."""
        if trade.playbook_id is None:
            return set()
        found: set[RuleSignature] = set()
        for rid in trade.rules_followed:
            sig = self._by_strategy.get((trade.playbook_id, rid))
            if sig is not None:
                found.add(sig)
        return found

    def expand_to_ids(self, signatures: Iterable[RuleSignature]) -> set[str]:
        """Every rule id, across all strategies, carrying one of *signatures*."""
        ids: set[str] = set()
        for sig in signatures:
            ids |= self._ids_by_signature.get(sig, set())
        return ids

    def strategies_owning(self, rule_ids: Iterable[str]) -> set[str]:
        return self._catalog.strategies_owning(rule_ids)

    # ------------------------------------------------------------------ #
    # Matching                                                             #
    # ------------------------------------------------------------------ #

    def matches_strict(
        self, trade: Trade, rule_ids: list[str], logic: FilterLogic
    ) -> bool:
        followed = set(trade.rules_followed)
        known = [rid for rid in rule_ids if self.is_known(rid)]
        if logic is FilterLogic.AND:
            if len(known) < len(rule_ids):
                return False
            return all(rid in followed for rid in known)
        return any(rid in followed for rid in known)

    def matches_cross(
        self, trade: Trade, rule_ids: list[str], logic: FilterLogic
    ) -> bool:
        if logic is FilterLogic.AND:
            required: set[RuleSignature] = set()
            for rid in rule_ids:
                sigs = self._signatures_by_id.get(rid)
                if not sigs:
                    return False
                required |= sigs
            return required <= self.trade_signatures(trade)
        expanded = self.expand_to_ids(self.signatures_for(rule_ids))
        return not expanded.isdisjoint(trade.rules_followed)

    def matches(
        self,
        trade: Trade,
        rule_ids: list[str],
        logic: FilterLogic,
        cross_strategies: bool = False,
    ) -> bool:
        # No catalog means no signatures; fall back to literal ids
        if cross_strategies and len(self._catalog):
            return self.matches_cross(trade, rule_ids, logic)
        return self.matches_strict(trade, rule_ids, logic)
