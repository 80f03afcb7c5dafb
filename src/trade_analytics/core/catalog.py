"""Read-only strategy and tag catalogs.

Both are snapshots built once per evaluation and passed explicitly to
the filter composer and rule resolver.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from .models import RuleGroup, RuleItem, Strategy, Tag, TagCategory


class StrategyCatalog:
    """Ordered strategies with id lookups for strategies and rule items."""

    def __init__(self, strategies: Iterable[Strategy] = ()) -> None:
        self._strategies: list[Strategy] = list(strategies)
        self._by_id: dict[str, Strategy] = {s.id: s for s in self._strategies}

    def __iter__(self):
        return iter(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)

    def __contains__(self, strategy_id: object) -> bool:
        return strategy_id in self._by_id

    def get(self, strategy_id: str | None) -> Strategy | None:
        if strategy_id is None:
            return None
        return self._by_id.get(strategy_id)

    def rule_entries(
        self, strategy: Strategy
    ) -> Iterable[tuple[RuleGroup, RuleItem]]:
        """(group, item) pairs of one strategy in declaration order."""
        for group in strategy.rules:
            for item in group.items:
                yield group, item

    def all_rule_entries(
        self,
    ) -> Iterable[tuple[Strategy, RuleGroup, RuleItem]]:
        for strategy in self._strategies:
            for group, item in self.rule_entries(strategy):
                yield strategy, group, item

    def strategies_owning(self, rule_ids: Iterable[str]) -> set[str]:
        """Ids of strategies that define at least one of *rule_ids*."""
        wanted = set(rule_ids)
        if not wanted:
            return set()
        return {
            strategy.id
            for strategy, _, item in self.all_rule_entries()
            if item.id in wanted
        }


class TagCatalog:
    """Flat tag id -> category lookup."""

    def __init__(
        self,
        tags: Iterable[Tag] = (),
        categories: Iterable[TagCategory] = (),
    ) -> None:
        self._tags: dict[str, Tag] = {t.id: t for t in tags}
        self._categories: dict[str, TagCategory] = {c.id: c for c in categories}

    def __len__(self) -> int:
        return len(self._tags)

    def __contains__(self, tag_id: object) -> bool:
        return tag_id in self._tags

    @property
    def is_empty(self) -> bool:
        return not self._tags

    def category_of(self, tag_id: str) -> str | None:
        tag = self._tags.get(tag_id)
        return tag.category_id if tag else None

    def category_name(self, category_id: str) -> str:
        category = self._categories.get(category_id)
        return category.name if category else category_id

    def known(self, tag_ids: Iterable[str]) -> list[str]:
        """Subset of *tag_ids* present in the catalog, order preserved.

        An empty catalog knows nothing to prune against and keeps all ids.
        """
        if self.is_empty:
            return list(tag_ids)
        return [tid for tid in tag_ids if tid in self._tags]

    def group_by_category(self, tag_ids: Iterable[str]) -> dict[str, list[str]]:
        """Group tag ids by category id; unknown ids are dropped."""
        grouped: dict[str, list[str]] = defaultdict(list)
        for tid in tag_ids:
            category_id = self.category_of(tid)
            if category_id is not None:
                grouped[category_id].append(tid)
        return dict(grouped)
