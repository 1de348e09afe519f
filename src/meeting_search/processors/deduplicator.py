"""Deduplication and ordering of extracted items."""

import logging
from typing import Iterable, List, Set, Tuple

from ..schemas import Item, ResultSet


logger = logging.getLogger(__name__)


class Deduplicator:
    """Running first-seen set of items, keyed by identity.

    Later items with an identity key already seen are dropped without merging
    any of their fields.
    """

    def __init__(self):
        self._seen: Set[Tuple[str, str, str]] = set()
        self._items: List[Item] = []

    def add(self, items: Iterable[Item]) -> List[Item]:
        """Add items in discovery order.

        Args:
            items: Candidate items

        Returns:
            The items that were not already present
        """
        accepted = []
        for item in items:
            key = item.identity_key()
            if key in self._seen:
                continue
            self._seen.add(key)
            accepted.append(item)

        self._items.extend(accepted)
        return accepted

    @property
    def items(self) -> List[Item]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


def deduplicate(items: Iterable[Item]) -> List[Item]:
    """Drop items whose identity key was already seen, keeping order."""
    deduplicator = Deduplicator()
    deduplicator.add(items)
    return deduplicator.items


def build_result_set(items: Iterable[Item], query: str, pages_fetched: int = 0) -> ResultSet:
    """Partition deduplicated items into a sorted result set.

    Args:
        items: Items in first-seen order
        query: Search term the items were found for
        pages_fetched: Number of upstream pages read

    Returns:
        ResultSet with dated items newest first, then undated items
    """
    unique = deduplicate(items)
    # sorted() is stable, so equal dates keep first-seen order
    dated = sorted((item for item in unique if item.date), key=lambda item: item.date, reverse=True)
    undated = [item for item in unique if not item.date]

    logger.debug(f"Result set for {query!r}: {len(dated)} dated, {len(undated)} undated")
    return ResultSet(query=query, dated=dated, undated=undated, pages_fetched=pages_fetched)
