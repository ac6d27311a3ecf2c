"""Ranked result items and bounded top-k selection."""

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Generic, Iterable, TypeVar

from ..languages import Language

T = TypeVar("T")


@dataclass
class ResultItem(Generic[T]):
    """A search output together with its relevance score."""

    item: T
    relevance: int | float
    language: Language | None = None


@dataclass
class SearchResult(Generic[T]):
    """One page of ranked items plus the number of candidates before paging."""

    items: list[ResultItem[T]] = field(default_factory=list)
    total: int = 0

    @classmethod
    def from_items(cls, items: Iterable[ResultItem[T]], offset: int = 0, limit: int = 1000) -> "SearchResult[T]":
        """Rank `items` descending by relevance and slice out one page.

        Only the best ``offset + limit`` items are kept in a bounded min-heap,
        so memory stays proportional to the page end rather than to the number
        of candidates. Items with equal relevance keep their insertion order.
        """
        offset = max(offset, 0)
        limit = max(limit, 0)
        capacity = offset + limit

        heap: list[tuple[int | float, int, ResultItem[T]]] = []
        # Negated insertion counter: earlier items win ties when popping the minimum
        counter = itertools.count()
        total = 0
        for item in items:
            total += 1
            if capacity == 0:
                continue
            entry = (item.relevance, -next(counter), item)
            if len(heap) < capacity:
                heapq.heappush(heap, entry)
            elif entry[:2] > heap[0][:2]:
                heapq.heapreplace(heap, entry)

        ranked = [entry[2] for entry in sorted(heap, key=lambda e: e[:2], reverse=True)]
        return cls(items=ranked[offset : offset + limit], total=total)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def is_empty(self) -> bool:
        return not self.items

    def outputs(self) -> list[T]:
        return [item.item for item in self.items]
