"""Bounded, lock-guarded LRU cache."""

import threading
from collections import OrderedDict
from typing import Callable, Generic, Hashable, Iterable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SharedCache(Generic[K, V]):
    """A least-recently-used cache holding at most `capacity` entries.

    Individual methods do not lock. Callers that combine several operations
    into one batch (read hits, look up misses, write back) hold `lock` for
    the whole batch::

        with cache.lock:
            hits = cache.get_values(ids)
            ...
            cache.extend(loaded, key_fn=lambda k: k.id)
    """

    def __init__(self, capacity: int, on_evict: Callable[[K, V], None] | None = None):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.on_evict = on_evict
        self.lock = threading.Lock()
        self._data: OrderedDict[K, V] = OrderedDict()

    def get(self, key: K) -> V | None:
        if key not in self._data:
            return None
        self._data.move_to_end(key)
        return self._data[key]

    def get_values(self, keys: Iterable[K]) -> list[V]:
        """Cached values for `keys` in key order; misses are skipped."""
        out = []
        for key in keys:
            value = self.get(key)
            if value is not None:
                out.append(value)
        return out

    def find_by_predicate(self, predicate: Callable[[V], bool]) -> V | None:
        for key, value in self._data.items():
            if predicate(value):
                self._data.move_to_end(key)
                return value
        return None

    def filter_values(self, predicate: Callable[[V], bool]) -> list[V]:
        keys = [key for key, value in self._data.items() if predicate(value)]
        return [self.get(key) for key in keys]

    def set(self, key: K, value: V) -> None:
        self._data[key] = value
        self._data.move_to_end(key)
        while len(self._data) > self.capacity:
            evicted_key, evicted = self._data.popitem(last=False)
            if self.on_evict is not None:
                self.on_evict(evicted_key, evicted)

    def extend(self, values: Iterable[V], key_fn: Callable[[V], K]) -> None:
        for value in values:
            self.set(key_fn(value), value)

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
