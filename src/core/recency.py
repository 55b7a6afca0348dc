"""Fixed-capacity, insertion-ordered membership set (core domain)."""

from __future__ import annotations

from collections import OrderedDict
from typing import Generic, Hashable, Iterable, Iterator, List, TypeVar

from core.config import DEFAULT_CAPACITY

T = TypeVar("T", bound=Hashable)


class BoundedRecencySet(Generic[T]):
    """Remember the most recent ``capacity`` distinct items.

    Eviction is strict FIFO by insertion time: lookups never refresh an
    item's age, and re-adding an existing member is a no-op. A capacity of
    zero is allowed and never retains anything.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 0:
            raise ValueError(f"Capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._items: "OrderedDict[T, None]" = OrderedDict()

    @classmethod
    def deserialize(cls, items: Iterable[T], capacity: int = DEFAULT_CAPACITY) -> "BoundedRecencySet[T]":
        """Rebuild a set by replaying ``add`` over ``items`` (oldest first).

        When there are more items than capacity only the newest survive.
        """

        recency_set = cls(capacity)
        for item in items:
            recency_set.add(item)
        return recency_set

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, item: T) -> bool:
        """Insert ``item`` as the newest member.

        Returns False when the item is already a member or cannot be retained.
        """

        if item in self._items or self._capacity == 0:
            return False
        if len(self._items) >= self._capacity:
            self._items.popitem(last=False)
        self._items[item] = None
        return True

    def has(self, item: T) -> bool:
        return item in self._items

    def delete(self, item: T) -> bool:
        if item not in self._items:
            return False
        del self._items[item]
        return True

    def clear(self) -> None:
        self._items.clear()

    def serialize(self) -> List[T]:
        """Return members oldest first."""

        return list(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"BoundedRecencySet(size={len(self._items)}, capacity={self._capacity})"
