"""Per-topic delivery deduplication (core domain)."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from core.config import FRESH_CAPACITY, RESTORED_CAPACITY
from core.identity import normalize_topic
from core.recency import BoundedRecencySet

LOGGER = logging.getLogger(__name__)


class DedupIndex:
    """Map each topic to its own recency window of delivered item ids.

    Windows restored from a snapshot use ``restored_capacity``; windows for
    topics first seen at delivery time use the smaller ``fresh_capacity``.
    """

    def __init__(
        self,
        seen_items: Optional[Mapping[str, Iterable[str]]] = None,
        *,
        restored_capacity: int = RESTORED_CAPACITY,
        fresh_capacity: int = FRESH_CAPACITY,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self._fresh_capacity = fresh_capacity
        self._windows: Dict[str, BoundedRecencySet[str]] = {}
        self._on_change = on_change
        for topic, item_ids in (seen_items or {}).items():
            self._windows[normalize_topic(topic)] = BoundedRecencySet.deserialize(
                item_ids, restored_capacity
            )

    def bind(self, on_change: Optional[Callable[[], None]]) -> None:
        self._on_change = on_change

    def offer(self, topic: str, item_id: str) -> bool:
        """Record ``item_id`` for ``topic``; False if it was already seen.

        The window for a new topic is created lazily on first offer.
        """

        topic_key = normalize_topic(topic)
        window = self._windows.get(topic_key)
        if window is None:
            window = BoundedRecencySet(self._fresh_capacity)
            self._windows[topic_key] = window
        if not window.add(item_id):
            return False
        if self._on_change is not None:
            self._on_change()
        return True

    def has_seen(self, topic: str, item_id: str) -> bool:
        window = self._windows.get(normalize_topic(topic))
        return window is not None and window.has(item_id)

    def window_of(self, topic: str) -> Optional[BoundedRecencySet[str]]:
        return self._windows.get(normalize_topic(topic))

    def topics(self) -> List[str]:
        return list(self._windows)

    def snapshot(self) -> Dict[str, List[str]]:
        """Return every window serialized oldest first."""

        return {topic: window.serialize() for topic, window in self._windows.items()}
