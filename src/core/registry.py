"""Subscriber to topic registry (core domain)."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from core.identity import normalize_subscriber, normalize_topic

LOGGER = logging.getLogger(__name__)


class SubscriptionRegistry:
    """Track which subscribers are interested in which topics.

    Ids are lowercased on every entry point. A subscriber whose last topic is
    removed is dropped entirely, so no empty entries are ever persisted.

    ``on_change`` is invoked after every successful mutation; it is how the
    owning state persists the snapshot. Errors it raises propagate to the
    caller with the in-memory change kept.
    """

    def __init__(
        self,
        subscriptions: Optional[Mapping[str, Iterable[str]]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        # dict-as-ordered-set keeps topics in subscription order.
        self._subscriptions: Dict[str, Dict[str, None]] = {}
        self._on_change = on_change
        for subscriber_id, topics in (subscriptions or {}).items():
            normalized = {normalize_topic(topic): None for topic in topics}
            if normalized:
                self._subscriptions.setdefault(normalize_subscriber(subscriber_id), {}).update(normalized)

    def bind(self, on_change: Optional[Callable[[], None]]) -> None:
        self._on_change = on_change

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def subscribe(self, subscriber_id: str, topic: str) -> bool:
        """Return True if newly subscribed, False if already subscribed."""

        subscriber = normalize_subscriber(subscriber_id)
        topic_key = normalize_topic(topic)
        topics = self._subscriptions.setdefault(subscriber, {})
        if topic_key in topics:
            return False
        topics[topic_key] = None
        LOGGER.info("%s subscribed to r/%s", subscriber, topic_key)
        self._changed()
        return True

    def unsubscribe(self, subscriber_id: str, topic: str) -> bool:
        """Return True if a subscription was removed."""

        subscriber = normalize_subscriber(subscriber_id)
        topic_key = normalize_topic(topic)
        topics = self._subscriptions.get(subscriber)
        if not topics or topic_key not in topics:
            return False
        del topics[topic_key]
        if not topics:
            del self._subscriptions[subscriber]
        LOGGER.info("%s unsubscribed from r/%s", subscriber, topic_key)
        self._changed()
        return True

    def unsubscribe_all(self, subscriber_id: str) -> bool:
        """Drop every subscription of a subscriber; False if there were none."""

        subscriber = normalize_subscriber(subscriber_id)
        topics = self._subscriptions.pop(subscriber, None)
        if not topics:
            return False
        LOGGER.info("%s unsubscribed from all %s topics", subscriber, len(topics))
        self._changed()
        return True

    def topics_of(self, subscriber_id: str) -> List[str]:
        """Topics of one subscriber in subscription order (empty if unknown)."""

        return list(self._subscriptions.get(normalize_subscriber(subscriber_id), {}))

    def all_topics(self) -> List[str]:
        """Every topic with at least one subscriber, without duplicates."""

        topics: Dict[str, None] = {}
        for subscriber_topics in self._subscriptions.values():
            topics.update(subscriber_topics)
        return list(topics)

    def subscribers_of(self, topic: str) -> List[str]:
        topic_key = normalize_topic(topic)
        return [
            subscriber
            for subscriber, topics in self._subscriptions.items()
            if topic_key in topics
        ]

    def snapshot(self) -> Dict[str, List[str]]:
        """Return a detached copy suitable for persistence."""

        return {subscriber: list(topics) for subscriber, topics in self._subscriptions.items() if topics}

    def __len__(self) -> int:
        return len(self._subscriptions)
