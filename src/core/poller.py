"""Periodic feed poll loop."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from core.config import PollConfig
from core.dispatcher import DispatchCoordinator
from core.ports import FeedSource
from core.registry import SubscriptionRegistry

LOGGER = logging.getLogger(__name__)


@dataclass
class CycleStats:
    topics: int = 0
    items: int = 0
    delivered: int = 0


class FeedPoller:
    """Fetch every subscribed topic and offer its items for dispatch.

    The loop can only stop between cycles, so an item is never abandoned
    halfway through its fan-out.
    """

    def __init__(
        self,
        registry: SubscriptionRegistry,
        feed: FeedSource,
        dispatcher: DispatchCoordinator,
        config: PollConfig,
    ) -> None:
        self._registry = registry
        self._feed = feed
        self._dispatcher = dispatcher
        self._config = config
        self._stopping = asyncio.Event()

    async def run_cycle(self) -> CycleStats:
        """Poll all subscribed topics once."""

        stats = CycleStats()
        topics = self._registry.all_topics()
        if not topics:
            LOGGER.info("No active subscriptions, skipping poll cycle")
            return stats

        LOGGER.info("Checking for items from %s subscribed topics", len(topics))
        for topic in topics:
            stats.topics += 1
            try:
                items = await self._feed.fetch_items(topic, self._config.post_limit)
                if not items:
                    LOGGER.info("No items found for r/%s", topic)
                    continue
                for item in items:
                    stats.items += 1
                    result = await self._dispatcher.offer(topic, item)
                    if result.delivered:
                        stats.delivered += 1
                        LOGGER.info("Sent item from r/%s: %s", topic, item.title)
                    else:
                        LOGGER.debug("Skipped item from r/%s (%s): %s", topic, result.outcome.value, item.title)
            except Exception:
                LOGGER.exception("Error while polling r/%s", topic)
        return stats

    async def run_forever(self) -> None:
        """Run a cycle now, then one every interval until ``stop`` is called."""

        while not self._stopping.is_set():
            try:
                stats = await self.run_cycle()
                LOGGER.info(
                    "Poll cycle complete: topics=%s, items=%s, delivered=%s",
                    stats.topics,
                    stats.items,
                    stats.delivered,
                )
            except Exception:
                LOGGER.exception("Error in periodic poll cycle")
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._config.interval_seconds)
            except asyncio.TimeoutError:
                pass

    def stop(self) -> None:
        self._stopping.set()
