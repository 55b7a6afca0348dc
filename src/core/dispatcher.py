"""Core item dispatch.

This module is integration-agnostic. It only relies on ports for delivery and
on an injected formatter, enabling other transports without changes here.
"""

from __future__ import annotations

import logging
from typing import Callable

from core.dedup import DedupIndex
from core.errors import DeliveryError, PersistenceWriteError
from core.identity import UNKNOWN_SUBSCRIBER, normalize_subscriber
from core.models import DispatchOutcome, DispatchResult, FeedItem
from core.ports import Transport
from core.registry import SubscriptionRegistry

LOGGER = logging.getLogger(__name__)


class DispatchCoordinator:
    """Deliver each new item at most once to every subscriber of its topic."""

    def __init__(
        self,
        registry: SubscriptionRegistry,
        dedup: DedupIndex,
        transport: Transport,
        formatter: Callable[[FeedItem], str],
    ) -> None:
        self._registry = registry
        self._dedup = dedup
        self._transport = transport
        self._formatter = formatter

    async def offer(self, topic: str, item: FeedItem) -> DispatchResult:
        """Run one item through dedup, subscriber lookup, and fan-out."""

        # The item is marked seen before delivery: a crash or failed send
        # never causes a second delivery later.
        try:
            is_new = self._dedup.offer(topic, item.item_id)
        except PersistenceWriteError:
            LOGGER.exception("Failed to persist seen item %s for r/%s", item.item_id, topic)
            is_new = True
        if not is_new:
            return DispatchResult(DispatchOutcome.DUPLICATE)

        subscribers = self._registry.subscribers_of(topic)
        if not subscribers:
            LOGGER.info("No subscribers for r/%s, skipping item %s", topic, item.item_id)
            return DispatchResult(DispatchOutcome.NO_SUBSCRIBERS)

        payload = self._formatter(item)
        return await self._fan_out(payload, subscribers)

    async def _fan_out(self, payload: str, subscribers: list[str]) -> DispatchResult:
        targets = set(subscribers)
        try:
            conversations = await self._transport.list_conversations()
        except Exception:
            LOGGER.exception("Failed to list conversations for delivery")
            return DispatchResult(DispatchOutcome.DELIVERED, failed=len(targets))
        LOGGER.info("Sending item to %s subscribers", len(targets))

        sent = 0
        skipped = 0
        errors: list[DeliveryError] = []
        for conversation in conversations:
            try:
                subscriber_id = await self._transport.resolve_subscriber_id(conversation)
            except Exception:
                LOGGER.exception("Failed to resolve subscriber for conversation")
                subscriber_id = UNKNOWN_SUBSCRIBER
            if subscriber_id == UNKNOWN_SUBSCRIBER or normalize_subscriber(subscriber_id) not in targets:
                skipped += 1
                continue
            # One failing conversation never blocks the rest of the fan-out.
            try:
                message_id = await conversation.send(payload)
            except Exception as exc:
                LOGGER.exception("Failed to send item to %s", subscriber_id)
                errors.append(DeliveryError(subscriber_id, exc))
                continue
            LOGGER.info("Item sent to %s: %s", subscriber_id, message_id)
            sent += 1

        LOGGER.info("Send complete: %s sent, %s skipped, %s failed", sent, skipped, len(errors))
        return DispatchResult(
            DispatchOutcome.DELIVERED,
            sent=sent,
            skipped=skipped,
            failed=len(errors),
            errors=tuple(errors),
        )
