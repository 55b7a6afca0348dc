from __future__ import annotations

import asyncio

from core.config import PollConfig
from core.dedup import DedupIndex
from core.dispatcher import DispatchCoordinator
from core.poller import FeedPoller
from core.registry import SubscriptionRegistry
from fakes import FakeConversation, FakeFeed, FakeTransport, make_item, plain_formatter


def _poller(registry: SubscriptionRegistry, feed: FakeFeed, transport: FakeTransport, limit: int = 5) -> FeedPoller:
    dispatcher = DispatchCoordinator(registry, DedupIndex(), transport, plain_formatter)
    return FeedPoller(registry, feed, dispatcher, PollConfig(interval_minutes=1, post_limit=limit))


def test_cycle_without_subscriptions_fetches_nothing() -> None:
    feed = FakeFeed()
    stats = asyncio.run(_poller(SubscriptionRegistry(), feed, FakeTransport([])).run_cycle())

    assert stats.topics == 0
    assert feed.calls == []


def test_cycle_delivers_new_items_once() -> None:
    registry = SubscriptionRegistry()
    registry.subscribe("@alice", "python")
    alice = FakeConversation("@alice")
    feed = FakeFeed({"python": [make_item("t3_1"), make_item("t3_2"), make_item("t3_3")]})
    poller = _poller(registry, feed, FakeTransport([alice]), limit=2)

    first = asyncio.run(poller.run_cycle())
    second = asyncio.run(poller.run_cycle())

    assert feed.calls == [("python", 2), ("python", 2)]
    assert (first.items, first.delivered) == (2, 2)
    assert (second.items, second.delivered) == (2, 0)
    assert len(alice.sent) == 2


def test_failing_topic_does_not_abort_cycle() -> None:
    registry = SubscriptionRegistry()
    registry.subscribe("@alice", "broken")
    registry.subscribe("@alice", "python")
    alice = FakeConversation("@alice")
    feed = FakeFeed({"python": [make_item("t3_1")]}, fail_topics=["broken"])

    stats = asyncio.run(_poller(registry, feed, FakeTransport([alice])).run_cycle())

    assert stats.topics == 2
    assert stats.delivered == 1
    assert len(alice.sent) == 1


def test_run_forever_stops_between_cycles() -> None:
    registry = SubscriptionRegistry()
    registry.subscribe("@alice", "python")
    feed = FakeFeed({"python": [make_item("t3_1")]})
    poller = _poller(registry, feed, FakeTransport([FakeConversation("@alice")]))

    async def scenario() -> None:
        task = asyncio.create_task(poller.run_forever())
        while not feed.calls:
            await asyncio.sleep(0)
        poller.stop()
        await asyncio.wait_for(task, timeout=1)

    asyncio.run(scenario())

    assert feed.calls == [("python", 5)]
