from __future__ import annotations

from core.registry import SubscriptionRegistry


def test_subscribe_is_idempotent_and_persists_once() -> None:
    calls: list[int] = []
    registry = SubscriptionRegistry(on_change=lambda: calls.append(1))

    assert registry.subscribe("@Alice", "Golang") is True
    assert registry.subscribe("@alice", "golang") is False

    assert registry.topics_of("@ALICE") == ["golang"]
    assert len(calls) == 1


def test_unsubscribe_last_topic_removes_subscriber() -> None:
    registry = SubscriptionRegistry()
    registry.subscribe("@a", "t")

    assert registry.unsubscribe("@a", "t") is True

    assert registry.topics_of("@a") == []
    assert registry.all_topics() == []
    assert registry.snapshot() == {}
    assert len(registry) == 0


def test_unsubscribe_unknown_returns_false_without_persisting() -> None:
    calls: list[int] = []
    registry = SubscriptionRegistry(on_change=lambda: calls.append(1))
    registry.subscribe("@a", "python")
    calls.clear()

    assert registry.unsubscribe("@a", "rust") is False
    assert registry.unsubscribe("@b", "python") is False
    assert calls == []


def test_unsubscribe_all() -> None:
    registry = SubscriptionRegistry()
    registry.subscribe("@a", "python")
    registry.subscribe("@a", "rust")

    assert registry.unsubscribe_all("@A") is True
    assert registry.unsubscribe_all("@a") is False
    assert registry.topics_of("@a") == []


def test_subscribers_of_is_case_insensitive() -> None:
    registry = SubscriptionRegistry()
    registry.subscribe("0xABC", "golang")
    registry.subscribe("0xdef", "python")

    assert registry.subscribers_of("GoLang") == ["0xabc"]


def test_all_topics_is_union_without_duplicates() -> None:
    registry = SubscriptionRegistry()
    registry.subscribe("@a", "python")
    registry.subscribe("@b", "python")
    registry.subscribe("@b", "rust")

    assert sorted(registry.all_topics()) == ["python", "rust"]


def test_restore_normalizes_and_drops_empty_entries() -> None:
    registry = SubscriptionRegistry({"@Mixed": ["Python", "python", "Rust"], "@empty": []})

    assert registry.snapshot() == {"@mixed": ["python", "rust"]}


def test_mutation_kept_when_persist_fails() -> None:
    def failing() -> None:
        raise OSError("disk full")

    registry = SubscriptionRegistry(on_change=failing)
    try:
        registry.subscribe("@a", "python")
    except OSError:
        pass

    assert registry.topics_of("@a") == ["python"]
