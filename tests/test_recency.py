from __future__ import annotations

import pytest

from core.recency import BoundedRecencySet


def test_keeps_last_capacity_items_in_order() -> None:
    for capacity in (1, 3, 50):
        recency = BoundedRecencySet[str](capacity)
        items = [f"id{i}" for i in range(capacity + 7)]
        for item in items:
            assert recency.add(item)
        assert recency.serialize() == items[-capacity:]
        assert len(recency) == capacity


def test_add_existing_member_is_noop() -> None:
    recency = BoundedRecencySet[str](3)
    recency.add("a")
    recency.add("b")

    assert recency.add("a") is False
    assert recency.serialize() == ["a", "b"]


def test_has_does_not_refresh_age() -> None:
    recency = BoundedRecencySet[str](2)
    recency.add("a")
    recency.add("b")
    assert recency.has("a")

    recency.add("c")

    assert not recency.has("a")
    assert recency.serialize() == ["b", "c"]


def test_readding_does_not_refresh_age() -> None:
    recency = BoundedRecencySet[str](2)
    recency.add("a")
    recency.add("b")
    recency.add("a")

    recency.add("c")

    assert recency.serialize() == ["b", "c"]


def test_delete_and_clear() -> None:
    recency = BoundedRecencySet[str](5)
    for item in "abc":
        recency.add(item)

    assert recency.delete("b") is True
    assert recency.delete("b") is False
    assert recency.serialize() == ["a", "c"]

    recency.clear()
    assert len(recency) == 0
    assert recency.capacity == 5


def test_deserialize_reproduces_order() -> None:
    original = BoundedRecencySet[str](10)
    for item in ["x", "y", "z"]:
        original.add(item)

    restored = BoundedRecencySet.deserialize(original.serialize(), 10)

    assert restored.serialize() == ["x", "y", "z"]
    assert restored.capacity == 10


def test_deserialize_truncates_to_newest() -> None:
    restored = BoundedRecencySet.deserialize(["1", "2", "3", "4", "5"], 2)
    assert restored.serialize() == ["4", "5"]


def test_zero_capacity_never_retains() -> None:
    recency = BoundedRecencySet[str](0)
    assert recency.add("a") is False
    assert not recency.has("a")
    assert len(recency) == 0


def test_negative_capacity_rejected() -> None:
    with pytest.raises(ValueError):
        BoundedRecencySet[str](-1)
