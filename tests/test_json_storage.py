from __future__ import annotations

import json
import os

import pytest

from adapters.json_storage import JsonSnapshotStore
from core.errors import PersistenceReadError, PersistenceWriteError
from core.models import PersistedSnapshot


def test_missing_file_loads_none(tmp_path) -> None:
    store = JsonSnapshotStore(tmp_path / "user_data.json")
    assert store.load() is None


def test_save_writes_expected_document(tmp_path) -> None:
    store = JsonSnapshotStore.in_directory(tmp_path / "data")
    store.save(PersistedSnapshot(subscriptions={"@a": ["python"]}, seen_items={"python": ["1", "2"]}))

    document = json.loads((tmp_path / "data" / "user_data.json").read_text(encoding="utf-8"))
    assert document == {"subscriptions": {"@a": ["python"]}, "seenPosts": {"python": ["1", "2"]}}
    assert not (tmp_path / "data" / "user_data.json.tmp").exists()


def test_save_then_load_roundtrip(tmp_path) -> None:
    store = JsonSnapshotStore(tmp_path / "user_data.json")
    snapshot = PersistedSnapshot(
        subscriptions={"@a": ["rust", "python"]},
        seen_items={"rust": ["c", "a", "b"]},
    )
    store.save(snapshot)

    assert store.load() == snapshot


def test_malformed_json_raises_read_error(tmp_path) -> None:
    path = tmp_path / "user_data.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceReadError):
        JsonSnapshotStore(path).load()


def test_wrong_shape_raises_read_error(tmp_path) -> None:
    path = tmp_path / "user_data.json"
    path.write_text(json.dumps({"subscriptions": {"@a": "python"}}), encoding="utf-8")

    with pytest.raises(PersistenceReadError):
        JsonSnapshotStore(path).load()


def test_missing_sections_default_to_empty(tmp_path) -> None:
    path = tmp_path / "user_data.json"
    path.write_text("{}", encoding="utf-8")

    assert JsonSnapshotStore(path).load() == PersistedSnapshot()


def test_failed_replace_raises_write_error_and_keeps_old_file(tmp_path, monkeypatch) -> None:
    store = JsonSnapshotStore(tmp_path / "user_data.json")
    store.save(PersistedSnapshot(subscriptions={"@a": ["python"]}))

    def broken_replace(src, dst) -> None:
        raise OSError("read-only filesystem")

    monkeypatch.setattr(os, "replace", broken_replace)
    with pytest.raises(PersistenceWriteError):
        store.save(PersistedSnapshot())

    monkeypatch.undo()
    assert not (tmp_path / "user_data.json.tmp").exists()
    assert store.load() == PersistedSnapshot(subscriptions={"@a": ["python"]})
