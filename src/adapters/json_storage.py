"""JSON file storage adapter.

Implements the core SnapshotStore using a single JSON document:

    {"subscriptions": {subscriber: [topic, ...]},
     "seenPosts": {topic: [item_id, ...]}}

Writes go to a sibling temp file first and are swapped in with os.replace,
so a crash mid-write never leaves a truncated document behind.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.errors import PersistenceReadError, PersistenceWriteError
from core.models import PersistedSnapshot

LOGGER = logging.getLogger(__name__)

SNAPSHOT_FILENAME = "user_data.json"


def _string_lists(raw: Any, field: str) -> Dict[str, List[str]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise PersistenceReadError(f"'{field}' must be an object")
    result: Dict[str, List[str]] = {}
    for key, values in raw.items():
        if not isinstance(values, list) or not all(isinstance(value, str) for value in values):
            raise PersistenceReadError(f"'{field}.{key}' must be a list of strings")
        result[str(key)] = list(values)
    return result


class JsonSnapshotStore:
    """Thin JSON file wrapper that satisfies the SnapshotStore contract."""

    def __init__(self, path: os.PathLike | str) -> None:
        self._path = Path(path)

    @classmethod
    def in_directory(cls, data_dir: os.PathLike | str) -> "JsonSnapshotStore":
        return cls(Path(data_dir) / SNAPSHOT_FILENAME)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[PersistedSnapshot]:
        """Return the stored snapshot, or None if the file does not exist."""

        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PersistenceReadError(f"Could not read snapshot {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceReadError(f"Snapshot {self._path} is not a JSON object")

        return PersistedSnapshot(
            subscriptions=_string_lists(data.get("subscriptions"), "subscriptions"),
            seen_items=_string_lists(data.get("seenPosts"), "seenPosts"),
        )

    def save(self, snapshot: PersistedSnapshot) -> None:
        """Atomically replace the stored snapshot."""

        document = {
            "subscriptions": snapshot.subscriptions,
            "seenPosts": snapshot.seen_items,
        }
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self._path)
        except OSError as exc:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                LOGGER.warning("Could not remove temp snapshot %s", tmp_path)
            raise PersistenceWriteError(f"Could not write snapshot {self._path}: {exc}") from exc
        LOGGER.debug("Snapshot written to %s", self._path)
