"""Load and persist the registry and dedup index as one snapshot.

Both structures are written together after every mutation, so the stored
document always reflects a single consistent point in time.
"""

from __future__ import annotations

import logging

from core.config import RecencyConfig
from core.dedup import DedupIndex
from core.errors import PersistenceReadError, PersistenceWriteError
from core.models import PersistedSnapshot
from core.ports import SnapshotStore
from core.registry import SubscriptionRegistry

LOGGER = logging.getLogger(__name__)


class RegistryState:
    """Owns the registry, the dedup index, and their snapshot store."""

    def __init__(
        self,
        store: SnapshotStore,
        registry: SubscriptionRegistry,
        dedup: DedupIndex,
    ) -> None:
        self._store = store
        self.registry = registry
        self.dedup = dedup
        registry.bind(self.save)
        dedup.bind(self.save)

    @classmethod
    def load(cls, store: SnapshotStore, config: RecencyConfig) -> "RegistryState":
        """Restore state from ``store``.

        A missing snapshot is initialized by writing an empty document. A
        corrupt one is logged and replaced in memory by an empty state.
        """

        snapshot = None
        missing = False
        try:
            snapshot = store.load()
            missing = snapshot is None
        except PersistenceReadError:
            LOGGER.exception("Failed to load snapshot, starting with empty state")

        snapshot = snapshot or PersistedSnapshot()
        registry = SubscriptionRegistry(snapshot.subscriptions)
        dedup = DedupIndex(
            snapshot.seen_items,
            restored_capacity=config.restored_capacity,
            fresh_capacity=config.fresh_capacity,
        )
        state = cls(store, registry, dedup)
        if missing:
            try:
                state.save()
            except PersistenceWriteError:
                LOGGER.exception("Failed to write initial empty snapshot")

        LOGGER.info(
            "Loaded %s subscribers and %s topic seen lists",
            len(registry),
            len(dedup.topics()),
        )
        return state

    def snapshot(self) -> PersistedSnapshot:
        return PersistedSnapshot(
            subscriptions=self.registry.snapshot(),
            seen_items=self.dedup.snapshot(),
        )

    def save(self) -> None:
        """Write the full snapshot; PersistenceWriteError propagates."""

        self._store.save(self.snapshot())
