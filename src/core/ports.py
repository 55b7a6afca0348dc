"""Ports (interfaces) used by the core.

Ports define the minimal contracts for storage, feed, and transport adapters
so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from core.models import FeedItem, PersistedSnapshot


class SnapshotStore(Protocol):
    """Durable storage for the single subscriptions/seen-items document."""

    def load(self) -> Optional[PersistedSnapshot]:
        """Return the stored snapshot, or None when nothing is stored yet.

        Raises PersistenceReadError when the document cannot be read.
        """
        ...

    def save(self, snapshot: PersistedSnapshot) -> None:
        """Replace the stored snapshot; raises PersistenceWriteError."""
        ...


class FeedSource(Protocol):
    """Fetch recent items for a topic; returns [] on any failure."""

    async def fetch_items(self, topic: str, limit: int) -> Sequence[FeedItem]:
        ...


class Conversation(Protocol):
    """One conversation the transport can send text into."""

    async def send(self, text: str) -> Any:
        ...


class Transport(Protocol):
    """Delivery substrate for dispatched payloads."""

    async def list_conversations(self) -> Sequence[Conversation]:
        ...

    async def resolve_subscriber_id(self, conversation: Conversation) -> str:
        """Return the subscriber id for a conversation, or UNKNOWN_SUBSCRIBER."""
        ...
