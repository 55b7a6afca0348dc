"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from core.errors import DeliveryError


@dataclass(frozen=True)
class FeedItem:
    """A single item fetched for a topic."""

    item_id: str
    title: str
    link: str
    author: str = ""
    content_snippet: str = ""
    published_at: Optional[datetime] = None


@dataclass(frozen=True)
class InboundMessage:
    """Minimal inbound text message used by the command handler."""

    subscriber_id: str
    chat_id: int
    text: str
    display_name: str = ""


@dataclass
class PersistedSnapshot:
    """The durable document covering subscriptions and seen items.

    Subscriber topic lists and seen-item lists keep their order: seen items
    are oldest first.
    """

    subscriptions: Dict[str, List[str]] = field(default_factory=dict)
    seen_items: Dict[str, List[str]] = field(default_factory=dict)


class DispatchOutcome(str, Enum):
    """Terminal states of one item delivery attempt."""

    DUPLICATE = "duplicate"
    NO_SUBSCRIBERS = "no_subscribers"
    DELIVERED = "delivered"


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of offering one item, with per-send counts."""

    outcome: DispatchOutcome
    sent: int = 0
    skipped: int = 0
    failed: int = 0
    errors: Tuple[DeliveryError, ...] = ()

    @property
    def delivered(self) -> bool:
        return self.outcome is DispatchOutcome.DELIVERED
