"""Helpers for normalizing subscriber and topic identities."""

from __future__ import annotations

import re

# Sentinel returned by transports when a conversation cannot be resolved.
UNKNOWN_SUBSCRIBER = "unknown"

_TOPIC_RE = re.compile(r"^[a-z0-9_]{2,21}$")


def normalize_subscriber(subscriber_id: str) -> str:
    """Return the canonical (lowercase) form of a subscriber id."""

    return subscriber_id.lower()


def normalize_topic(topic: str) -> str:
    """Return the canonical (lowercase) form of a topic name."""

    return topic.lower()


def is_valid_topic(topic: str) -> bool:
    """Check a topic against subreddit naming rules."""

    return bool(_TOPIC_RE.match(normalize_topic(topic)))
