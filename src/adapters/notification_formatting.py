"""Shared notification formatting helpers.

Keeping formatting here prevents drift between the poll loop and command
replies, and keeps messages consistent regardless of delivery channel.
"""

from __future__ import annotations

import html
from datetime import timezone
from typing import Callable, Optional

from core.models import FeedItem

TIMESTAMP_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"


def format_published(item: FeedItem) -> Optional[str]:
    """Return the publish time in UTC, or None when the feed had none."""

    if item.published_at is None:
        return None
    published = item.published_at
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return published.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _format_markdown(item: FeedItem) -> str:
    """Create the Markdown body used with Telethon's parse_mode="md"."""

    def escape_md(value: str) -> str:
        for ch in r"*_[`":
            value = value.replace(ch, f"\\{ch}")
        return value

    lines = [
        f"📰 **{escape_md(item.title)}**",
        f"🔗 Link: {item.link}",
    ]
    published = format_published(item)
    if published:
        lines.append(f"⏰ Published: {published}")
    return "\n".join(lines)


def _format_html(item: FeedItem) -> str:
    safe_link = html.escape(item.link)
    parts = [
        f"📰 <b>{html.escape(item.title)}</b>",
        f"🔗 Link: <a href=\"{safe_link}\">{safe_link}</a>",
    ]
    published = format_published(item)
    if published:
        parts.append(f"⏰ Published: {html.escape(published)}")
    return "\n".join(parts)


def format_feed_item(item: FeedItem, mode: str = "markdown") -> str:
    """Return the item formatted for the requested mode."""

    if mode == "markdown":
        return _format_markdown(item)
    if mode == "html":
        return _format_html(item)
    raise ValueError(f"Unsupported notification format: {mode}")


def build_formatter(mode: str) -> Callable[[FeedItem], str]:
    """Bind a format mode, failing fast on unknown modes."""

    if mode not in {"markdown", "html"}:
        raise ValueError(f"Unsupported notification format: {mode}")
    return lambda item: format_feed_item(item, mode)
