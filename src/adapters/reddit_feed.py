"""Subreddit RSS feed adapter.

Fetches the top posts of a subreddit through its public RSS feed. Every
failure degrades to an empty result so the poll loop never has to care.
"""

from __future__ import annotations

import asyncio
import calendar
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import feedparser
import requests

from core.errors import FeedFetchError
from core.models import FeedItem

LOGGER = logging.getLogger(__name__)

FEED_URL = "https://www.reddit.com/r/{topic}/top/.rss"
DEFAULT_USER_AGENT = "redscope/0.1 (subreddit notifier)"


def _published_at(entry: Any) -> Optional[datetime]:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)


def entry_to_item(entry: Any) -> Optional[FeedItem]:
    """Map one feedparser entry to a FeedItem; None without a stable id."""

    item_id = entry.get("id") or entry.get("link")
    if not item_id:
        return None
    return FeedItem(
        item_id=str(item_id),
        title=entry.get("title", "") or "",
        link=entry.get("link", "") or "",
        author=entry.get("author", "") or "",
        content_snippet=entry.get("summary", "") or "",
        published_at=_published_at(entry),
    )


class RedditFeedSource:
    """FeedSource adapter: requests fetches the bytes, feedparser parses them."""

    def __init__(self, timeout_seconds: float = 5.0, user_agent: str = DEFAULT_USER_AGENT) -> None:
        self._timeout = timeout_seconds
        self._user_agent = user_agent

    def _parse(self, topic: str) -> Any:
        url = FEED_URL.format(topic=topic)
        try:
            # Bounds the connect and each socket read.
            response = requests.get(url, headers={"User-Agent": self._user_agent}, timeout=self._timeout)
        except requests.Timeout as exc:
            raise FeedFetchError(f"Timed out after {self._timeout}s for {url}") from exc
        except requests.RequestException as exc:
            raise FeedFetchError(f"Request failed for {url}: {exc}") from exc
        if response.status_code >= 400:
            raise FeedFetchError(f"HTTP {response.status_code} for {url}")

        feed = feedparser.parse(response.content)
        if feed.bozo and not feed.entries:
            raise FeedFetchError(f"Unparseable feed {url}: {feed.get('bozo_exception')}")
        return feed

    async def fetch_items(self, topic: str, limit: int) -> List[FeedItem]:
        """Return up to ``limit`` items for ``topic``, or [] on any failure."""

        loop = asyncio.get_running_loop()
        try:
            feed = await loop.run_in_executor(None, self._parse, topic)
        except Exception as exc:
            LOGGER.error("Error fetching r/%s: %s", topic, exc)
            return []

        items: List[FeedItem] = []
        for entry in feed.entries[:limit]:
            item = entry_to_item(entry)
            if item is None:
                LOGGER.debug("Skipping r/%s entry without id", topic)
                continue
            items.append(item)
        return items
