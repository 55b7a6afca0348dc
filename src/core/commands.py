"""Inbound command handling.

Commands arrive as plain text from subscribers. The handler mutates the
registry and returns the replies to send back; it never talks to the
transport directly so it stays easy to test.
"""

from __future__ import annotations

import logging
from typing import Callable, List

from core.errors import PersistenceWriteError
from core.identity import is_valid_topic, normalize_topic
from core.models import FeedItem, InboundMessage
from core.ports import FeedSource
from core.registry import SubscriptionRegistry

LOGGER = logging.getLogger(__name__)

HELP_TEXT = (
    "Sorry, I don't understand that command. Try these commands:\n"
    '- "subscribe <subreddit>" to subscribe and get recent posts (e.g., "subscribe games")\n'
    '- "unsubscribe <subreddit>" to unsubscribe from a subreddit\n'
    '- "unsubscribe-all" (or "stop") to unsubscribe from all subreddits\n'
    '- "list-subscriptions" to see your subscriptions\n'
    '- "list-topics" to see every subreddit someone follows'
)
SUBSCRIBE_USAGE = 'Use "subscribe <subreddit>" to subscribe to a subreddit. For example: "subscribe games"'
UNSUBSCRIBE_USAGE = 'Use "unsubscribe <subreddit>" to unsubscribe from a subreddit. For example: "unsubscribe games"'


def _topic_list(topics: List[str]) -> str:
    return ", ".join(f"r/{topic}" for topic in topics)


class CommandHandler:
    """Parse subscriber commands and apply them to the registry."""

    def __init__(
        self,
        registry: SubscriptionRegistry,
        feed: FeedSource,
        formatter: Callable[[FeedItem], str],
        post_limit: int,
    ) -> None:
        self._registry = registry
        self._feed = feed
        self._formatter = formatter
        self._post_limit = post_limit

    async def handle(self, message: InboundMessage) -> List[str]:
        """Return the replies for one inbound message (possibly empty)."""

        text = message.text.strip().lower()
        if not text:
            return []
        LOGGER.info("Received message from %s: %s", message.display_name or message.subscriber_id, text)

        command, *args = text.split()
        if command in {"subscribe", "reddit"}:
            if command == "reddit" and not args:
                return self._list_subscriptions(message.subscriber_id)
            if len(args) != 1:
                return [SUBSCRIBE_USAGE]
            return await self._subscribe(message.subscriber_id, args[0])
        if command == "unsubscribe":
            if len(args) != 1:
                return [UNSUBSCRIBE_USAGE]
            return self._unsubscribe(message.subscriber_id, args[0])
        if command in {"unsubscribe-all", "stop"} and not args:
            return self._unsubscribe_all(message.subscriber_id)
        if command == "list-subscriptions" and not args:
            return self._list_subscriptions(message.subscriber_id)
        if command == "list-topics" and not args:
            return self._list_topics()
        return [HELP_TEXT]

    async def _subscribe(self, subscriber_id: str, raw_topic: str) -> List[str]:
        topic = normalize_topic(raw_topic.removeprefix("r/"))
        if not is_valid_topic(topic):
            return [f"r/{topic} is not a valid subreddit name. {SUBSCRIBE_USAGE}"]

        replies: List[str] = []
        try:
            added = self._registry.subscribe(subscriber_id, topic)
        except PersistenceWriteError:
            LOGGER.exception("Failed to persist subscription of %s to r/%s", subscriber_id, topic)
            added = True
        if added:
            replies.append(
                f"Subscribed to r/{topic}! You'll now receive new posts from this subreddit.\n\n"
                "Here are some recent posts:"
            )

        # Recent posts go straight to the requester and are not marked seen.
        items = await self._feed.fetch_items(topic, self._post_limit)
        if not items:
            replies.append(f"Sorry, I couldn't fetch any posts from r/{topic} at the moment.")
            return replies
        replies.extend(self._formatter(item) for item in items)
        return replies

    def _unsubscribe(self, subscriber_id: str, raw_topic: str) -> List[str]:
        topic = normalize_topic(raw_topic.removeprefix("r/"))
        try:
            removed = self._registry.unsubscribe(subscriber_id, topic)
        except PersistenceWriteError:
            LOGGER.exception("Failed to persist unsubscribe of %s from r/%s", subscriber_id, topic)
            removed = True
        if removed:
            return [f"Unsubscribed from r/{topic}. You'll no longer receive posts from this subreddit."]
        return [f"You weren't subscribed to r/{topic}."]

    def _unsubscribe_all(self, subscriber_id: str) -> List[str]:
        try:
            removed = self._registry.unsubscribe_all(subscriber_id)
        except PersistenceWriteError:
            LOGGER.exception("Failed to persist unsubscribe-all of %s", subscriber_id)
            removed = True
        if removed:
            return ["You have been unsubscribed from all subreddits and will no longer receive posts."]
        return ["You weren't subscribed to any subreddits."]

    def _list_subscriptions(self, subscriber_id: str) -> List[str]:
        topics = self._registry.topics_of(subscriber_id)
        if not topics:
            return [f"You're not subscribed to any subreddits yet. {SUBSCRIBE_USAGE}"]
        return [f"You're subscribed to: {_topic_list(topics)}"]

    def _list_topics(self) -> List[str]:
        topics = sorted(self._registry.all_topics())
        if not topics:
            return ["Nobody is subscribed to any subreddits yet."]
        return [f"Active subreddits: {_topic_list(topics)}"]
