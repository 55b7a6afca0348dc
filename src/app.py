"""Application entry point for the redscope notifier."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv
from telethon import events

import settings
from adapters.json_storage import JsonSnapshotStore
from adapters.notification_formatting import build_formatter
from adapters.reddit_feed import RedditFeedSource
from adapters.telegram_mapper import build_inbound
from adapters.telegram_transport import TelegramTransport
from client import build_client
from core.commands import CommandHandler
from core.config import PollConfig, RecencyConfig
from core.dispatcher import DispatchCoordinator
from core.errors import PersistenceReadError
from core.poller import FeedPoller
from core.state import RegistryState
from get_session import authorize, login

NAME = "REDSCOPE"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    # Console logging is on unless explicitly disabled.
    if not config.get("enabled", True):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _RedactingFormatter(_collect_redaction_values(config), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/redscope.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
            backupCount=int(file_cfg.get("backup_count", 5)),
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)
    # Telethon is chatty at INFO about reconnects and updates.
    logging.getLogger("telethon").setLevel(max(level, logging.WARNING))


def _load_state() -> RegistryState:
    recency = RecencyConfig(
        restored_capacity=settings.RESTORED_CAPACITY,
        fresh_capacity=settings.FRESH_CAPACITY,
    )
    return RegistryState.load(JsonSnapshotStore.in_directory(settings.DATA_DIR), recency)


async def _serve(client, poll_config: PollConfig) -> None:
    logger = logging.getLogger(__name__)

    await client.connect()
    await authorize(client)
    me = await client.get_me()

    state = _load_state()
    formatter = build_formatter(settings.NOTIFICATION_FORMAT)
    feed = RedditFeedSource(settings.FEED_TIMEOUT_SECONDS, settings.FEED_USER_AGENT)
    transport = TelegramTransport(client, settings.NOTIFICATION_FORMAT)
    dispatcher = DispatchCoordinator(state.registry, state.dedup, transport, formatter)
    poller = FeedPoller(state.registry, feed, dispatcher, poll_config)
    commands = CommandHandler(state.registry, feed, formatter, poll_config.post_limit)

    # Single private-message handler; all parsing lives in the core.
    @client.on(events.NewMessage(incoming=True, func=lambda e: e.is_private))
    async def handler(event) -> None:
        try:
            if event.sender_id == me.id:
                return
            inbound = await build_inbound(event.message)
            if inbound is None:
                return
            for reply in await commands.handle(inbound):
                await transport.reply(inbound.chat_id, reply)
        except Exception:
            logger.exception("Error while handling inbound message")

    logger.info("Ready to handle subreddit subscriptions")
    logger.info("Will check for new posts every %s minutes", poll_config.interval_minutes)
    logger.info("Will fetch up to %s posts at a time", poll_config.post_limit)

    poll_task = asyncio.create_task(poller.run_forever())
    try:
        logger.info("Client connected. Waiting for messages...")
        await client.run_until_disconnected()
    finally:
        poller.stop()
        await poll_task


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)
    logger.info("Starting redscope")

    poll_config = PollConfig(
        interval_minutes=settings.POLL_INTERVAL_MINUTES,
        post_limit=settings.POST_LIMIT,
    )
    client = build_client()
    client.loop.run_until_complete(_serve(client, poll_config))


def _status() -> None:
    """Print the persisted subscriptions and seen-item windows."""

    store = JsonSnapshotStore.in_directory(settings.DATA_DIR)
    try:
        snapshot = store.load()
    except PersistenceReadError as exc:
        print(f"Unreadable snapshot: {exc}")
        return
    if snapshot is None:
        print(f"No snapshot at {store.path}")
        return

    print(f"Snapshot: {store.path}")
    print(f"Subscribers: {len(snapshot.subscriptions)}")
    for subscriber_id, topics in sorted(snapshot.subscriptions.items()):
        print(f"  {subscriber_id} | {', '.join(f'r/{topic}' for topic in topics)}")
    print(f"Tracked topics: {len(snapshot.seen_items)}")
    for topic, item_ids in sorted(snapshot.seen_items.items()):
        print(f"  r/{topic} | {len(item_ids)} seen")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="redscope")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the notifier")
    subparsers.add_parser("login", help="Authorize the Telegram session")
    subparsers.add_parser("status", help="Show persisted subscriptions and seen items")

    args = parser.parse_args(argv)
    if args.command == "login":
        _print_banner()
        asyncio.run(login())
        return
    if args.command == "status":
        _status()
        return
    _run()


if __name__ == "__main__":
    main()
