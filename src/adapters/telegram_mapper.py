"""Telegram-to-core identity and message mapping adapter.

This keeps Telethon-specific details out of the core. Subscriber ids follow a
single rule everywhere: ``chat_id:<peer id>``. Usernames can be changed or
removed by their owners, so they are only used as display labels.
"""

from __future__ import annotations

from typing import Any, Optional

from telethon.tl.custom import Message

from core.identity import UNKNOWN_SUBSCRIBER
from core.models import InboundMessage


def subscriber_id_from_entity(entity: Any, fallback_id: Optional[int] = None) -> str:
    """Build the subscriber id for a Telethon user/chat entity."""

    entity_id = getattr(entity, "id", None) or fallback_id
    if entity_id is None:
        return UNKNOWN_SUBSCRIBER
    return f"chat_id:{entity_id}"


def subscriber_id_from_dialog(dialog: Any) -> str:
    entity = getattr(dialog, "entity", None)
    return subscriber_id_from_entity(entity, getattr(dialog, "id", None))


def display_label(entity: Any, subscriber_id: str) -> str:
    """Return ``@username (chat_id:N)`` when a username exists, else the id."""

    username = getattr(entity, "username", None)
    if isinstance(username, str) and username:
        return f"@{username.lower()} ({subscriber_id})"
    return subscriber_id


async def build_inbound(message: Message) -> Optional[InboundMessage]:
    """Build an InboundMessage, or None for messages commands ignore.

    Outgoing messages (our own replies) and media without text are skipped.
    """

    if getattr(message, "out", False):
        return None
    text = message.raw_text or ""
    if not text.strip():
        return None

    sender = await message.get_sender()
    subscriber_id = subscriber_id_from_entity(sender, getattr(message, "sender_id", None))
    if subscriber_id == UNKNOWN_SUBSCRIBER:
        return None
    return InboundMessage(
        subscriber_id=subscriber_id,
        chat_id=message.chat_id,
        text=text,
        display_name=display_label(sender, subscriber_id),
    )
