"""Telegram delivery adapter.

Conversations are the account's private dialogs. Each one is resolved to a
subscriber id with the same rule used for inbound messages, so the
dispatcher can match dialogs against registry subscribers.
"""

from __future__ import annotations

import logging
from typing import Any, List

from adapters.telegram_mapper import subscriber_id_from_dialog
from core.identity import UNKNOWN_SUBSCRIBER

LOGGER = logging.getLogger(__name__)

PARSE_MODES = {"markdown": "md", "html": "html"}


class TelegramConversation:
    """One private dialog the dispatcher can send into."""

    def __init__(self, client, dialog: Any, parse_mode: str) -> None:
        self._client = client
        self.dialog = dialog
        self._parse_mode = parse_mode

    async def send(self, text: str) -> int:
        message = await self._client.send_message(
            self.dialog.entity,
            text,
            parse_mode=self._parse_mode,
            link_preview=False,
        )
        return message.id


class TelegramTransport:
    """Transport adapter that sends through a Telethon client."""

    def __init__(self, client, format_mode: str = "markdown") -> None:
        if format_mode not in PARSE_MODES:
            raise ValueError(f"Unsupported notification format: {format_mode}")
        self._client = client
        self._parse_mode = PARSE_MODES[format_mode]

    async def list_conversations(self) -> List[TelegramConversation]:
        conversations: List[TelegramConversation] = []
        async for dialog in self._client.iter_dialogs():
            # Groups and channels are never subscribers.
            if not getattr(dialog, "is_user", False):
                continue
            conversations.append(TelegramConversation(self._client, dialog, self._parse_mode))
        return conversations

    async def resolve_subscriber_id(self, conversation: TelegramConversation) -> str:
        try:
            return subscriber_id_from_dialog(conversation.dialog)
        except Exception:
            LOGGER.exception("Failed to resolve subscriber for dialog")
            return UNKNOWN_SUBSCRIBER

    async def reply(self, chat_id: int, text: str) -> None:
        """Send a command reply into the chat the command came from."""

        await self._client.send_message(chat_id, text, parse_mode=self._parse_mode, link_preview=False)
