from __future__ import annotations

import asyncio
from typing import Optional

from adapters.telegram_mapper import build_inbound, display_label, subscriber_id_from_dialog, subscriber_id_from_entity
from core.identity import UNKNOWN_SUBSCRIBER
from core.registry import SubscriptionRegistry


class DummyUser:
    def __init__(self, user_id: Optional[int], username: Optional[str] = None) -> None:
        self.id = user_id
        self.username = username


class DummyDialog:
    def __init__(self, entity, dialog_id: int) -> None:
        self.entity = entity
        self.id = dialog_id


class DummyMessage:
    def __init__(self, *, text: str, sender, chat_id: int = 42, out: bool = False) -> None:
        self.raw_text = text
        self._sender = sender
        self.sender_id = getattr(sender, "id", None)
        self.chat_id = chat_id
        self.out = out

    async def get_sender(self):
        return self._sender


def test_id_uses_peer_id_even_with_username() -> None:
    assert subscriber_id_from_entity(DummyUser(7, "Alice_Dev")) == "chat_id:7"
    assert display_label(DummyUser(7, "Alice_Dev"), "chat_id:7") == "@alice_dev (chat_id:7)"
    assert display_label(DummyUser(7), "chat_id:7") == "chat_id:7"


def test_id_is_stable_across_username_changes() -> None:
    before = subscriber_id_from_entity(DummyUser(7, "alice"))
    renamed = subscriber_id_from_entity(DummyUser(7, "alice_new"))
    removed = subscriber_id_from_entity(DummyUser(7))

    assert before == renamed == removed == "chat_id:7"


def test_subscription_survives_username_change() -> None:
    registry = SubscriptionRegistry()
    registry.subscribe(subscriber_id_from_entity(DummyUser(7, "alice")), "golang")

    dialog_id = subscriber_id_from_dialog(DummyDialog(DummyUser(7, "alice_new"), 7))

    assert registry.subscribers_of("golang") == [dialog_id]
    assert registry.unsubscribe_all(subscriber_id_from_entity(DummyUser(7))) is True


def test_falls_back_to_dialog_id() -> None:
    assert subscriber_id_from_dialog(DummyDialog(None, 99)) == "chat_id:99"
    assert subscriber_id_from_entity(None) == UNKNOWN_SUBSCRIBER


def test_build_inbound_matches_dialog_rule() -> None:
    user = DummyUser(7, "Alice")
    inbound = asyncio.run(build_inbound(DummyMessage(text="subscribe python", sender=user)))

    assert inbound is not None
    assert inbound.subscriber_id == subscriber_id_from_dialog(DummyDialog(user, 7))
    assert inbound.display_name == "@alice (chat_id:7)"
    assert inbound.chat_id == 42
    assert inbound.text == "subscribe python"


def test_build_inbound_skips_own_and_empty_messages() -> None:
    user = DummyUser(7)
    assert asyncio.run(build_inbound(DummyMessage(text="hi", sender=user, out=True))) is None
    assert asyncio.run(build_inbound(DummyMessage(text="  ", sender=user))) is None
