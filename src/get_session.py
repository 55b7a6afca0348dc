"""Interactive login for the Telegram account that serves subscribers.

The session file created here is reused by ``redscope run``; subscribers
message this account directly.
"""

from __future__ import annotations

import asyncio
import logging
import os
from getpass import getpass
from typing import Awaitable, Callable, Dict

import qrcode
from telethon import TelegramClient, errors

from client import build_client

LOGGER = logging.getLogger(__name__)

QR_TIMEOUT_SECONDS = 120


def _print_qr(url: str) -> None:
    qr = qrcode.QRCode(border=1)
    qr.add_data(url)
    qr.make(fit=True)
    qr.print_ascii(invert=True)


def _two_factor_password() -> str:
    return os.getenv("2FA") or getpass("2FA password: ")


async def _login_qr(client: TelegramClient) -> None:
    qr_login = await client.qr_login()
    _print_qr(qr_login.url)
    print("Scan the code with Telegram > Settings > Devices > Link Desktop Device")
    await qr_login.wait(timeout=QR_TIMEOUT_SECONDS)


async def _login_phone(client: TelegramClient) -> None:
    phone = os.getenv("PHONE") or input("Phone number (international format): ").strip()
    await client.send_code_request(phone)
    await client.sign_in(phone=phone, code=input("Login code: ").strip())


LOGIN_METHODS: Dict[str, Callable[[TelegramClient], Awaitable[None]]] = {
    "qr": _login_qr,
    "phone": _login_phone,
}


def _choose_method() -> str:
    method = (os.getenv("LOGIN_METHOD") or "").strip().lower()
    if method in LOGIN_METHODS:
        return method
    choices = {"1": "qr", "2": "phone"}
    while True:
        print("\nLogin methods:\n[1] QR code\n[2] Phone code\n[3] Exit")
        choice = input("redscope > ").strip()
        if choice == "3":
            raise SystemExit(0)
        if choice in choices:
            return choices[choice]
        print("Invalid option. Please choose 1, 2, or 3.")


async def authorize(client: TelegramClient) -> None:
    """Sign the client in unless its session is already authorized."""

    if await client.is_user_authorized():
        return

    method = _choose_method()
    LOGGER.info("Authorizing Telegram session via %s", method)
    try:
        await LOGIN_METHODS[method](client)
    except errors.SessionPasswordNeededError:
        await client.sign_in(password=_two_factor_password())


async def login() -> None:
    """Authorize the configured session and report the account name."""

    client = build_client()
    await client.connect()
    try:
        await authorize(client)
        me = await client.get_me()
        print(f"Logged in as: {me.first_name}")
    finally:
        await client.disconnect()


if __name__ == "__main__":
    asyncio.run(login())
