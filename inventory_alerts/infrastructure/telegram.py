"""Minimal client for the Telegram Bot API ``sendMessage`` method."""

from __future__ import annotations

import logging
from typing import Any

import requests

from inventory_alerts.config import Settings, get_settings

logger = logging.getLogger(__name__)

_TELEGRAM_API = "{base_url}/bot{token}/{method}"
MAX_MESSAGE_LENGTH = 4096


class TelegramAPIError(Exception):
    """Raised when the Bot API cannot be reached or rejects a request."""


class TelegramClient:
    """Send HTML formatted messages to Telegram chats."""

    def __init__(
        self,
        token: str | None,
        *,
        base_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TelegramClient":
        settings = settings or get_settings()
        return cls(
            settings.telegram_bot_token,
            base_url=settings.telegram_api_url,
            timeout=settings.telegram_timeout_seconds,
        )

    def send_message(
        self,
        chat_id: str,
        text: str,
        *,
        disable_notification: bool = False,
    ) -> str:
        """Send ``text`` to ``chat_id`` and return the Telegram message id.

        ``text`` is HTML and is never cut, so it must already fit
        ``MAX_MESSAGE_LENGTH``.
        """

        if not self._token:
            raise TelegramAPIError("Telegram bot token is not configured")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise TelegramAPIError(
                f"Message has {len(text)} characters, Telegram accepts at most {MAX_MESSAGE_LENGTH}"
            )

        url = _TELEGRAM_API.format(
            base_url=self._base_url, token=self._token, method="sendMessage"
        )
        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "text": text or ".",
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
            "disable_notification": disable_notification,
        }

        try:
            response = requests.post(url, json=payload, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error("Telegram sendMessage to chat %s failed: %s", chat_id, exc)
            raise TelegramAPIError(f"Telegram request failed: {exc}") from exc

        if response.status_code != 200:
            logger.error(
                "Telegram sendMessage %s for chat %s; body=%s",
                response.status_code,
                chat_id,
                response.text,
            )
            raise TelegramAPIError(_describe_error(response))

        try:
            body = response.json()
        except ValueError as exc:
            raise TelegramAPIError("Telegram returned a non JSON response") from exc

        if not body.get("ok"):
            raise TelegramAPIError(body.get("description") or "Telegram rejected the message")

        message_id = (body.get("result") or {}).get("message_id")
        return str(message_id) if message_id is not None else ""


def _describe_error(response: requests.Response) -> str:
    try:
        description = response.json().get("description")
    except ValueError:
        description = None
    if description:
        return f"Telegram API error {response.status_code}: {description}"
    return f"Telegram API error {response.status_code}"


__all__ = ["MAX_MESSAGE_LENGTH", "TelegramAPIError", "TelegramClient"]
