"""Delivery transports used by the queue processor."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from inventory_alerts.domain.entities import NotificationChannel, NotificationRecord, User
from inventory_alerts.infrastructure.email import EmailDeliveryError, send_email
from inventory_alerts.infrastructure.notifications import (
    NotificationPublisher,
    notification_publisher,
)
from inventory_alerts.infrastructure.telegram import TelegramAPIError, TelegramClient

from .factory import format_chat_message, format_email_html

logger = logging.getLogger(__name__)


class NotificationDeliveryError(Exception):
    """Raised when a transport cannot deliver a notification."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class DeliveryReceipt:
    """Acknowledgement returned by a transport."""

    channel: NotificationChannel
    external_id: str | None = None


class DeliveryChannel(ABC):
    """Base class for notification transports."""

    channel: NotificationChannel

    @abstractmethod
    def dispatch(self, record: NotificationRecord, recipient: User) -> DeliveryReceipt:
        """Deliver ``record`` to ``recipient`` or raise :class:`NotificationDeliveryError`."""


class InAppChannel(DeliveryChannel):
    """The stored record is the in-app notification; open websockets get a push."""

    channel = NotificationChannel.APP

    def __init__(self, publisher: NotificationPublisher | None = None) -> None:
        self._publisher = publisher or notification_publisher

    def dispatch(self, record: NotificationRecord, recipient: User) -> DeliveryReceipt:
        pushed = self._publisher.dispatch(record)
        logger.debug(
            "In-app notification %s stored for user %s (pushed=%s)",
            record.id,
            recipient.id,
            pushed,
        )
        return DeliveryReceipt(channel=self.channel)


class TelegramChannel(DeliveryChannel):
    """Send notifications to the recipient's bound Telegram chat."""

    channel = NotificationChannel.TELEGRAM

    def __init__(self, client: TelegramClient | None = None) -> None:
        self._client = client

    @property
    def client(self) -> TelegramClient:
        if self._client is None:
            self._client = TelegramClient.from_settings()
        return self._client

    def dispatch(self, record: NotificationRecord, recipient: User) -> DeliveryReceipt:
        if not recipient.telegram_chat_id:
            raise NotificationDeliveryError("Recipient has no Telegram chat binding")
        try:
            message_id = self.client.send_message(
                recipient.telegram_chat_id, format_chat_message(record)
            )
        except TelegramAPIError as exc:
            raise NotificationDeliveryError(str(exc)) from exc
        return DeliveryReceipt(channel=self.channel, external_id=message_id or None)


class EmailChannel(DeliveryChannel):
    """Send notifications by email through SendGrid."""

    channel = NotificationChannel.EMAIL

    def __init__(self, sender: Callable[[str, str, str], None] | None = None) -> None:
        self._sender = sender or send_email

    def dispatch(self, record: NotificationRecord, recipient: User) -> DeliveryReceipt:
        if not recipient.email:
            raise NotificationDeliveryError("Recipient has no email address")
        try:
            self._sender(record.title, format_email_html(record), recipient.email)
        except EmailDeliveryError as exc:
            raise NotificationDeliveryError(str(exc)) from exc
        return DeliveryReceipt(channel=self.channel)


class ChannelRegistry:
    """Look up the transport registered for each :class:`NotificationChannel`."""

    def __init__(self, channels: Iterable[DeliveryChannel] = ()) -> None:
        self._channels: dict[NotificationChannel, DeliveryChannel] = {}
        for channel in channels:
            self.register(channel)

    def register(self, channel: DeliveryChannel) -> None:
        self._channels[channel.channel] = channel

    def get(self, channel: NotificationChannel) -> DeliveryChannel | None:
        return self._channels.get(channel)

    def dispatch(
        self,
        channel: NotificationChannel,
        record: NotificationRecord,
        recipient: User,
    ) -> DeliveryReceipt:
        """Deliver through ``channel`` normalizing every failure."""

        transport = self.get(channel)
        if transport is None:
            raise NotificationDeliveryError(
                f"No transport registered for channel '{NotificationChannel(channel).value}'"
            )
        try:
            return transport.dispatch(record, recipient)
        except NotificationDeliveryError:
            raise
        except Exception as exc:
            logger.exception(
                "Unexpected error delivering notification %s via %s",
                record.id,
                transport.channel.value,
            )
            raise NotificationDeliveryError(str(exc) or exc.__class__.__name__) from exc


def default_channel_registry() -> ChannelRegistry:
    """Return a registry wired with the in-app, Telegram and email transports."""

    return ChannelRegistry([InAppChannel(), TelegramChannel(), EmailChannel()])


__all__ = [
    "ChannelRegistry",
    "DeliveryChannel",
    "DeliveryReceipt",
    "EmailChannel",
    "InAppChannel",
    "NotificationDeliveryError",
    "TelegramChannel",
    "default_channel_registry",
]
