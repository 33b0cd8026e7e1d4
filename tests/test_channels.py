"""Tests for the delivery transports and their registry."""

from __future__ import annotations

import pytest

from inventory_alerts.application.use_cases.notifications import (
    ChannelRegistry,
    DeliveryChannel,
    EmailChannel,
    InAppChannel,
    NotificationDeliveryError,
    TelegramChannel,
)
from inventory_alerts.domain.entities import (
    NotificationChannel,
    NotificationPayload,
    NotificationRecord,
    NotificationType,
    User,
    UserRole,
)
from inventory_alerts.infrastructure.email import EmailDeliveryError
from inventory_alerts.infrastructure.telegram import TelegramAPIError


def _record(channel=NotificationChannel.APP) -> NotificationRecord:
    return NotificationRecord(
        id=42,
        hotel_id=1,
        recipient_id=7,
        type=NotificationType.EXPIRY_WARNING,
        title="Expiring soon: Milk",
        message="Milk (12 l) expires in 5 days (2026-03-15).",
        channels=[channel],
        payload=NotificationPayload(product_name="Milk", unit="l"),
    )


def _user(**overrides) -> User:
    values = {
        "id": 7,
        "hotel_id": 1,
        "department_id": None,
        "name": "Ana",
        "email": "ana@example.com",
        "role": UserRole.HOTEL_ADMIN,
        "telegram_chat_id": "555",
    }
    values.update(overrides)
    return User(**values)


class FakePublisher:
    def __init__(self) -> None:
        self.records: list[NotificationRecord] = []

    def dispatch(self, record: NotificationRecord) -> bool:
        self.records.append(record)
        return False


class FakeTelegramClient:
    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[tuple[str, str]] = []

    def send_message(self, chat_id: str, text: str, *, disable_notification: bool = False) -> str:
        if self.error is not None:
            raise self.error
        self.sent.append((chat_id, text))
        return "9001"


def test_in_app_channel_always_succeeds():
    publisher = FakePublisher()

    receipt = InAppChannel(publisher).dispatch(_record(), _user())

    assert receipt.channel is NotificationChannel.APP
    assert publisher.records[0].id == 42


def test_telegram_requires_chat_binding():
    channel = TelegramChannel(FakeTelegramClient())

    with pytest.raises(NotificationDeliveryError) as exc_info:
        channel.dispatch(_record(NotificationChannel.TELEGRAM), _user(telegram_chat_id=None))

    assert exc_info.value.reason == "Recipient has no Telegram chat binding"


def test_telegram_returns_message_id():
    client = FakeTelegramClient()

    receipt = TelegramChannel(client).dispatch(_record(NotificationChannel.TELEGRAM), _user())

    assert receipt.external_id == "9001"
    chat_id, text = client.sent[0]
    assert chat_id == "555"
    assert "<b>Expiring soon: Milk</b>" in text


def test_telegram_errors_are_normalized():
    client = FakeTelegramClient(error=TelegramAPIError("Telegram API error 403: bot was blocked"))

    with pytest.raises(NotificationDeliveryError, match="bot was blocked"):
        TelegramChannel(client).dispatch(_record(NotificationChannel.TELEGRAM), _user())


def test_email_requires_address():
    channel = EmailChannel(sender=lambda subject, body, to: None)

    with pytest.raises(NotificationDeliveryError, match="no email address"):
        channel.dispatch(_record(NotificationChannel.EMAIL), _user(email=None))


def test_email_sends_rendered_html():
    sent: list[tuple[str, str, str]] = []

    EmailChannel(sender=lambda *args: sent.append(args)).dispatch(
        _record(NotificationChannel.EMAIL), _user()
    )

    subject, body, recipient = sent[0]
    assert subject == "Expiring soon: Milk"
    assert "<h2>Expiring soon: Milk</h2>" in body
    assert recipient == "ana@example.com"


def test_email_errors_are_normalized():
    def failing_sender(subject, body, to):
        raise EmailDeliveryError("Email delivery is not configured")

    with pytest.raises(NotificationDeliveryError, match="not configured"):
        EmailChannel(sender=failing_sender).dispatch(_record(NotificationChannel.EMAIL), _user())


def test_registry_rejects_unregistered_channel():
    registry = ChannelRegistry([InAppChannel(FakePublisher())])

    with pytest.raises(NotificationDeliveryError, match="telegram"):
        registry.dispatch(NotificationChannel.TELEGRAM, _record(), _user())


def test_registry_wraps_unexpected_errors():
    class ExplodingChannel(DeliveryChannel):
        channel = NotificationChannel.APP

        def dispatch(self, record, recipient):
            raise RuntimeError("socket closed")

    registry = ChannelRegistry([ExplodingChannel()])

    with pytest.raises(NotificationDeliveryError, match="socket closed"):
        registry.dispatch(NotificationChannel.APP, _record(), _user())
