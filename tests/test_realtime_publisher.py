"""Tests for the websocket notification publisher."""

from __future__ import annotations

import asyncio
from datetime import datetime

from inventory_alerts.domain.entities import (
    NotificationChannel,
    NotificationRecord,
    NotificationType,
    Priority,
)
from inventory_alerts.infrastructure.notifications import (
    NotificationConnectionManager,
    NotificationPublisher,
    serialize_notification,
)


class FakeWebSocket:
    def __init__(self) -> None:
        self.accepted = False
        self.sent: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        self.sent.append(message)


def _record() -> NotificationRecord:
    return NotificationRecord(
        id=5,
        hotel_id=1,
        recipient_id=7,
        type=NotificationType.EXPIRED,
        priority=Priority.URGENT,
        title="Expired: Milk",
        message="Milk (12 l) expires today (2026-03-10).",
        channels=[NotificationChannel.APP],
        created_at=datetime(2026, 3, 10, 9, 0),
    )


def test_serialize_notification():
    data = serialize_notification(_record())

    assert data["id"] == 5
    assert data["user_id"] == 7
    assert data["type"] == "expired"
    assert data["priority"] == 4
    assert data["created_at"] == "2026-03-10T09:00:00"
    assert data["read_at"] is None


def test_dispatch_without_connections_is_skipped():
    publisher = NotificationPublisher(NotificationConnectionManager())

    assert publisher.dispatch(_record()) is False


def test_dispatch_pushes_to_connected_user():
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)
    websocket = FakeWebSocket()

    async def scenario() -> bool:
        await manager.connect(7, websocket)
        scheduled = publisher.dispatch(_record())
        await asyncio.sleep(0.01)
        return scheduled

    assert asyncio.run(scenario()) is True
    assert websocket.accepted is True
    assert websocket.sent[0]["type"] == "notification"
    assert websocket.sent[0]["data"]["id"] == 5


def test_dispatch_outside_event_loop_does_not_raise():
    manager = NotificationConnectionManager()
    publisher = NotificationPublisher(manager)
    websocket = FakeWebSocket()
    asyncio.run(manager.connect(7, websocket))

    assert publisher.dispatch(_record()) is False
    assert websocket.sent == []


class BrokenWebSocket(FakeWebSocket):
    async def send_json(self, message: dict) -> None:
        raise RuntimeError("socket closed")


def test_send_to_user_drops_broken_sockets():
    manager = NotificationConnectionManager()
    healthy = FakeWebSocket()
    broken = BrokenWebSocket()

    async def scenario() -> int:
        await manager.connect(7, healthy)
        await manager.connect(7, broken)
        return await manager.send_to_user(7, {"type": "ping"})

    assert asyncio.run(scenario()) == 1
    assert healthy.sent == [{"type": "ping"}]
    assert manager.has_connections(7) is True

    manager.disconnect(7, healthy)
    assert manager.has_connections(7) is False
