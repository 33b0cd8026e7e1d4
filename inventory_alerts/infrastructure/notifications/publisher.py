"""Utility helpers to push notification records to websocket subscribers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from anyio import from_thread

from inventory_alerts.domain.entities import NotificationRecord

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class NotificationPublisher:
    """Serialize notification records and schedule their delivery."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    def dispatch(self, notification: NotificationRecord) -> bool:
        """Schedule ``notification`` for its recipient's open websockets.

        Returns ``False`` when the recipient has no connection or the push
        could not be scheduled from the current thread.
        """

        user_id = notification.recipient_id
        if not self._manager.has_connections(user_id):
            return False

        message = {"type": "notification", "data": serialize_notification(notification)}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(self._manager.send_to_user, user_id, message)
            except RuntimeError:
                logger.warning(
                    "No event loop available to push notification %s to user %s",
                    notification.id,
                    user_id,
                )
                return False
        else:
            loop.create_task(self._manager.send_to_user(user_id, message))
        return True


def serialize_notification(notification: NotificationRecord) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.recipient_id,
        "type": notification.type.value,
        "priority": int(notification.priority),
        "title": notification.title,
        "message": notification.message,
        "payload": notification.payload.to_dict(),
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "read_at": notification.read_at.isoformat() if notification.read_at else None,
    }


notification_publisher = NotificationPublisher(notification_manager)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "serialize_notification",
]
