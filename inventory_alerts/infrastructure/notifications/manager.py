"""Registry of the inbox websockets opened by each user."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Keep the open inbox sockets of every user and fan messages out to them."""

    def __init__(self) -> None:
        self._sockets: dict[int, list[WebSocket]] = {}

    async def connect(self, user_id: int, websocket: WebSocket) -> None:
        await websocket.accept()
        self._sockets.setdefault(user_id, []).append(websocket)
        logger.debug(
            "User %s opened an inbox socket (%d open)", user_id, len(self._sockets[user_id])
        )

    def disconnect(self, user_id: int, websocket: WebSocket) -> None:
        sockets = self._sockets.get(user_id, [])
        if websocket in sockets:
            sockets.remove(websocket)
        if not sockets:
            self._sockets.pop(user_id, None)

    def has_connections(self, user_id: int) -> bool:
        return bool(self._sockets.get(user_id))

    async def send_to_user(self, user_id: int, message: dict[str, Any]) -> int:
        """Send ``message`` to every socket of ``user_id`` and return how many received it.

        Sockets that fail to send are dropped from the registry.
        """

        reached = 0
        for websocket in list(self._sockets.get(user_id, [])):
            try:
                await websocket.send_json(message)
            except Exception:
                logger.warning("Dropping stale websocket for user %s", user_id, exc_info=True)
                self.disconnect(user_id, websocket)
            else:
                reached += 1
        return reached


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
