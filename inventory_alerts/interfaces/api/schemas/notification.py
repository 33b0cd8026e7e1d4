"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from inventory_alerts.domain.entities import (
    NotificationChannel,
    NotificationStatus,
    NotificationType,
)


class NotificationMarkReadRequest(BaseModel):
    """Payload used to mark a batch of notifications as read."""

    ids: list[int] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[int]:
        """Return the list of identifiers without duplicates preserving order."""

        return list(dict.fromkeys(self.ids))


class NotificationMarkReadResponse(BaseModel):
    updated: int


class NotificationRead(BaseModel):
    """Representation of an in-app notification delivered to the client."""

    id: int
    user_id: int
    type: NotificationType
    priority: int
    title: str
    message: str
    channels: list[NotificationChannel]
    status: NotificationStatus
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None
    delivered_at: datetime | None = None
    read_at: datetime | None = None


class EvaluationResultRead(BaseModel):
    events: int
    created: int
    duplicates: int
    failed_rules: int


class QueueResultRead(BaseModel):
    delivered: int
    failed: int


class NotificationStatsRead(BaseModel):
    """Number of notifications of one type and status created on one day."""

    day: date
    status: NotificationStatus
    type: NotificationType
    count: int


__all__ = [
    "EvaluationResultRead",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "NotificationStatsRead",
    "QueueResultRead",
]
