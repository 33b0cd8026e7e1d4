"""Domain entities describing a queued notification and its delivery state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any


class NotificationChannel(str, Enum):
    """Transports a notification can be delivered through."""

    APP = "app"
    TELEGRAM = "telegram"
    EMAIL = "email"


class NotificationType(str, Enum):
    """Kinds of notifications produced by the engine."""

    EXPIRY_WARNING = "expiry_warning"
    EXPIRY_CRITICAL = "expiry_critical"
    EXPIRED = "expired"
    LOW_STOCK = "low_stock"
    COLLECTION_REMINDER = "collection_reminder"
    SYSTEM_ALERT = "system_alert"


class Priority(IntEnum):
    """Queue priority; higher values are delivered first."""

    LOW = 1
    NORMAL = 2
    HIGH = 3
    URGENT = 4


class NotificationStatus(str, Enum):
    """Delivery states of a notification record."""

    PENDING = "pending"
    SENDING = "sending"
    DELIVERED = "delivered"
    RETRY = "retry"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (NotificationStatus.DELIVERED, NotificationStatus.FAILED)

    def can_transition_to(self, target: "NotificationStatus") -> bool:
        return target in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[NotificationStatus, frozenset[NotificationStatus]] = {
    NotificationStatus.PENDING: frozenset({NotificationStatus.SENDING}),
    NotificationStatus.RETRY: frozenset({NotificationStatus.SENDING}),
    NotificationStatus.SENDING: frozenset(
        {
            NotificationStatus.DELIVERED,
            NotificationStatus.RETRY,
            NotificationStatus.FAILED,
        }
    ),
    NotificationStatus.DELIVERED: frozenset(),
    NotificationStatus.FAILED: frozenset(),
}

DUE_STATUSES: tuple[NotificationStatus, ...] = (
    NotificationStatus.PENDING,
    NotificationStatus.RETRY,
)


class InvalidStatusTransition(ValueError):
    """Raised when a record is moved between incompatible delivery states."""

    def __init__(self, current: NotificationStatus, target: NotificationStatus) -> None:
        super().__init__(
            f"Cannot move notification from '{current.value}' to '{target.value}'"
        )
        self.current = current
        self.target = target


@dataclass
class NotificationPayload:
    """Snapshot of the batch a notification refers to."""

    batch_id: int | None = None
    product_id: int | None = None
    product_name: str | None = None
    department_name: str | None = None
    category_name: str | None = None
    quantity: Decimal | None = None
    unit: str | None = None
    expiry_date: date | None = None
    days_left: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation of the payload."""

        return {
            "batch_id": self.batch_id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "department_name": self.department_name,
            "category_name": self.category_name,
            "quantity": str(self.quantity) if self.quantity is not None else None,
            "unit": self.unit,
            "expiry_date": self.expiry_date.isoformat() if self.expiry_date else None,
            "days_left": self.days_left,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "NotificationPayload":
        data = data or {}
        quantity = data.get("quantity")
        expiry_date = data.get("expiry_date")
        return cls(
            batch_id=data.get("batch_id"),
            product_id=data.get("product_id"),
            product_name=data.get("product_name"),
            department_name=data.get("department_name"),
            category_name=data.get("category_name"),
            quantity=Decimal(str(quantity)) if quantity is not None else None,
            unit=data.get("unit"),
            expiry_date=date.fromisoformat(expiry_date) if expiry_date else None,
            days_left=data.get("days_left"),
        )


@dataclass
class NotificationRecord:
    """The unit of delivery: one alert for one recipient."""

    id: int | None
    hotel_id: int | None
    recipient_id: int
    type: NotificationType
    title: str
    message: str
    channels: list[NotificationChannel]
    priority: Priority = Priority.NORMAL
    batch_id: int | None = None
    rule_id: int | None = None
    payload: NotificationPayload = field(default_factory=NotificationPayload)
    status: NotificationStatus = NotificationStatus.PENDING
    retry_count: int = 0
    next_retry_at: datetime | None = None
    failure_reason: str | None = None
    fingerprint: str | None = None
    telegram_message_id: str | None = None
    created_at: datetime | None = None
    delivered_at: datetime | None = None
    read_at: datetime | None = None

    def transition_to(self, target: NotificationStatus) -> None:
        """Move the record to ``target`` enforcing the delivery state machine."""

        if not self.status.can_transition_to(target):
            raise InvalidStatusTransition(self.status, target)
        self.status = target


__all__ = [
    "DUE_STATUSES",
    "InvalidStatusTransition",
    "NotificationChannel",
    "NotificationPayload",
    "NotificationRecord",
    "NotificationStatus",
    "NotificationType",
    "Priority",
]
