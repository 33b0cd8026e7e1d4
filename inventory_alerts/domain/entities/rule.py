"""Domain entity representing a notification rule."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .notification import NotificationChannel
from .user import UserRole


class RuleType(str, Enum):
    """Kinds of notification rules an administrator can configure."""

    EXPIRY = "expiry"
    LOW_STOCK = "low_stock"
    COLLECTION_REMINDER = "collection_reminder"
    CUSTOM = "custom"


DEFAULT_WARNING_DAYS = 7
DEFAULT_CRITICAL_DAYS = 3
DEFAULT_RULE_CHANNELS: tuple[NotificationChannel, ...] = (NotificationChannel.APP,)
DEFAULT_RECIPIENT_ROLES: tuple[UserRole, ...] = (
    UserRole.HOTEL_ADMIN,
    UserRole.DEPARTMENT_MANAGER,
)


@dataclass
class NotificationRule:
    """Who is alerted about which batches, when and through which channels.

    ``hotel_id`` and ``department_id`` set to ``None`` mean the rule applies to
    every hotel or to every department of the hotel respectively.
    """

    id: int | None
    hotel_id: int | None
    department_id: int | None
    type: RuleType
    name: str
    description: str | None = None
    warning_days: int = DEFAULT_WARNING_DAYS
    critical_days: int = DEFAULT_CRITICAL_DAYS
    channels: list[NotificationChannel] = field(
        default_factory=lambda: list(DEFAULT_RULE_CHANNELS)
    )
    recipient_roles: list[UserRole] = field(
        default_factory=lambda: list(DEFAULT_RECIPIENT_ROLES)
    )
    enabled: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_department_scoped(self) -> bool:
        return self.department_id is not None


__all__ = [
    "DEFAULT_CRITICAL_DAYS",
    "DEFAULT_RECIPIENT_ROLES",
    "DEFAULT_RULE_CHANNELS",
    "DEFAULT_WARNING_DAYS",
    "NotificationRule",
    "RuleType",
]
