"""Repository implementations for infrastructure layer."""

from .batch_repository import BatchRepository
from .notification_repository import (
    DuplicateNotificationError,
    NotificationRepository,
    NotificationStatsRow,
)
from .rule_repository import RuleRepository, RuleScopeConflictError
from .user_repository import UserRepository

__all__ = [
    "BatchRepository",
    "DuplicateNotificationError",
    "NotificationRepository",
    "NotificationStatsRow",
    "RuleRepository",
    "RuleScopeConflictError",
    "UserRepository",
]
