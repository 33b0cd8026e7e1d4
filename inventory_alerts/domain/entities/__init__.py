"""Domain entities exposed by the application."""

from .batch import Batch, BatchStatus
from .expiry_event import ExpiryEvent, Severity, classify_severity
from .notification import (
    DUE_STATUSES,
    InvalidStatusTransition,
    NotificationChannel,
    NotificationPayload,
    NotificationRecord,
    NotificationStatus,
    NotificationType,
    Priority,
)
from .rule import (
    DEFAULT_CRITICAL_DAYS,
    DEFAULT_RECIPIENT_ROLES,
    DEFAULT_RULE_CHANNELS,
    DEFAULT_WARNING_DAYS,
    NotificationRule,
    RuleType,
)
from .user import ADMIN_ROLES, User, UserRole

__all__ = [
    "ADMIN_ROLES",
    "Batch",
    "BatchStatus",
    "DEFAULT_CRITICAL_DAYS",
    "DEFAULT_RECIPIENT_ROLES",
    "DEFAULT_RULE_CHANNELS",
    "DEFAULT_WARNING_DAYS",
    "DUE_STATUSES",
    "ExpiryEvent",
    "InvalidStatusTransition",
    "NotificationChannel",
    "NotificationPayload",
    "NotificationRecord",
    "NotificationRule",
    "NotificationStatus",
    "NotificationType",
    "Priority",
    "RuleType",
    "Severity",
    "User",
    "UserRole",
    "classify_severity",
]
