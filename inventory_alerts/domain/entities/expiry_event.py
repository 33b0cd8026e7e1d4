"""Candidate events produced while evaluating expiry rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .batch import Batch
from .notification import NotificationType, Priority
from .rule import NotificationRule


class Severity(str, Enum):
    """Urgency of an expiring batch, derived from its remaining shelf life."""

    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    EXPIRED = "EXPIRED"

    @property
    def notification_type(self) -> NotificationType:
        return _SEVERITY_TYPES[self]

    @property
    def priority(self) -> Priority:
        return _SEVERITY_PRIORITIES[self]


_SEVERITY_TYPES = {
    Severity.WARNING: NotificationType.EXPIRY_WARNING,
    Severity.CRITICAL: NotificationType.EXPIRY_CRITICAL,
    Severity.EXPIRED: NotificationType.EXPIRED,
}

_SEVERITY_PRIORITIES = {
    Severity.WARNING: Priority.NORMAL,
    Severity.CRITICAL: Priority.HIGH,
    Severity.EXPIRED: Priority.URGENT,
}


def classify_severity(
    days_left: int, *, warning_days: int, critical_days: int
) -> Severity | None:
    """Return the severity for ``days_left`` or ``None`` outside the warning window."""

    if days_left <= 0:
        return Severity.EXPIRED
    if days_left <= critical_days:
        return Severity.CRITICAL
    if days_left <= warning_days:
        return Severity.WARNING
    return None


@dataclass(frozen=True)
class ExpiryEvent:
    """A batch that crossed one of a rule's thresholds."""

    batch: Batch
    rule: NotificationRule
    days_left: int
    severity: Severity


__all__ = ["ExpiryEvent", "Severity", "classify_severity"]
