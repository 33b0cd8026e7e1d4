"""Use cases of the expiry notification engine."""

from .channels import (
    ChannelRegistry,
    DeliveryChannel,
    DeliveryReceipt,
    EmailChannel,
    InAppChannel,
    NotificationDeliveryError,
    TelegramChannel,
    default_channel_registry,
)
from .deduplication import build_fingerprint, is_duplicate
from .evaluate_rules import EvaluationResult, evaluate_rules
from .factory import (
    build_expiry_notification,
    describe_days_left,
    format_chat_message,
    format_email_html,
)
from .inbox import list_notifications, mark_notifications_read
from .process_queue import QueueResult, process_queue
from .recipients import resolve_recipients
from .retry import RetryDecision, RetryScheduler
from .stats import get_stats

__all__ = [
    "ChannelRegistry",
    "DeliveryChannel",
    "DeliveryReceipt",
    "EmailChannel",
    "EvaluationResult",
    "InAppChannel",
    "NotificationDeliveryError",
    "QueueResult",
    "RetryDecision",
    "RetryScheduler",
    "TelegramChannel",
    "build_expiry_notification",
    "build_fingerprint",
    "default_channel_registry",
    "describe_days_left",
    "evaluate_rules",
    "format_chat_message",
    "format_email_html",
    "get_stats",
    "is_duplicate",
    "list_notifications",
    "mark_notifications_read",
    "process_queue",
    "resolve_recipients",
]
