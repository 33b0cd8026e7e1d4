from .notification import (
    EvaluationResultRead,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    NotificationStatsRead,
    QueueResultRead,
)
from .notification_rule import NotificationRuleRead, NotificationRuleUpsert

__all__ = [
    "EvaluationResultRead",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "NotificationRuleRead",
    "NotificationRuleUpsert",
    "NotificationStatsRead",
    "QueueResultRead",
]
