"""SQLAlchemy model for queued notifications."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, JSON, String, Text, text

from inventory_alerts.infrastructure.database import Base
from inventory_alerts.utils import now_in_app_naive_datetime

# At most one live (non-failed) row per fingerprint.
_ACTIVE_FINGERPRINT = text("status != 'failed'")


class NotificationModel(Base):
    """Database representation of a notification and its delivery state."""

    __tablename__ = "notification"
    __table_args__ = (
        Index(
            "uq_notification_active_fingerprint",
            "fingerprint",
            unique=True,
            sqlite_where=_ACTIVE_FINGERPRINT,
            postgresql_where=_ACTIVE_FINGERPRINT,
        ),
        Index("ix_notification_queue", "status", "next_retry_at"),
        Index("ix_notification_fingerprint_created", "fingerprint", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, nullable=True, index=True)
    user_id = Column(
        Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True
    )
    batch_id = Column(
        Integer, ForeignKey("batch.id", ondelete="SET NULL"), nullable=True, index=True
    )
    rule_id = Column(
        Integer, ForeignKey("notification_rule.id", ondelete="SET NULL"), nullable=True
    )
    type = Column(String(50), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    channels = Column(JSON, nullable=False, default=list)
    priority = Column(Integer, nullable=False, default=2)
    status = Column(String(20), nullable=False, default="pending")
    retry_count = Column(Integer, nullable=False, default=0)
    next_retry_at = Column(DateTime(), nullable=True)
    failure_reason = Column(Text, nullable=True)
    fingerprint = Column(String(64), nullable=True)
    telegram_message_id = Column(String(64), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    delivered_at = Column(DateTime(), nullable=True)
    read_at = Column(DateTime(), nullable=True)


__all__ = ["NotificationModel"]
