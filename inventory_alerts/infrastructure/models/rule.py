"""SQLAlchemy model for notification rules."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.sql import expression

from inventory_alerts.infrastructure.database import Base
from inventory_alerts.utils import now_in_app_naive_datetime


class NotificationRuleModel(Base):
    """Database representation of a notification rule."""

    __tablename__ = "notification_rule"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, nullable=True, index=True)
    department_id = Column(
        Integer, ForeignKey("department.id", ondelete="CASCADE"), nullable=True
    )
    type = Column(String(50), nullable=False, default="expiry")
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    warning_days = Column(Integer, nullable=False, default=7)
    critical_days = Column(Integer, nullable=False, default=3)
    channels = Column(JSON, nullable=False, default=list)
    recipient_roles = Column(JSON, nullable=False, default=list)
    enabled = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=True, onupdate=now_in_app_naive_datetime)


# One rule per (hotel, department, type) scope; NULL scopes compare equal.
Index(
    "uq_notification_rule_scope",
    func.coalesce(NotificationRuleModel.hotel_id, 0),
    func.coalesce(NotificationRuleModel.department_id, 0),
    NotificationRuleModel.type,
    unique=True,
)


__all__ = ["NotificationRuleModel"]
