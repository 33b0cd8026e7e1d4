"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func

from inventory_alerts.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a hotel staff member."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, nullable=True, index=True)
    department_id = Column(
        Integer, ForeignKey("department.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name = Column(String(100), nullable=False)
    email = Column(String(120), nullable=True, index=True)
    role = Column(String(30), nullable=False, index=True)
    telegram_chat_id = Column(String(64), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


__all__ = ["UserModel"]
