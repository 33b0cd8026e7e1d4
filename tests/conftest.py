"""Shared fixtures for the notification engine tests."""

from __future__ import annotations

import os
from datetime import date, datetime, timedelta
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_TIMEZONE", "Asia/Almaty")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inventory_alerts.domain.entities import (
    NotificationChannel,
    NotificationStatus,
    NotificationType,
    Priority,
    UserRole,
)
from inventory_alerts.infrastructure.database import initialize_database
from inventory_alerts.infrastructure.models import (
    BatchModel,
    DepartmentModel,
    NotificationModel,
    NotificationRuleModel,
    ProductModel,
    UserModel,
)

TODAY = date(2026, 3, 10)
NOW = datetime(2026, 3, 10, 9, 0)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_department(session):
    def _make(*, hotel_id: int = 1, name: str = "Kitchen") -> DepartmentModel:
        department = DepartmentModel(hotel_id=hotel_id, name=name)
        session.add(department)
        session.commit()
        return department

    return _make


@pytest.fixture()
def make_user(session):
    def _make(
        *,
        name: str = "User",
        role: UserRole = UserRole.DEPARTMENT_MANAGER,
        hotel_id: int | None = 1,
        department_id: int | None = None,
        email: str | None = None,
        telegram_chat_id: str | None = None,
        is_active: bool = True,
    ) -> UserModel:
        user = UserModel(
            name=name,
            role=role.value,
            hotel_id=hotel_id,
            department_id=department_id,
            email=email,
            telegram_chat_id=telegram_chat_id,
            is_active=is_active,
        )
        session.add(user)
        session.commit()
        return user

    return _make


@pytest.fixture()
def make_batch(session):
    def _make(
        *,
        hotel_id: int = 1,
        department_id: int | None = None,
        product_name: str = "Milk",
        unit: str | None = "l",
        quantity: str = "12",
        expiry_date: date | None = None,
        days_left: int | None = None,
        status: str = "active",
    ) -> BatchModel:
        if expiry_date is None:
            expiry_date = TODAY + timedelta(days=days_left if days_left is not None else 5)
        product = ProductModel(name=product_name, unit=unit, category_name="Dairy")
        session.add(product)
        session.flush()
        batch = BatchModel(
            hotel_id=hotel_id,
            department_id=department_id,
            product_id=product.id,
            quantity=Decimal(quantity),
            expiry_date=expiry_date,
            status=status,
        )
        session.add(batch)
        session.commit()
        return batch

    return _make


@pytest.fixture()
def make_rule(session):
    def _make(
        *,
        hotel_id: int | None = 1,
        department_id: int | None = None,
        name: str = "Expiry alerts",
        warning_days: int = 7,
        critical_days: int = 3,
        channels: tuple[str, ...] = ("app",),
        recipient_roles: tuple[str, ...] = ("HOTEL_ADMIN", "DEPARTMENT_MANAGER"),
        enabled: bool = True,
        rule_type: str = "expiry",
    ) -> NotificationRuleModel:
        rule = NotificationRuleModel(
            hotel_id=hotel_id,
            department_id=department_id,
            type=rule_type,
            name=name,
            warning_days=warning_days,
            critical_days=critical_days,
            channels=list(channels),
            recipient_roles=list(recipient_roles),
            enabled=enabled,
        )
        session.add(rule)
        session.commit()
        return rule

    return _make


@pytest.fixture()
def make_notification(session):
    def _make(
        *,
        user_id: int,
        batch_id: int | None = None,
        hotel_id: int | None = 1,
        channel: NotificationChannel = NotificationChannel.APP,
        status: NotificationStatus = NotificationStatus.PENDING,
        priority: Priority = Priority.NORMAL,
        notification_type: NotificationType = NotificationType.EXPIRY_WARNING,
        retry_count: int = 0,
        next_retry_at: datetime | None = None,
        created_at: datetime = NOW,
        fingerprint: str | None = None,
        title: str = "Expiring soon: Milk",
    ) -> NotificationModel:
        notification = NotificationModel(
            hotel_id=hotel_id,
            user_id=user_id,
            batch_id=batch_id,
            type=notification_type.value,
            title=title,
            message="Milk (12 l) expires in 5 days (2026-03-15).",
            payload={"batch_id": batch_id, "product_name": "Milk", "quantity": "12", "unit": "l"},
            channels=[channel.value],
            priority=int(priority),
            status=status.value,
            retry_count=retry_count,
            next_retry_at=next_retry_at,
            fingerprint=fingerprint,
            created_at=created_at,
        )
        session.add(notification)
        session.commit()
        return notification

    return _make


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def now() -> datetime:
    return NOW
