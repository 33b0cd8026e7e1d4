"""Persistence helpers for notification records."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import Date, and_, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from inventory_alerts.domain.entities import (
    DUE_STATUSES,
    NotificationChannel,
    NotificationPayload,
    NotificationRecord,
    NotificationStatus,
    NotificationType,
    Priority,
)
from inventory_alerts.infrastructure.models import NotificationModel
from inventory_alerts.utils import ensure_app_naive_datetime, now_in_app_timezone


class DuplicateNotificationError(Exception):
    """Raised when a live notification with the same fingerprint already exists."""

    def __init__(self, fingerprint: str | None) -> None:
        super().__init__(f"Notification with fingerprint {fingerprint} already exists")
        self.fingerprint = fingerprint


@dataclass(frozen=True)
class NotificationStatsRow:
    """Number of notifications created on ``day`` with a given status and type."""

    day: date
    status: str
    type: str
    count: int


class NotificationRepository:
    """Provide CRUD operations for :class:`NotificationRecord` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> NotificationRecord | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def create(self, notification: NotificationRecord) -> NotificationRecord:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        model.created_at = ensure_app_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateNotificationError(notification.fingerprint) from exc
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, notification: NotificationRecord) -> NotificationRecord:
        if notification.id is None:
            raise ValueError("Notification id is required for updates")
        model = self.session.get(NotificationModel, notification.id)
        if model is None:
            msg = f"Notification with id {notification.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def exists_active_fingerprint(self, fingerprint: str, *, since: datetime) -> bool:
        """Return ``True`` when a non-failed record with ``fingerprint`` exists after ``since``."""

        query = (
            self.session.query(NotificationModel.id)
            .filter(NotificationModel.fingerprint == fingerprint)
            .filter(NotificationModel.created_at > ensure_app_naive_datetime(since))
            .filter(NotificationModel.status != NotificationStatus.FAILED.value)
        )
        return query.first() is not None

    def list_due(self, *, now: datetime, limit: int) -> Sequence[NotificationRecord]:
        """Return records ready to be sent, most urgent and oldest first.

        Records left in ``sending`` whose claim lease (``next_retry_at``) has
        expired are returned as well.
        """

        naive_now = ensure_app_naive_datetime(now)
        query = (
            self.session.query(NotificationModel)
            .filter(self._due_condition(naive_now))
            .order_by(
                NotificationModel.priority.desc(),
                NotificationModel.created_at.asc(),
                NotificationModel.id.asc(),
            )
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def claim(self, notification_id: int, *, now: datetime, lease_until: datetime) -> bool:
        """Atomically move a due record to ``sending`` until ``lease_until``.

        Returns ``False`` when another pass already claimed the record.
        """

        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .filter(self._due_condition(ensure_app_naive_datetime(now)))
            .update(
                {
                    NotificationModel.status: NotificationStatus.SENDING.value,
                    NotificationModel.next_retry_at: ensure_app_naive_datetime(lease_until),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated == 1

    @staticmethod
    def _due_condition(naive_now: datetime):
        # ``sending`` rows are re-claimable once their lease has run out.
        statuses = [status.value for status in (*DUE_STATUSES, NotificationStatus.SENDING)]
        return and_(
            NotificationModel.status.in_(statuses),
            or_(
                NotificationModel.next_retry_at.is_(None),
                NotificationModel.next_retry_at <= naive_now,
            ),
        )

    def list_for_user(
        self,
        user_id: int,
        *,
        unread_only: bool = False,
        limit: int | None = 50,
    ) -> Sequence[NotificationRecord]:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.user_id == user_id
        )
        if unread_only:
            query = query.filter(NotificationModel.read_at.is_(None))
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        records = [self._to_entity(model) for model in query.all()]
        return [
            record for record in records if NotificationChannel.APP in record.channels
        ]

    def mark_as_read(self, notification_ids: Iterable[int], *, user_id: int) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id.in_(ids),
                NotificationModel.user_id == user_id,
                NotificationModel.read_at.is_(None),
            )
            .update(
                {
                    NotificationModel.read_at: ensure_app_naive_datetime(
                        now_in_app_timezone()
                    )
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def count_by_day_status_type(
        self,
        *,
        hotel_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Sequence[NotificationStatsRow]:
        day = func.date(NotificationModel.created_at, type_=Date)
        query = self.session.query(
            day.label("day"),
            NotificationModel.status,
            NotificationModel.type,
            func.count(NotificationModel.id),
        ).filter(NotificationModel.hotel_id == hotel_id)
        if start_date is not None:
            query = query.filter(day >= start_date)
        if end_date is not None:
            query = query.filter(day <= end_date)
        query = query.group_by(day, NotificationModel.status, NotificationModel.type)
        query = query.order_by(day.desc(), NotificationModel.status, NotificationModel.type)
        return [
            NotificationStatsRow(
                day=_coerce_date(raw_day),
                status=status,
                type=notification_type,
                count=int(count),
            )
            for raw_day, status, notification_type, count in query.all()
        ]

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: NotificationRecord
    ) -> None:
        model.hotel_id = notification.hotel_id
        model.user_id = notification.recipient_id
        model.batch_id = notification.batch_id
        model.rule_id = notification.rule_id
        model.type = notification.type.value
        model.title = notification.title
        model.message = notification.message
        model.payload = notification.payload.to_dict()
        model.channels = [channel.value for channel in notification.channels]
        model.priority = int(notification.priority)
        model.status = notification.status.value
        model.retry_count = notification.retry_count
        model.next_retry_at = ensure_app_naive_datetime(notification.next_retry_at)
        model.failure_reason = notification.failure_reason
        model.fingerprint = notification.fingerprint
        model.telegram_message_id = notification.telegram_message_id
        model.delivered_at = ensure_app_naive_datetime(notification.delivered_at)
        model.read_at = ensure_app_naive_datetime(notification.read_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> NotificationRecord:
        return NotificationRecord(
            id=model.id,
            hotel_id=model.hotel_id,
            recipient_id=model.user_id,
            batch_id=model.batch_id,
            rule_id=model.rule_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            payload=NotificationPayload.from_dict(model.payload),
            channels=[NotificationChannel(value) for value in model.channels or []],
            priority=Priority(model.priority),
            status=NotificationStatus(model.status),
            retry_count=model.retry_count or 0,
            next_retry_at=model.next_retry_at,
            failure_reason=model.failure_reason,
            fingerprint=model.fingerprint,
            telegram_message_id=model.telegram_message_id,
            created_at=model.created_at,
            delivered_at=model.delivered_at,
            read_at=model.read_at,
        )


def _coerce_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


__all__ = ["DuplicateNotificationError", "NotificationRepository", "NotificationStatsRow"]
