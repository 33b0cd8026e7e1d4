"""Use cases backing the in-app notification inbox."""

from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from inventory_alerts.domain.entities import NotificationRecord
from inventory_alerts.infrastructure.repositories import NotificationRepository


def list_notifications(
    session: Session,
    *,
    user_id: int,
    unread_only: bool = False,
    limit: int | None = 50,
) -> Sequence[NotificationRecord]:
    """Return the in-app notifications of ``user_id``, newest first."""

    repository = NotificationRepository(session)
    return repository.list_for_user(user_id, unread_only=unread_only, limit=limit)


def mark_notifications_read(
    session: Session,
    notification_ids: Iterable[int],
    *,
    user_id: int,
) -> int:
    """Mark the given notifications of ``user_id`` as read and return how many changed."""

    repository = NotificationRepository(session)
    return repository.mark_as_read(notification_ids, user_id=user_id)


__all__ = ["list_notifications", "mark_notifications_read"]
