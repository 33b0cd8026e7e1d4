"""Use case that delivers queued notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from inventory_alerts.config import get_settings
from inventory_alerts.domain.entities import (
    BatchStatus,
    NotificationChannel,
    NotificationRecord,
    NotificationStatus,
)
from inventory_alerts.infrastructure.repositories import (
    BatchRepository,
    NotificationRepository,
    UserRepository,
)
from inventory_alerts.utils import ensure_app_timezone, now_in_app_timezone

from .channels import ChannelRegistry, NotificationDeliveryError, default_channel_registry
from .retry import RetryScheduler

logger = logging.getLogger(__name__)

BATCH_WRITTEN_OFF_REASON = "Batch already written off"
BATCH_INACTIVE_REASON = "Source batch no longer active"
RECIPIENT_INACTIVE_REASON = "Recipient is no longer active"


@dataclass
class QueueResult:
    """Counters reported by one queue pass.

    ``failed`` counts every unsuccessful attempt, including the ones that were
    rescheduled for a retry.
    """

    delivered: int = 0
    failed: int = 0


def process_queue(
    session: Session,
    *,
    now: datetime | None = None,
    limit: int | None = None,
    registry: ChannelRegistry | None = None,
    scheduler: RetryScheduler | None = None,
) -> QueueResult:
    """Attempt delivery of due notifications, most urgent first."""

    settings = get_settings()
    current = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    batch_size = limit if limit is not None else settings.notification_queue_batch_size
    registry = registry or default_channel_registry()
    scheduler = scheduler or RetryScheduler.from_settings(settings)
    lease_until = current + timedelta(minutes=settings.notification_sending_lease_minutes)

    repository = NotificationRepository(session)
    due = repository.list_due(now=current, limit=batch_size)
    logger.info("Processing %d queued notifications", len(due))

    result = QueueResult()
    for record in due:
        if record.id is None or not repository.claim(
            record.id, now=current, lease_until=lease_until
        ):
            logger.debug("Notification %s was claimed by another worker", record.id)
            continue
        if record.status is NotificationStatus.SENDING:
            logger.warning("Reclaiming notification %s after its sending lease expired", record.id)
        record.status = NotificationStatus.SENDING

        try:
            delivered = _deliver(
                session, record, now=current, registry=registry, scheduler=scheduler
            )
        except Exception as exc:
            logger.exception("Unexpected error while processing notification %s", record.id)
            session.rollback()
            _fail_after_error(repository, record.id, reason=str(exc) or exc.__class__.__name__)
            delivered = False

        if delivered:
            result.delivered += 1
        else:
            result.failed += 1

    logger.info(
        "Queue pass finished: %d delivered, %d failed", result.delivered, result.failed
    )
    return result


def _deliver(
    session: Session,
    record: NotificationRecord,
    *,
    now: datetime,
    registry: ChannelRegistry,
    scheduler: RetryScheduler,
) -> bool:
    repository = NotificationRepository(session)

    if record.batch_id is not None:
        batch_status = BatchRepository(session).get_status(record.batch_id)
        if batch_status is BatchStatus.WRITTEN_OFF:
            _fail(repository, record, BATCH_WRITTEN_OFF_REASON)
            return False
        if batch_status is None or batch_status.is_terminal:
            _fail(repository, record, BATCH_INACTIVE_REASON)
            return False

    recipient = UserRepository(session).get(record.recipient_id)
    if recipient is None or not recipient.is_active:
        _fail(repository, record, RECIPIENT_INACTIVE_REASON)
        return False

    try:
        for channel in record.channels:
            receipt = registry.dispatch(channel, record, recipient)
            if channel is NotificationChannel.TELEGRAM and receipt.external_id:
                record.telegram_message_id = receipt.external_id
    except NotificationDeliveryError as exc:
        decision = scheduler.next_attempt(record.retry_count, now)
        record.retry_count = decision.retry_count
        if decision.give_up:
            logger.warning(
                "Notification %s failed permanently: %s", record.id, exc.reason
            )
            _fail(repository, record, f"Max retries exceeded: {exc.reason}")
        else:
            logger.info(
                "Notification %s failed (%s); retry %d at %s",
                record.id,
                exc.reason,
                decision.retry_count,
                decision.next_retry_at.isoformat() if decision.next_retry_at else None,
            )
            record.transition_to(NotificationStatus.RETRY)
            record.next_retry_at = decision.next_retry_at
            record.failure_reason = exc.reason
            repository.update(record)
        return False

    record.transition_to(NotificationStatus.DELIVERED)
    record.delivered_at = now
    record.next_retry_at = None
    record.failure_reason = None
    repository.update(record)
    logger.debug("Notification %s delivered", record.id)
    return True


def _fail(repository: NotificationRepository, record: NotificationRecord, reason: str) -> None:
    record.transition_to(NotificationStatus.FAILED)
    record.failure_reason = reason
    record.next_retry_at = None
    repository.update(record)


def _fail_after_error(
    repository: NotificationRepository, notification_id: int, *, reason: str
) -> None:
    record = repository.get(notification_id)
    if record is None or record.status is not NotificationStatus.SENDING:
        return
    _fail(repository, record, reason)


__all__ = [
    "BATCH_INACTIVE_REASON",
    "BATCH_WRITTEN_OFF_REASON",
    "QueueResult",
    "RECIPIENT_INACTIVE_REASON",
    "process_queue",
]
