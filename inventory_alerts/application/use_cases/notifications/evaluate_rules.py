"""Use case that turns expiry rules into queued notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_alerts.domain.entities import (
    ExpiryEvent,
    NotificationChannel,
    NotificationRule,
    RuleType,
    User,
    classify_severity,
)
from inventory_alerts.infrastructure.repositories import (
    BatchRepository,
    DuplicateNotificationError,
    NotificationRepository,
    RuleRepository,
)
from inventory_alerts.utils import ensure_app_timezone, now_in_app_timezone

from .deduplication import is_duplicate
from .factory import build_expiry_notification
from .recipients import resolve_recipients

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Counters reported by one evaluation pass."""

    events: int = 0
    created: int = 0
    duplicates: int = 0
    failed_rules: int = 0


def evaluate_rules(
    session: Session,
    *,
    today: date | None = None,
    now: datetime | None = None,
) -> EvaluationResult:
    """Queue expiry notifications for every enabled expiry rule.

    Running the pass twice on the same day does not create new records for
    the same batch, recipient and channel. A rule whose queries fail is
    skipped and counted in ``failed_rules``.
    """

    current = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    day = today or current.date()
    rules = RuleRepository(session).list_enabled(RuleType.EXPIRY)
    logger.info("Evaluating %d expiry rules for %s", len(rules), day.isoformat())

    result = EvaluationResult()
    for rule in rules:
        try:
            _evaluate_rule(session, rule, day=day, now=current, result=result)
        except SQLAlchemyError:
            logger.exception("Failed to evaluate notification rule %s", rule.id)
            session.rollback()
            result.failed_rules += 1

    logger.info(
        "Evaluation finished: %d events, %d created, %d duplicates, %d failed rules",
        result.events,
        result.created,
        result.duplicates,
        result.failed_rules,
    )
    return result


def _evaluate_rule(
    session: Session,
    rule: NotificationRule,
    *,
    day: date,
    now: datetime,
    result: EvaluationResult,
) -> None:
    batches = BatchRepository(session).list_near_expiry(
        today=day,
        max_days_left=rule.warning_days,
        hotel_id=rule.hotel_id,
        department_id=rule.department_id,
    )
    logger.debug("Rule %s matched %d batches", rule.id, len(batches))

    recipients_by_hotel: dict[int | None, list[User]] = {}
    for batch in batches:
        days_left = batch.days_left(day)
        severity = classify_severity(
            days_left, warning_days=rule.warning_days, critical_days=rule.critical_days
        )
        if severity is None:
            continue

        event = ExpiryEvent(batch=batch, rule=rule, days_left=days_left, severity=severity)
        result.events += 1

        if batch.hotel_id not in recipients_by_hotel:
            recipients_by_hotel[batch.hotel_id] = resolve_recipients(
                session, rule, hotel_id=batch.hotel_id
            )
        recipients = recipients_by_hotel[batch.hotel_id]
        if not recipients:
            logger.debug("Rule %s has no recipients for batch %s", rule.id, batch.id)
            continue

        for recipient in recipients:
            for channel in rule.channels:
                _queue_notification(
                    session, event, recipient, channel, day=day, now=now, result=result
                )


def _queue_notification(
    session: Session,
    event: ExpiryEvent,
    recipient: User,
    channel: NotificationChannel,
    *,
    day: date,
    now: datetime,
    result: EvaluationResult,
) -> None:
    if is_duplicate(session, event.batch.id, recipient.id, channel, now=now, day=day):
        result.duplicates += 1
        return

    record = build_expiry_notification(event, recipient, channel, now=now, day=day)
    try:
        NotificationRepository(session).create(record)
    except DuplicateNotificationError:
        logger.debug(
            "Notification for batch %s, user %s via %s was queued concurrently",
            event.batch.id,
            recipient.id,
            channel.value,
        )
        result.duplicates += 1
        return
    result.created += 1


__all__ = ["EvaluationResult", "evaluate_rules"]
