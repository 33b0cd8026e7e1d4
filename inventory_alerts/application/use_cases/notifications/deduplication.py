"""Helpers that prevent the same alert from being queued twice a day."""

from __future__ import annotations

import hashlib
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from inventory_alerts.config import get_settings
from inventory_alerts.domain.entities import NotificationChannel
from inventory_alerts.infrastructure.repositories import NotificationRepository
from inventory_alerts.utils import ensure_app_timezone, now_in_app_timezone


def build_fingerprint(
    batch_id: int | None,
    recipient_id: int,
    channel: NotificationChannel | str,
    day: date,
) -> str:
    """Return the stable identity of an alert for one calendar day."""

    channel_value = NotificationChannel(channel).value
    raw = f"{batch_id}:{recipient_id}:{channel_value}:{day.isoformat()}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def is_duplicate(
    session: Session,
    batch_id: int | None,
    recipient_id: int,
    channel: NotificationChannel | str,
    *,
    now: datetime | None = None,
    day: date | None = None,
) -> bool:
    """Return ``True`` when an equivalent alert is already queued or delivered.

    Failed records do not count, so a later evaluation may re-queue them.
    """

    current = ensure_app_timezone(now) if now is not None else now_in_app_timezone()
    fingerprint = build_fingerprint(batch_id, recipient_id, channel, day or current.date())
    window = timedelta(hours=get_settings().notification_dedup_window_hours)
    repository = NotificationRepository(session)
    return repository.exists_active_fingerprint(fingerprint, since=current - window)


__all__ = ["build_fingerprint", "is_duplicate"]
