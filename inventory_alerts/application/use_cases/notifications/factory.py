"""Build notification records and render them for each transport."""

from __future__ import annotations

import html
from datetime import date, datetime
from decimal import Decimal

from inventory_alerts.domain.entities import (
    ExpiryEvent,
    NotificationChannel,
    NotificationPayload,
    NotificationRecord,
    NotificationStatus,
    NotificationType,
    Severity,
    User,
)
from inventory_alerts.utils import ensure_app_timezone

from .deduplication import build_fingerprint

DEFAULT_UNIT = "pcs"

_TITLE_PREFIXES = {
    Severity.EXPIRED: "Expired",
    Severity.CRITICAL: "Critical expiry",
    Severity.WARNING: "Expiring soon",
}

_TYPE_ICONS = {
    NotificationType.EXPIRED: "⛔",
    NotificationType.EXPIRY_CRITICAL: "\U0001f534",
    NotificationType.EXPIRY_WARNING: "\U0001f7e1",
}
_DEFAULT_ICON = "\U0001f514"

# Free text is clipped before escaping; a rendered chat message must fit the
# 4096 character Bot API limit.
CHAT_FIELD_MAX_LENGTH = 120


def build_expiry_notification(
    event: ExpiryEvent,
    recipient: User,
    channel: NotificationChannel,
    *,
    now: datetime,
    day: date | None = None,
) -> NotificationRecord:
    """Return a pending record alerting ``recipient`` about ``event`` on ``channel``."""

    batch = event.batch
    localized_now = ensure_app_timezone(now)
    unit = batch.unit or DEFAULT_UNIT
    quantity = format_quantity(batch.quantity)
    location = f" in {batch.department_name}" if batch.department_name else ""

    title = f"{_TITLE_PREFIXES[event.severity]}: {batch.product_name}"
    message = (
        f"{batch.product_name} ({quantity} {unit}){location} "
        f"{describe_days_left(event.days_left)} ({batch.expiry_date.isoformat()})."
    )

    return NotificationRecord(
        id=None,
        hotel_id=batch.hotel_id,
        recipient_id=recipient.id,
        batch_id=batch.id,
        rule_id=event.rule.id,
        type=event.severity.notification_type,
        priority=event.severity.priority,
        title=title,
        message=message,
        channels=[channel],
        payload=NotificationPayload(
            batch_id=batch.id,
            product_id=batch.product_id,
            product_name=batch.product_name,
            department_name=batch.department_name,
            category_name=batch.category_name,
            quantity=batch.quantity,
            unit=unit,
            expiry_date=batch.expiry_date,
            days_left=event.days_left,
        ),
        status=NotificationStatus.PENDING,
        fingerprint=build_fingerprint(
            batch.id, recipient.id, channel, day or localized_now.date()
        ),
        created_at=localized_now,
    )


def describe_days_left(days_left: int) -> str:
    """Return a short phrase describing when a batch expires."""

    if days_left < 0:
        overdue = -days_left
        return f"expired {overdue} day{'s' if overdue != 1 else ''} ago"
    if days_left == 0:
        return "expires today"
    if days_left == 1:
        return "expires tomorrow"
    return f"expires in {days_left} days"


def format_quantity(quantity: Decimal | None) -> str:
    if quantity is None:
        return "0"
    normalized = Decimal(quantity).normalize()
    return f"{normalized:f}"


def format_chat_message(record: NotificationRecord) -> str:
    """Render ``record`` as a Telegram HTML message."""

    payload = record.payload
    icon = _TYPE_ICONS.get(record.type, _DEFAULT_ICON)
    lines = [f"{icon} <b>{_chat_text(record.title)}</b>", ""]
    if payload.product_name:
        lines.append(f"<b>Product:</b> {_chat_text(payload.product_name)}")
    if payload.quantity is not None:
        unit = _chat_text(payload.unit or DEFAULT_UNIT)
        lines.append(f"<b>Quantity:</b> {format_quantity(payload.quantity)} {unit}")
    if payload.department_name:
        lines.append(f"<b>Department:</b> {_chat_text(payload.department_name)}")
    if payload.expiry_date is not None:
        expiry = payload.expiry_date.isoformat()
        if payload.days_left is not None:
            expiry = f"{expiry} ({describe_days_left(payload.days_left)})"
        lines.append(f"<b>Expiry date:</b> {html.escape(expiry)}")
    if len(lines) == 2:
        lines.append(_chat_text(record.message))
    return "\n".join(lines)


def _chat_text(value: str) -> str:
    if len(value) > CHAT_FIELD_MAX_LENGTH:
        value = value[: CHAT_FIELD_MAX_LENGTH - 1] + "\u2026"
    return html.escape(value)


def format_email_html(record: NotificationRecord) -> str:
    """Render ``record`` as the HTML body of an email."""

    payload = record.payload
    rows: list[str] = []
    if payload.product_name:
        rows.append(_email_row("Product", payload.product_name))
    if payload.quantity is not None:
        rows.append(
            _email_row(
                "Quantity",
                f"{format_quantity(payload.quantity)} {payload.unit or DEFAULT_UNIT}",
            )
        )
    if payload.department_name:
        rows.append(_email_row("Department", payload.department_name))
    if payload.category_name:
        rows.append(_email_row("Category", payload.category_name))
    if payload.expiry_date is not None:
        rows.append(_email_row("Expiry date", payload.expiry_date.isoformat()))

    parts = [
        f"<h2>{html.escape(record.title)}</h2>",
        f"<p>{html.escape(record.message)}</p>",
    ]
    if rows:
        parts.append("<table>" + "".join(rows) + "</table>")
    parts.append("<p>Please review the batch and take action in the inventory system.</p>")
    return "".join(parts)


def _email_row(label: str, value: str) -> str:
    return f"<tr><th align=\"left\">{html.escape(label)}</th><td>{html.escape(value)}</td></tr>"


__all__ = [
    "DEFAULT_UNIT",
    "build_expiry_notification",
    "describe_days_left",
    "format_chat_message",
    "format_email_html",
    "format_quantity",
]
