"""Endpoints and websocket handler for expiry notifications."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_alerts.application.use_cases.notifications import (
    evaluate_rules as evaluate_rules_uc,
    get_stats as get_stats_uc,
    list_notifications as list_notifications_uc,
    mark_notifications_read as mark_notifications_read_uc,
    process_queue as process_queue_uc,
)
from inventory_alerts.domain.entities import NotificationRecord
from inventory_alerts.infrastructure.database import SessionLocal, get_db
from inventory_alerts.infrastructure.notifications import (
    notification_manager,
    serialize_notification,
)
from inventory_alerts.interfaces.api.schemas import (
    EvaluationResultRead,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
    NotificationStatsRead,
    QueueResultRead,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: NotificationRecord) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        user_id=notification.recipient_id,
        type=notification.type,
        priority=int(notification.priority),
        title=notification.title,
        message=notification.message,
        channels=notification.channels,
        status=notification.status,
        payload=notification.payload.to_dict(),
        created_at=notification.created_at,
        delivered_at=notification.delivered_at,
        read_at=notification.read_at,
    )


@router.post("/evaluate", response_model=EvaluationResultRead)
def evaluate_notification_rules(
    today: date | None = Query(default=None),
    db: Session = Depends(get_db),
) -> EvaluationResultRead:
    """Run one evaluation pass and queue the resulting notifications."""

    result = evaluate_rules_uc(db, today=today)
    return EvaluationResultRead(
        events=result.events,
        created=result.created,
        duplicates=result.duplicates,
        failed_rules=result.failed_rules,
    )


@router.post("/process-queue", response_model=QueueResultRead)
def process_notification_queue(
    limit: int | None = Query(default=None, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> QueueResultRead:
    """Deliver due notifications."""

    result = process_queue_uc(db, limit=limit)
    return QueueResultRead(delivered=result.delivered, failed=result.failed)


@router.get("/stats", response_model=list[NotificationStatsRead])
def notification_stats(
    hotel_id: int = Query(..., ge=1),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[NotificationStatsRead]:
    """Return notification counts grouped by day, status and type."""

    try:
        rows = get_stats_uc(db, hotel_id=hotel_id, start_date=start_date, end_date=end_date)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [
        NotificationStatsRead(day=row.day, status=row.status, type=row.type, count=row.count)
        for row in rows
    ]


@router.get("/users/{user_id}", response_model=list[NotificationRead])
def list_user_notifications(
    user_id: int,
    unread_only: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
) -> list[NotificationRead]:
    """Return the most recent in-app notifications of ``user_id``."""

    notifications = list_notifications_uc(
        db, user_id=user_id, unread_only=unread_only, limit=limit
    )
    return [_notification_to_schema(notification) for notification in notifications]


@router.post("/users/{user_id}/read", response_model=NotificationMarkReadResponse)
def mark_user_notifications_read(
    user_id: int,
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
) -> NotificationMarkReadResponse:
    """Mark in-app notifications of ``user_id`` as read."""

    updated = mark_notifications_read_uc(db, payload.unique_ids(), user_id=user_id)
    return NotificationMarkReadResponse(updated=updated)


@router.websocket("/ws/{user_id}")
async def notifications_websocket(websocket: WebSocket, user_id: int) -> None:
    """Websocket endpoint that streams in-app notifications to ``user_id``."""

    session = SessionLocal()
    try:
        pending_notifications = list_notifications_uc(
            session, user_id=user_id, unread_only=True
        )
    except SQLAlchemyError:
        logger.exception("Unable to load pending notifications for user %s", user_id)
        await websocket.close(code=1011)
        return
    finally:
        session.close()

    await notification_manager.connect(user_id, websocket)
    try:
        await websocket.send_json(
            {
                "type": "init",
                "data": [serialize_notification(n) for n in pending_notifications],
            }
        )
        while True:
            message = await websocket.receive_json()
            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    ack_session = SessionLocal()
                    try:
                        mark_notifications_read_uc(ack_session, ids, user_id=user_id)
                    finally:
                        ack_session.close()
                continue
    except WebSocketDisconnect:
        notification_manager.disconnect(user_id, websocket)
    except Exception:
        notification_manager.disconnect(user_id, websocket)
        raise
