"""Routes to administer notification rules."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from inventory_alerts.application.use_cases.notification_rules import (
    get_rules as get_rules_uc,
    upsert_rule as upsert_rule_uc,
)
from inventory_alerts.domain.entities import NotificationRule
from inventory_alerts.infrastructure.database import get_db
from inventory_alerts.infrastructure.repositories import RuleScopeConflictError
from inventory_alerts.interfaces.api.schemas import (
    NotificationRuleRead,
    NotificationRuleUpsert,
)

router = APIRouter(prefix="/notification-rules", tags=["notification-rules"])


def _rule_to_schema(rule: NotificationRule) -> NotificationRuleRead:
    return NotificationRuleRead.model_validate(rule)


@router.get("", response_model=list[NotificationRuleRead])
def list_notification_rules(
    hotel_id: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
) -> list[NotificationRuleRead]:
    """Return the enabled rules visible to ``hotel_id``."""

    return [_rule_to_schema(rule) for rule in get_rules_uc(db, hotel_id=hotel_id)]


@router.put("", response_model=NotificationRuleRead)
def upsert_notification_rule(
    payload: NotificationRuleUpsert,
    db: Session = Depends(get_db),
) -> NotificationRuleRead:
    """Create a rule or update the one matching its id or scope."""

    try:
        rule = upsert_rule_uc(
            db,
            rule_id=payload.id,
            hotel_id=payload.hotel_id,
            department_id=payload.department_id,
            type=payload.type,
            name=payload.name,
            description=payload.description,
            warning_days=payload.warning_days,
            critical_days=payload.critical_days,
            channels=payload.channels,
            recipient_roles=payload.recipient_roles,
            enabled=payload.enabled,
        )
    except RuleScopeConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        message = str(exc)
        status_code = (
            status.HTTP_404_NOT_FOUND
            if "not found" in message.lower()
            else status.HTTP_400_BAD_REQUEST
        )
        raise HTTPException(status_code=status_code, detail=message) from exc
    return _rule_to_schema(rule)
