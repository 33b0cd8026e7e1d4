"""Use case for creating or updating notification rules."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from inventory_alerts.domain.entities import (
    DEFAULT_CRITICAL_DAYS,
    DEFAULT_RECIPIENT_ROLES,
    DEFAULT_RULE_CHANNELS,
    DEFAULT_WARNING_DAYS,
    NotificationChannel,
    NotificationRule,
    RuleType,
    UserRole,
)
from inventory_alerts.infrastructure.repositories import RuleRepository, RuleScopeConflictError

from .validators import (
    ensure_rule_name,
    ensure_valid_thresholds,
    parse_channels,
    parse_recipient_roles,
    parse_rule_type,
)

logger = logging.getLogger(__name__)


def upsert_rule(
    session: Session,
    *,
    rule_id: int | None = None,
    hotel_id: int | None,
    department_id: int | None,
    type: RuleType | str = RuleType.EXPIRY,
    name: str,
    description: str | None = None,
    warning_days: int = DEFAULT_WARNING_DAYS,
    critical_days: int = DEFAULT_CRITICAL_DAYS,
    channels: Iterable[NotificationChannel | str] = DEFAULT_RULE_CHANNELS,
    recipient_roles: Iterable[UserRole | str] = DEFAULT_RECIPIENT_ROLES,
    enabled: bool = True,
) -> NotificationRule:
    """Create a rule or update the one with the same id or scope."""

    rule_type = parse_rule_type(type)
    ensure_valid_thresholds(warning_days=warning_days, critical_days=critical_days)
    entity = NotificationRule(
        id=None,
        hotel_id=hotel_id,
        department_id=department_id,
        type=rule_type,
        name=ensure_rule_name(name),
        description=description,
        warning_days=warning_days,
        critical_days=critical_days,
        channels=parse_channels(channels),
        recipient_roles=parse_recipient_roles(recipient_roles),
        enabled=enabled,
    )

    repository = RuleRepository(session)
    same_scope = repository.find_by_scope(
        hotel_id=hotel_id, department_id=department_id, rule_type=rule_type
    )
    if rule_id is not None:
        existing = repository.get(rule_id)
        if existing is None:
            raise ValueError(f"Notification rule {rule_id} not found")
        if same_scope is not None and same_scope.id != rule_id:
            raise RuleScopeConflictError(hotel_id, department_id, rule_type)
    else:
        existing = same_scope

    if existing is None:
        try:
            created = repository.create(entity)
        except RuleScopeConflictError:
            # A concurrent upsert created the scope first; update it instead.
            existing = repository.find_by_scope(
                hotel_id=hotel_id, department_id=department_id, rule_type=rule_type
            )
            if existing is None:
                raise
        else:
            logger.info("Created notification rule %s (%s)", created.id, created.name)
            return created

    entity.id = existing.id
    entity.created_at = existing.created_at
    updated = repository.update(entity)
    logger.info("Updated notification rule %s (%s)", updated.id, updated.name)
    return updated


__all__ = ["upsert_rule"]
