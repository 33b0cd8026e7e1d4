"""Use case for resolving who receives the alerts of a rule."""

from __future__ import annotations

from sqlalchemy.orm import Session

from inventory_alerts.domain.entities import NotificationRule, User
from inventory_alerts.infrastructure.repositories import UserRepository


def resolve_recipients(
    session: Session,
    rule: NotificationRule,
    *,
    hotel_id: int | None = None,
) -> list[User]:
    """Return the active users that should be alerted by ``rule``.

    ``hotel_id`` narrows hotel-wide rules (``rule.hotel_id is None``) to the
    hotel owning the batch being reported. Department rules also reach the
    hotel administrators whose role is listed, whatever their department.
    """

    scope_hotel_id = rule.hotel_id if rule.hotel_id is not None else hotel_id
    repository = UserRepository(session)
    return list(
        repository.list_active(
            roles=rule.recipient_roles,
            hotel_id=scope_hotel_id,
            department_id=rule.department_id,
        )
    )


__all__ = ["resolve_recipients"]
