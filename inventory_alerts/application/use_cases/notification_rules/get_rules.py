"""Use case for listing notification rules."""

from collections.abc import Sequence

from sqlalchemy.orm import Session

from inventory_alerts.domain.entities import NotificationRule
from inventory_alerts.infrastructure.repositories import RuleRepository


def get_rules(session: Session, *, hotel_id: int | None = None) -> Sequence[NotificationRule]:
    """Return enabled rules for ``hotel_id`` together with the hotel-wide ones.

    Rules are ordered from the least to the most specific scope.
    """

    repository = RuleRepository(session)
    return repository.list_for_hotel(hotel_id)


__all__ = ["get_rules"]
