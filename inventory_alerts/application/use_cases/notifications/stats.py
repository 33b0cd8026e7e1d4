"""Use case for reporting notification volumes."""

from collections.abc import Sequence
from datetime import date

from sqlalchemy.orm import Session

from inventory_alerts.infrastructure.repositories import (
    NotificationRepository,
    NotificationStatsRow,
)


def get_stats(
    session: Session,
    *,
    hotel_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
) -> Sequence[NotificationStatsRow]:
    """Return notification counts grouped by day, status and type, newest day first."""

    if start_date and end_date and start_date > end_date:
        raise ValueError("start_date must be on or before end_date")

    repository = NotificationRepository(session)
    return repository.count_by_day_status_type(
        hotel_id=hotel_id, start_date=start_date, end_date=end_date
    )


__all__ = ["get_stats"]
