"""Read-only access to inventory batches."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from inventory_alerts.domain.entities import Batch, BatchStatus
from inventory_alerts.infrastructure.models import BatchModel


class BatchRepository:
    """Query batches the notification engine reasons about."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_near_expiry(
        self,
        *,
        today: date,
        max_days_left: int,
        hotel_id: int | None = None,
        department_id: int | None = None,
    ) -> Sequence[Batch]:
        """Return active batches expiring within ``max_days_left`` days of ``today``.

        Already expired batches are included; they have a negative number of
        days left.
        """

        cutoff = today + timedelta(days=max_days_left)
        query = (
            self.session.query(BatchModel)
            .filter(BatchModel.status == BatchStatus.ACTIVE.value)
            .filter(BatchModel.expiry_date.isnot(None))
            .filter(BatchModel.expiry_date <= cutoff)
        )
        if hotel_id is not None:
            query = query.filter(BatchModel.hotel_id == hotel_id)
        if department_id is not None:
            query = query.filter(BatchModel.department_id == department_id)
        query = query.order_by(BatchModel.expiry_date.asc(), BatchModel.id.asc())
        return [self._to_entity(model) for model in query.all()]

    def get(self, batch_id: int) -> Batch | None:
        model = self.session.get(BatchModel, batch_id)
        return self._to_entity(model) if model else None

    def get_status(self, batch_id: int) -> BatchStatus | None:
        status = (
            self.session.query(BatchModel.status)
            .filter(BatchModel.id == batch_id)
            .scalar()
        )
        return BatchStatus(status) if status is not None else None

    @staticmethod
    def _to_entity(model: BatchModel) -> Batch:
        product = model.product
        department = model.department
        return Batch(
            id=model.id,
            hotel_id=model.hotel_id,
            department_id=model.department_id,
            product_id=model.product_id,
            product_name=product.name if product else f"Batch #{model.id}",
            quantity=Decimal(model.quantity or 0),
            unit=product.unit if product else None,
            expiry_date=model.expiry_date,
            status=BatchStatus(model.status),
            department_name=department.name if department else None,
            category_name=product.category_name if product else None,
        )


__all__ = ["BatchRepository"]
