"""Domain entity representing an inventory batch."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class BatchStatus(str, Enum):
    """Lifecycle states of a batch on the shelf."""

    ACTIVE = "active"
    WRITTEN_OFF = "written_off"
    COLLECTED = "collected"

    @property
    def is_terminal(self) -> bool:
        return self is not BatchStatus.ACTIVE


@dataclass
class Batch:
    """A tracked quantity of a product with an expiry date."""

    id: int | None
    hotel_id: int
    department_id: int | None
    product_id: int | None
    product_name: str
    quantity: Decimal
    unit: str | None
    expiry_date: date
    status: BatchStatus = BatchStatus.ACTIVE
    department_name: str | None = None
    category_name: str | None = None

    def days_left(self, today: date) -> int:
        """Return the number of whole days between ``today`` and expiry."""

        return (self.expiry_date - today).days


__all__ = ["Batch", "BatchStatus"]
