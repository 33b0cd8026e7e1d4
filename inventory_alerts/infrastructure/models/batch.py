"""SQLAlchemy models for inventory batches and their reference data."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from inventory_alerts.infrastructure.database import Base


class DepartmentModel(Base):
    """A department (kitchen, bar, minibar...) inside a hotel."""

    __tablename__ = "department"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, nullable=False, index=True)
    name = Column(String(100), nullable=False)


class ProductModel(Base):
    """A product that can be stocked in batches."""

    __tablename__ = "product"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    unit = Column(String(20), nullable=True)
    category_name = Column(String(100), nullable=True)


class BatchModel(Base):
    """Database representation of an inventory batch."""

    __tablename__ = "batch"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, nullable=False, index=True)
    department_id = Column(
        Integer, ForeignKey("department.id", ondelete="SET NULL"), nullable=True, index=True
    )
    product_id = Column(
        Integer, ForeignKey("product.id", ondelete="SET NULL"), nullable=True
    )
    quantity = Column(Numeric(12, 3), nullable=False, default=0)
    expiry_date = Column(Date, nullable=True, index=True)
    status = Column(String(20), nullable=False, default="active", index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    product = relationship("ProductModel", lazy="joined")
    department = relationship("DepartmentModel", lazy="joined")


__all__ = ["BatchModel", "DepartmentModel", "ProductModel"]
