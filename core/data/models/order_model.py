"""SQLAlchemy ORM models for the Order aggregate."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from .base import Base, utcnow

# Opaque snapshot payloads: JSONB on PostgreSQL, JSON elsewhere
SnapshotType = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


class OrderModel(Base):
    """SQLAlchemy ORM model for orders table."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Customer (guest orders only carry the snapshot)
    customer_id = Column(Integer, nullable=True, index=True)
    customer_snapshot = Column(SnapshotType, nullable=True)

    # Cached totals; authoritative totals come from the items
    total_amount_ht = Column(Numeric(10, 2), nullable=False)
    total_amount_ttc = Column(Numeric(10, 2), nullable=False)

    payment_method = Column(String(50), nullable=False)
    notes = Column(Text, nullable=False, default="")
    delivered = Column(Boolean, nullable=False, default=False)

    # Idempotency key; NULLs never conflict with each other
    payment_reference = Column(String(255), nullable=True, unique=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[OrderItemModel.created_at, OrderItemModel.id]",
    )
    addresses = relationship(
        "OrderAddressModel",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[OrderAddressModel.created_at, OrderAddressModel.id]",
    )

    __table_args__ = (Index("ix_orders_created_at", "created_at"),)

    def __repr__(self):
        return f"<OrderModel(id={self.id}, customer_id={self.customer_id}, ttc={self.total_amount_ttc})>"


class OrderItemModel(Base):
    """SQLAlchemy ORM model for order_items table."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Product snapshot at time of sale
    product_id = Column(Integer, nullable=False)
    product_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)

    quantity = Column(Integer, nullable=False)
    unit_price_ht = Column(Numeric(10, 2), nullable=False)
    unit_price_ttc = Column(Numeric(10, 2), nullable=False)
    vat_rate = Column(Numeric(5, 2), nullable=False, default=0)
    total_price_ht = Column(Numeric(10, 2), nullable=False)
    total_price_ttc = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    order = relationship("OrderModel", back_populates="items")

    def __repr__(self):
        return f"<OrderItemModel(id={self.id}, product_id={self.product_id}, quantity={self.quantity})>"


class OrderAddressModel(Base):
    """SQLAlchemy ORM model for order_addresses table."""

    __tablename__ = "order_addresses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )

    address_type = Column("type", String(20), nullable=False)
    address_snapshot = Column(SnapshotType, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    order = relationship("OrderModel", back_populates="addresses")

    def __repr__(self):
        return f"<OrderAddressModel(id={self.id}, order_id={self.order_id}, type={self.address_type})>"
