"""SQLAlchemy ORM models for the CreditNote aggregate."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class CreditNoteModel(Base):
    """SQLAlchemy ORM model for credit_notes table."""

    __tablename__ = "credit_notes"

    id = Column(Integer, primary_key=True, autoincrement=True)

    customer_id = Column(Integer, nullable=False, index=True)
    # References the order; deleting an order with credit notes is refused
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)

    reason = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    issue_date = Column(DateTime, default=utcnow, nullable=False)
    payment_method = Column(String(50), nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending")

    # Cached totals; authoritative totals come from the items
    total_amount_ht = Column(Numeric(10, 2), nullable=False)
    total_amount_ttc = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    items = relationship(
        "CreditNoteItemModel",
        back_populates="credit_note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[CreditNoteItemModel.created_at, CreditNoteItemModel.id]",
    )

    __table_args__ = (Index("ix_credit_notes_created_at", "created_at"),)

    def __repr__(self):
        return f"<CreditNoteModel(id={self.id}, order_id={self.order_id}, status={self.status})>"


class CreditNoteItemModel(Base):
    """SQLAlchemy ORM model for credit_note_items table."""

    __tablename__ = "credit_note_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    credit_note_id = Column(
        Integer, ForeignKey("credit_notes.id", ondelete="CASCADE"), nullable=False, index=True
    )

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

    credit_note = relationship("CreditNoteModel", back_populates="items")

    def __repr__(self):
        return f"<CreditNoteItemModel(id={self.id}, product_id={self.product_id}, quantity={self.quantity})>"
