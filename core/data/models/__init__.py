"""Database models."""

from .base import Base, utcnow
from .credit_note_model import CreditNoteItemModel, CreditNoteModel
from .order_model import OrderAddressModel, OrderItemModel, OrderModel

__all__ = [
    "Base",
    "CreditNoteItemModel",
    "CreditNoteModel",
    "OrderAddressModel",
    "OrderItemModel",
    "OrderModel",
    "utcnow",
]
