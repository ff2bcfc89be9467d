"""Domain entities."""

from .credit_note import CreditNote, CreditNoteItem, parse_credit_note_status
from .order import Order, OrderAddress, OrderItem

__all__ = [
    "CreditNote",
    "CreditNoteItem",
    "Order",
    "OrderAddress",
    "OrderItem",
    "parse_credit_note_status",
]
