"""Repository interfaces."""

from .order_repository import (
    CreditNoteRepository,
    LineItemRepository,
    OrderAddressRepository,
    OrderRepository,
)

__all__ = [
    "CreditNoteRepository",
    "LineItemRepository",
    "OrderAddressRepository",
    "OrderRepository",
]
