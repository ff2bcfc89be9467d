"""Repository implementations."""

from .credit_note_repository_impl import SqlAlchemyCreditNoteRepository
from .line_item_repository_impl import (
    SqlAlchemyCreditNoteItemRepository,
    SqlAlchemyOrderItemRepository,
)
from .order_address_repository_impl import SqlAlchemyOrderAddressRepository
from .order_repository_impl import SqlAlchemyOrderRepository

__all__ = [
    "SqlAlchemyCreditNoteItemRepository",
    "SqlAlchemyCreditNoteRepository",
    "SqlAlchemyOrderAddressRepository",
    "SqlAlchemyOrderItemRepository",
    "SqlAlchemyOrderRepository",
]
