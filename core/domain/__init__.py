"""Domain layer - pure domain models and interfaces."""

from .entities import CreditNote, CreditNoteItem, Order, OrderAddress, OrderItem
from .enums import AddressType, CreationStage, CreditNoteStatus
from .exceptions import (
    CreditNoteCreationFailed,
    IntegrityError,
    NotFoundError,
    OrderCreationFailed,
    OrderServiceError,
    ValidationError,
)
from .repositories import (
    CreditNoteRepository,
    LineItemRepository,
    OrderAddressRepository,
    OrderRepository,
)
from .value_objects import RevenueFilter, Totals

__all__ = [
    "AddressType",
    "CreationStage",
    "CreditNote",
    "CreditNoteCreationFailed",
    "CreditNoteItem",
    "CreditNoteRepository",
    "CreditNoteStatus",
    "IntegrityError",
    "LineItemRepository",
    "NotFoundError",
    "Order",
    "OrderAddress",
    "OrderAddressRepository",
    "OrderCreationFailed",
    "OrderItem",
    "OrderRepository",
    "OrderServiceError",
    "RevenueFilter",
    "Totals",
    "ValidationError",
]
