"""Data layer - infrastructure persistence and mapping."""

from .mappers import (
    CreditNoteItemMapper,
    CreditNoteMapper,
    OrderAddressMapper,
    OrderItemMapper,
    OrderMapper,
)
from .models import (
    Base,
    CreditNoteItemModel,
    CreditNoteModel,
    OrderAddressModel,
    OrderItemModel,
    OrderModel,
)
from .repositories import (
    SqlAlchemyCreditNoteItemRepository,
    SqlAlchemyCreditNoteRepository,
    SqlAlchemyOrderAddressRepository,
    SqlAlchemyOrderItemRepository,
    SqlAlchemyOrderRepository,
)
from .uow import UnitOfWork, create_uow

__all__ = [
    "Base",
    "create_uow",
    "CreditNoteItemMapper",
    "CreditNoteItemModel",
    "CreditNoteMapper",
    "CreditNoteModel",
    "OrderAddressMapper",
    "OrderAddressModel",
    "OrderItemMapper",
    "OrderItemModel",
    "OrderMapper",
    "OrderModel",
    "SqlAlchemyCreditNoteItemRepository",
    "SqlAlchemyCreditNoteRepository",
    "SqlAlchemyOrderAddressRepository",
    "SqlAlchemyOrderItemRepository",
    "SqlAlchemyOrderRepository",
    "UnitOfWork",
]
