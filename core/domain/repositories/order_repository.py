"""Repository interfaces for the Order and CreditNote aggregates."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from ..entities import CreditNote, Order, OrderAddress
from ..value_objects import RevenueFilter

ItemT = TypeVar("ItemT")


class OrderRepository(ABC):
    """Abstract store for order headers."""

    @abstractmethod
    async def create_or_get(self, order: Order) -> Tuple[Order, bool]:
        """Insert header, or touch and return the row holding the same payment reference.

        Args:
            order: Order header to persist

        Returns:
            (persisted order, True if a new row was inserted)
        """
        pass

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Optional[Order]:
        pass

    @abstractmethod
    async def update_delivery_status(self, order_id: int, delivered: bool) -> Optional[Order]:
        pass

    @abstractmethod
    async def list_by_year(self, year: int) -> List[Order]:
        """Orders created in [year-01-01, (year+1)-01-01), with children."""
        pass

    @abstractmethod
    async def list_for_statistics(self, criteria: RevenueFilter) -> List[Order]:
        pass

    @abstractmethod
    async def delete(self, order_id: int) -> bool:
        pass


class CreditNoteRepository(ABC):
    """Abstract store for credit note headers."""

    @abstractmethod
    async def create(self, credit_note: CreditNote) -> CreditNote:
        pass

    @abstractmethod
    async def get_by_id(self, credit_note_id: int) -> Optional[CreditNote]:
        pass

    @abstractmethod
    async def update_status(self, credit_note_id: int, status: Any) -> CreditNote:
        """Change status; raises NotFoundError / ValidationError."""
        pass

    @abstractmethod
    async def list_by_year(self, year: int) -> List[CreditNote]:
        pass

    @abstractmethod
    async def list_for_statistics(self, criteria: RevenueFilter) -> List[CreditNote]:
        pass

    @abstractmethod
    async def delete(self, credit_note_id: int) -> bool:
        pass


class LineItemRepository(ABC, Generic[ItemT]):
    """Abstract store for line items owned by a header."""

    @abstractmethod
    async def create_item(self, parent_id: int, item: ItemT) -> ItemT:
        pass

    @abstractmethod
    async def get_by_parent_id(self, parent_id: int) -> List[ItemT]:
        """Items ordered by creation time ascending."""
        pass

    @abstractmethod
    async def delete_item(self, item_id: int) -> bool:
        pass


class OrderAddressRepository(ABC):
    """Abstract store for order address snapshots."""

    @abstractmethod
    async def create(
        self, order_id: int, address_type: Any, snapshot: Dict[str, Any]
    ) -> OrderAddress:
        pass

    @abstractmethod
    async def get_by_order_id(self, order_id: int) -> List[OrderAddress]:
        pass

    @abstractmethod
    async def delete(self, address_id: int) -> bool:
        pass
