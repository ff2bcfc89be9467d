"""SQLAlchemy implementations of the line item repositories."""

import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.repositories import LineItemRepository

from ..mappers import CreditNoteItemMapper, OrderItemMapper
from ..models import CreditNoteItemModel, OrderItemModel

logger = logging.getLogger(__name__)


class _SqlAlchemyLineItemRepository(LineItemRepository):
    """
    Line items owned by a header row.

    Item writes never touch the header's cached totals; readers reconcile.
    """

    model = None
    mapper = None
    parent_column = None

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_item(self, parent_id: int, item):
        """Validate and persist one line item.

        Args:
            parent_id: Owning header id
            item: OrderItem / CreditNoteItem entity

        Returns:
            Persisted item with id and timestamps

        Raises:
            ValidationError: If the item breaks a sale-time invariant
        """
        item.validate()

        row = self.mapper.to_persistence(item, parent_id)
        self._session.add(row)
        await self._session.flush()

        logger.info(f"✅ Inserted {self.model.__tablename__} row {row.id} (parent {parent_id})")
        return self.mapper.to_domain(row)

    async def get_by_parent_id(self, parent_id: int) -> List:
        """Items of a header, oldest first."""
        column = getattr(self.model, self.parent_column)
        result = await self._session.execute(
            select(self.model)
            .where(column == parent_id)
            .order_by(self.model.created_at.asc(), self.model.id.asc())
        )
        return [self.mapper.to_domain(row) for row in result.scalars()]

    async def delete_item(self, item_id: int) -> bool:
        result = await self._session.execute(delete(self.model).where(self.model.id == item_id))
        await self._session.flush()
        return result.rowcount > 0


class SqlAlchemyOrderItemRepository(_SqlAlchemyLineItemRepository):
    """Order line items."""

    model = OrderItemModel
    mapper = OrderItemMapper
    parent_column = "order_id"


class SqlAlchemyCreditNoteItemRepository(_SqlAlchemyLineItemRepository):
    """Credit note line items."""

    model = CreditNoteItemModel
    mapper = CreditNoteItemMapper
    parent_column = "credit_note_id"
