"""SQLAlchemy implementation of OrderRepository."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.domain.entities import Order
from core.domain.repositories import OrderRepository
from core.domain.value_objects import RevenueFilter, year_bounds

from ..mappers import OrderItemMapper, OrderMapper
from ..models import OrderAddressModel, OrderItemModel, OrderModel, utcnow

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_insert(session: AsyncSession):
    """INSERT construct supporting ON CONFLICT for the session's dialect."""
    dialect = session.get_bind().dialect.name
    try:
        return _UPSERT_DIALECTS[dialect]
    except KeyError:
        raise RuntimeError(f"ON CONFLICT inserts are not supported on {dialect}")


class SqlAlchemyOrderRepository(OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy.

    Runs on the session owned by the caller's unit of work: flushes,
    never commits.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    async def create(self, order: Order) -> Order:
        """Persist an order header, idempotent on payment reference."""
        persisted, _ = await self.create_or_get(order)
        return persisted

    async def create_or_get(self, order: Order) -> Tuple[Order, bool]:
        """Insert the header or return the row already holding its payment reference.

        Args:
            order: Order header to persist

        Returns:
            (persisted order, True if a new row was inserted)

        Raises:
            ValidationError: If customer identity, totals or payment method is invalid
        """
        order.validate()

        insert = dialect_insert(self._session)
        stmt = (
            insert(OrderModel)
            .values(OrderMapper.to_insert_values(order))
            .on_conflict_do_nothing(index_elements=[OrderModel.payment_reference])
            .returning(OrderModel)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is not None:
            logger.info(f"✅ Inserted order header: {model.id}")
            return OrderMapper.to_domain(model), True

        # Conflict: the payment reference was already used
        result = await self._session.execute(
            select(OrderModel).where(OrderModel.payment_reference == order.payment_reference)
        )
        existing = result.scalar_one()
        existing.updated_at = utcnow()
        await self._session.flush()

        logger.warning(
            f"Payment reference {order.payment_reference} already used by order {existing.id}"
        )
        return OrderMapper.to_domain(existing), False

    async def get_by_id(self, order_id: int, with_children: bool = True) -> Optional[Order]:
        """Retrieve an order, with items and addresses by default.

        Args:
            order_id: Order id
            with_children: Eagerly load items and addresses

        Returns:
            Order if found, None otherwise
        """
        stmt = select(OrderModel).where(OrderModel.id == order_id)
        if with_children:
            stmt = stmt.options(
                selectinload(OrderModel.items),
                selectinload(OrderModel.addresses),
            ).execution_options(populate_existing=True)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            logger.info(f"Order not found: {order_id}")
            return None

        return OrderMapper.to_domain(model, with_children=with_children)

    async def exists(self, order_id: int) -> bool:
        """Check if an order exists.

        Args:
            order_id: Order id

        Returns:
            True if order exists, False otherwise
        """
        result = await self._session.execute(
            select(OrderModel.id).where(OrderModel.id == order_id)
        )
        return result.scalar_one_or_none() is not None

    async def update_delivery_status(self, order_id: int, delivered: bool) -> Optional[Order]:
        """Set the delivered flag; the only mutable order field."""
        model = await self._session.get(OrderModel, order_id)
        if model is None:
            return None

        model.delivered = bool(delivered)
        model.updated_at = utcnow()
        await self._session.flush()

        logger.info(f"✅ Order {order_id} delivered={model.delivered}")
        return OrderMapper.to_domain(model)

    async def list_by_year(self, year: int) -> List[Order]:
        """Orders created during a calendar year, newest first, with children."""
        start, end = year_bounds(year)
        result = await self._session.execute(
            select(OrderModel)
            .options(
                selectinload(OrderModel.items),
                selectinload(OrderModel.addresses),
            )
            .where(OrderModel.created_at >= start, OrderModel.created_at < end)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return [OrderMapper.to_domain(model, with_children=True) for model in result.scalars()]

    async def list_for_statistics(self, criteria: RevenueFilter) -> List[Order]:
        """Orders matching a revenue filter, with items loaded for reconciliation."""
        stmt = select(OrderModel).options(selectinload(OrderModel.items))

        if criteria.customer_id is not None:
            stmt = stmt.where(OrderModel.customer_id == criteria.customer_id)
        if criteria.start_date is not None:
            stmt = stmt.where(OrderModel.created_at >= criteria.start_date)
        if criteria.end_date is not None:
            stmt = stmt.where(OrderModel.created_at <= criteria.end_date)
        if criteria.year is not None:
            start, end = year_bounds(criteria.year)
            stmt = stmt.where(OrderModel.created_at >= start, OrderModel.created_at < end)

        result = await self._session.execute(stmt)
        orders = []
        for model in result.scalars():
            order = OrderMapper.to_domain(model)
            order.items = [OrderItemMapper.to_domain(item) for item in model.items]
            orders.append(order)
        return orders

    async def delete(self, order_id: int) -> bool:
        """Administrative delete: items and addresses, then the header."""
        if not await self.exists(order_id):
            return False

        await self._session.execute(delete(OrderItemModel).where(OrderItemModel.order_id == order_id))
        await self._session.execute(
            delete(OrderAddressModel).where(OrderAddressModel.order_id == order_id)
        )
        await self._session.execute(delete(OrderModel).where(OrderModel.id == order_id))
        await self._session.flush()

        logger.info(f"✅ Deleted order {order_id} with its items and addresses")
        return True
