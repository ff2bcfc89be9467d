"""SQLAlchemy implementation of OrderAddressRepository."""

import logging
from typing import Any, Dict, List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import OrderAddress
from core.domain.repositories import OrderAddressRepository

from ..mappers import OrderAddressMapper
from ..models import OrderAddressModel

logger = logging.getLogger(__name__)


class SqlAlchemyOrderAddressRepository(OrderAddressRepository):
    """Shipping / billing snapshots attached to orders."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, order_id: int, address_type: Any, snapshot: Dict[str, Any]
    ) -> OrderAddress:
        """Persist an address snapshot.

        Args:
            order_id: Owning order id
            address_type: "shipping" / "billing" or AddressType
            snapshot: Opaque address payload, stored as given

        Returns:
            Persisted OrderAddress

        Raises:
            ValidationError: If address_type is not shipping/billing
        """
        address = OrderAddress(address_type=address_type, address_snapshot=snapshot)

        row = OrderAddressModel(
            order_id=order_id,
            address_type=address.address_type.value,
            address_snapshot=snapshot,
        )
        self._session.add(row)
        await self._session.flush()

        logger.info(f"✅ Inserted {address.address_type.value} address for order {order_id}")
        return OrderAddressMapper.to_domain(row)

    async def get_by_order_id(self, order_id: int) -> List[OrderAddress]:
        result = await self._session.execute(
            select(OrderAddressModel)
            .where(OrderAddressModel.order_id == order_id)
            .order_by(OrderAddressModel.created_at.asc(), OrderAddressModel.id.asc())
        )
        return [OrderAddressMapper.to_domain(row) for row in result.scalars()]

    async def delete(self, address_id: int) -> bool:
        result = await self._session.execute(
            delete(OrderAddressModel).where(OrderAddressModel.id == address_id)
        )
        await self._session.flush()
        return result.rowcount > 0
