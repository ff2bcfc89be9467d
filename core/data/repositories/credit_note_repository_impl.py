"""SQLAlchemy implementation of CreditNoteRepository."""

import logging
from typing import Any, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.domain.entities import CreditNote
from core.domain.exceptions import NotFoundError
from core.domain.repositories import CreditNoteRepository
from core.domain.value_objects import RevenueFilter, year_bounds

from ..mappers import CreditNoteMapper
from ..models import CreditNoteItemModel, CreditNoteModel, utcnow

logger = logging.getLogger(__name__)


class SqlAlchemyCreditNoteRepository(CreditNoteRepository):
    """Concrete implementation of CreditNoteRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, credit_note: CreditNote) -> CreditNote:
        """Persist a credit note header.

        Args:
            credit_note: Credit note header (items are written separately)

        Returns:
            Persisted credit note with id and timestamps

        Raises:
            ValidationError: If customer, order, reason, totals or payment method is invalid
        """
        credit_note.validate()

        model = CreditNoteMapper.to_persistence(credit_note)
        self._session.add(model)
        await self._session.flush()

        logger.info(f"✅ Inserted credit note {model.id} for order {model.order_id}")
        return CreditNoteMapper.to_domain(model)

    async def get_by_id(
        self, credit_note_id: int, with_children: bool = True
    ) -> Optional[CreditNote]:
        stmt = select(CreditNoteModel).where(CreditNoteModel.id == credit_note_id)
        if with_children:
            stmt = stmt.options(selectinload(CreditNoteModel.items)).execution_options(
                populate_existing=True
            )

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            logger.info(f"Credit note not found: {credit_note_id}")
            return None

        return CreditNoteMapper.to_domain(model, with_children=with_children)

    async def exists(self, credit_note_id: int) -> bool:
        result = await self._session.execute(
            select(CreditNoteModel.id).where(CreditNoteModel.id == credit_note_id)
        )
        return result.scalar_one_or_none() is not None

    async def update_status(self, credit_note_id: int, status: Any) -> CreditNote:
        """Change the refund status of a credit note.

        Setting the current status again only touches updated_at.

        Args:
            credit_note_id: Credit note id
            status: "pending" / "refunded" or CreditNoteStatus

        Returns:
            Updated credit note

        Raises:
            NotFoundError: If the credit note does not exist
            ValidationError: If the status is unknown or the transition is illegal
        """
        model = await self._session.get(CreditNoteModel, credit_note_id)
        if model is None:
            raise NotFoundError("credit note not found")

        credit_note = CreditNoteMapper.to_domain(model)
        previous = credit_note.status
        new_status = credit_note.change_status(status)

        model.status = new_status.value
        model.updated_at = utcnow()
        await self._session.flush()

        logger.info(
            f"✅ Credit note {credit_note_id} status {previous.value} -> {new_status.value}"
        )
        return CreditNoteMapper.to_domain(model)

    async def list_by_year(self, year: int) -> List[CreditNote]:
        """Credit notes created during a calendar year, newest first, with items."""
        start, end = year_bounds(year)
        result = await self._session.execute(
            select(CreditNoteModel)
            .options(selectinload(CreditNoteModel.items))
            .where(CreditNoteModel.created_at >= start, CreditNoteModel.created_at < end)
            .order_by(CreditNoteModel.created_at.desc(), CreditNoteModel.id.desc())
        )
        return [
            CreditNoteMapper.to_domain(model, with_children=True) for model in result.scalars()
        ]

    async def list_for_statistics(self, criteria: RevenueFilter) -> List[CreditNote]:
        stmt = select(CreditNoteModel).options(selectinload(CreditNoteModel.items))

        if criteria.customer_id is not None:
            stmt = stmt.where(CreditNoteModel.customer_id == criteria.customer_id)
        if criteria.start_date is not None:
            stmt = stmt.where(CreditNoteModel.created_at >= criteria.start_date)
        if criteria.end_date is not None:
            stmt = stmt.where(CreditNoteModel.created_at <= criteria.end_date)
        if criteria.year is not None:
            start, end = year_bounds(criteria.year)
            stmt = stmt.where(CreditNoteModel.created_at >= start, CreditNoteModel.created_at < end)

        result = await self._session.execute(stmt)
        return [
            CreditNoteMapper.to_domain(model, with_children=True) for model in result.scalars()
        ]

    async def list_by_customer(self, customer_id: int) -> List[CreditNote]:
        """All credit notes of a customer, newest first."""
        result = await self._session.execute(
            select(CreditNoteModel)
            .options(selectinload(CreditNoteModel.items))
            .where(CreditNoteModel.customer_id == customer_id)
            .order_by(CreditNoteModel.created_at.desc(), CreditNoteModel.id.desc())
        )
        return [
            CreditNoteMapper.to_domain(model, with_children=True) for model in result.scalars()
        ]

    async def delete(self, credit_note_id: int) -> bool:
        if not await self.exists(credit_note_id):
            return False

        await self._session.execute(
            delete(CreditNoteItemModel).where(CreditNoteItemModel.credit_note_id == credit_note_id)
        )
        await self._session.execute(
            delete(CreditNoteModel).where(CreditNoteModel.id == credit_note_id)
        )
        await self._session.flush()

        logger.info(f"✅ Deleted credit note {credit_note_id}")
        return True
