"""Unit of Work pattern for atomic transactions."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .repositories import (
    SqlAlchemyCreditNoteItemRepository,
    SqlAlchemyCreditNoteRepository,
    SqlAlchemyOrderAddressRepository,
    SqlAlchemyOrderItemRepository,
    SqlAlchemyOrderRepository,
)

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Unit of Work pattern for atomic transactions.

    Responsibilities:
    1. Own one SQLAlchemy session per scope, never shared
    2. Atomic commit/rollback of all repository operations
    3. Lazy initialization of repositories on that session

    Leaving the scope with an exception rolls back. Leaving it normally
    without commit() discards pending work as well.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

        # Lazy-loaded repositories
        self._orders: Optional[SqlAlchemyOrderRepository] = None
        self._order_items: Optional[SqlAlchemyOrderItemRepository] = None
        self._order_addresses: Optional[SqlAlchemyOrderAddressRepository] = None
        self._credit_notes: Optional[SqlAlchemyCreditNoteRepository] = None
        self._credit_note_items: Optional[SqlAlchemyCreditNoteItemRepository] = None

    async def __aenter__(self) -> "UnitOfWork":
        """Start transaction scope."""
        self._session = self._session_factory()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Rollback on exception, always release the session."""
        try:
            if exc_type is not None:
                logger.warning(f"Rolling back unit of work: {exc_type.__name__}: {exc_val}")
                await self._session.rollback()
        finally:
            await self._session.close()
            self._session = None

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._session

    @property
    def orders(self) -> SqlAlchemyOrderRepository:
        """Lazy-load order repository."""
        if self._orders is None:
            self._orders = SqlAlchemyOrderRepository(self.session)
        return self._orders

    @property
    def order_items(self) -> SqlAlchemyOrderItemRepository:
        """Lazy-load order item repository."""
        if self._order_items is None:
            self._order_items = SqlAlchemyOrderItemRepository(self.session)
        return self._order_items

    @property
    def order_addresses(self) -> SqlAlchemyOrderAddressRepository:
        """Lazy-load order address repository."""
        if self._order_addresses is None:
            self._order_addresses = SqlAlchemyOrderAddressRepository(self.session)
        return self._order_addresses

    @property
    def credit_notes(self) -> SqlAlchemyCreditNoteRepository:
        """Lazy-load credit note repository."""
        if self._credit_notes is None:
            self._credit_notes = SqlAlchemyCreditNoteRepository(self.session)
        return self._credit_notes

    @property
    def credit_note_items(self) -> SqlAlchemyCreditNoteItemRepository:
        """Lazy-load credit note item repository."""
        if self._credit_note_items is None:
            self._credit_note_items = SqlAlchemyCreditNoteItemRepository(self.session)
        return self._credit_note_items

    async def commit(self) -> None:
        """Commit all pending changes."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Rollback all pending changes."""
        await self.session.rollback()


def create_uow(session_factory: async_sessionmaker) -> UnitOfWork:
    """Create a new Unit of Work instance.

    Args:
        session_factory: SQLAlchemy async session factory

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(session_factory)
