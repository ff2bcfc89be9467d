"""
Application service for Order and CreditNote writes.

Order creation from a cart is the critical path: header, items and
addresses are written in ONE unit of work, so either the whole aggregate
exists afterwards or nothing does.

Pipeline stages (CreationStage):
STARTED -> VALIDATED -> HEADER_WRITTEN -> CHILDREN_WRITTEN -> COMMITTED
Any failure after VALIDATED rolls back and ends in ROLLED_BACK.
"""
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import CreateCreditNoteRequest, CreateOrderFromCartRequest
from core.data.uow import create_uow
from core.domain.entities import CreditNote, Order
from core.domain.enums import AddressType, CreationStage
from core.domain.exceptions import (
    CreditNoteCreationFailed,
    NotFoundError,
    OrderCreationFailed,
    ValidationError,
)
from core.domain.value_objects import calculate_totals_from_items
from core.infrastructure.logging import get_logger

logger = get_logger(__name__)


class OrderApplicationService:
    """
    Application service for orchestrating order and credit note writes.

    Responsibilities:
    - Validate requests before any write
    - Handle transactions via UoW (one per call, never shared)
    - Transform between DTOs and domain entities
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """Initialize order application service.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def create_order_from_cart(self, request: CreateOrderFromCartRequest) -> Order:
        """Materialize an order, its items and addresses from a cart.

        Idempotent on payment_reference: replaying a request returns the
        order created the first time, without writing new children.

        Args:
            request: Cart, customer, addresses and payment data

        Returns:
            Persisted Order with items and addresses

        Raises:
            ValidationError: Empty cart, missing customer identity, bad header
            OrderCreationFailed: Any failure after validation (nothing persisted)
        """
        stage = CreationStage.STARTED
        order = self._order_from_request(request)
        items = [line.to_order_item() for line in request.cart.items]
        stage = CreationStage.VALIDATED

        address_data = request.address_data
        shipping = address_data.shipping if address_data else None
        billing = address_data.billing_to_store() if address_data else None

        uow = create_uow(self._session_factory)
        try:
            async with uow:
                header, created = await uow.orders.create_or_get(order)
                stage = CreationStage.HEADER_WRITTEN

                if not created:
                    existing = await uow.orders.get_by_id(header.id)
                    await uow.commit()
                    logger.warning(
                        f"Replayed payment reference {order.payment_reference}: "
                        f"returning order {header.id}"
                    )
                    return existing

                for item in items:
                    await uow.order_items.create_item(header.id, item)

                if shipping:
                    await uow.order_addresses.create(header.id, AddressType.SHIPPING, shipping)
                if billing:
                    await uow.order_addresses.create(header.id, AddressType.BILLING, billing)
                stage = CreationStage.CHILDREN_WRITTEN

                persisted = await uow.orders.get_by_id(header.id)
                await uow.commit()
                stage = CreationStage.COMMITTED

        except Exception as exc:
            logger.error(
                f"Order creation {CreationStage.ROLLED_BACK.value} after {stage.value}: {exc}"
            )
            raise OrderCreationFailed(exc, stage.value) from exc

        logger.info(
            f"✅ Order {persisted.id} committed with {len(persisted.items)} items "
            f"and {len(persisted.addresses)} addresses"
        )
        return persisted

    async def update_delivery_status(self, order_id: int, delivered: bool) -> Order:
        """Set the delivered flag; returns the order with its items and addresses.

        Raises:
            NotFoundError: If the order does not exist
        """
        async with create_uow(self._session_factory) as uow:
            updated = await uow.orders.update_delivery_status(order_id, delivered)
            if updated is None:
                raise NotFoundError("order not found")
            order = await uow.orders.get_by_id(order_id)
            await uow.commit()
            return order

    async def delete_order(self, order_id: int) -> bool:
        """Administrative delete of an order with its items and addresses."""
        async with create_uow(self._session_factory) as uow:
            deleted = await uow.orders.delete(order_id)
            await uow.commit()

        if deleted:
            logger.info(f"✅ Order {order_id} deleted")
        return deleted

    def _order_from_request(self, request: CreateOrderFromCartRequest) -> Order:
        """Build and validate the order header; no I/O."""
        cart = request.cart
        if not cart.items:
            raise ValidationError("cart is empty")

        snapshot = request.customer_data.to_snapshot() if request.customer_data else None
        if not request.customer_id and not snapshot:
            raise ValidationError("customer identity required")

        payment_reference = (request.payment_reference or "").strip() or None

        order = Order(
            customer_id=request.customer_id,
            customer_snapshot=snapshot,
            total_amount_ht=cart.subtotal,
            total_amount_ttc=cart.total,
            payment_method=request.payment_method,
            notes=request.notes or "",
            payment_reference=payment_reference,
        )
        order.validate()
        return order

    # =========================================================================
    # CREDIT NOTES
    # =========================================================================

    async def create_credit_note(self, request: CreateCreditNoteRequest) -> CreditNote:
        """Create a credit note, with its items in the same unit of work.

        When items are given the header totals are the item sums, whatever
        totals the caller sent.

        Raises:
            ValidationError: Missing customer/order/reason, bad totals
            NotFoundError: If the referenced order does not exist
            CreditNoteCreationFailed: Any other failure after validation
        """
        stage = CreationStage.STARTED
        items = [line.to_credit_note_item() for line in request.items]
        credit_note = self._credit_note_from_request(request, items)
        credit_note.validate()
        stage = CreationStage.VALIDATED

        try:
            async with create_uow(self._session_factory) as uow:
                if not await uow.orders.exists(credit_note.order_id):
                    raise NotFoundError("order not found")

                header = await uow.credit_notes.create(credit_note)
                stage = CreationStage.HEADER_WRITTEN

                for item in items:
                    await uow.credit_note_items.create_item(header.id, item)
                stage = CreationStage.CHILDREN_WRITTEN

                persisted = await uow.credit_notes.get_by_id(header.id)
                await uow.commit()
                stage = CreationStage.COMMITTED

        except NotFoundError:
            raise
        except Exception as exc:
            logger.error(
                f"Credit note creation {CreationStage.ROLLED_BACK.value} after {stage.value}: {exc}"
            )
            raise CreditNoteCreationFailed(exc, stage.value) from exc

        logger.info(f"✅ Credit note {persisted.id} committed with {len(persisted.items)} items")
        return persisted

    async def update_credit_note_status(self, credit_note_id: int, status: str) -> CreditNote:
        """Move a credit note to a new status (pending -> refunded).

        Raises:
            NotFoundError: If the credit note does not exist
            ValidationError: Unknown status or illegal transition
        """
        async with create_uow(self._session_factory) as uow:
            await uow.credit_notes.update_status(credit_note_id, status)
            credit_note = await uow.credit_notes.get_by_id(credit_note_id)
            await uow.commit()
            return credit_note

    async def list_credit_notes_by_customer(self, customer_id: int) -> List[CreditNote]:
        async with create_uow(self._session_factory) as uow:
            return await uow.credit_notes.list_by_customer(customer_id)

    @staticmethod
    def _credit_note_from_request(
        request: CreateCreditNoteRequest, items: Optional[list] = None
    ) -> CreditNote:
        total_ht, total_ttc = request.total_amount_ht, request.total_amount_ttc
        if items:
            totals = calculate_totals_from_items(items).rounded()
            total_ht, total_ttc = totals.total_ht, totals.total_ttc

        return CreditNote(
            customer_id=request.customer_id,
            order_id=request.order_id,
            reason=request.reason,
            description=request.description,
            issue_date=request.issue_date,
            payment_method=request.payment_method,
            notes=request.notes,
            total_amount_ht=total_ht,
            total_amount_ttc=total_ttc,
        )