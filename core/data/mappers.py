"""Static mappers for domain entities ↔ database models."""

from decimal import Decimal
from typing import Any, Dict

from core.domain.entities import (
    CreditNote,
    CreditNoteItem,
    Order,
    OrderAddress,
    OrderItem,
)
from core.domain.enums import AddressType
from core.domain.value_objects import to_naive_utc

from .models import (
    CreditNoteItemModel,
    CreditNoteModel,
    OrderAddressModel,
    OrderItemModel,
    OrderModel,
    utcnow,
)


def _decimal(value: Any) -> Decimal:
    """Numeric columns come back as Decimal on PostgreSQL, sometimes float elsewhere."""
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _line_values(entity: Any) -> Dict[str, Any]:
    """Column values shared by both line item tables."""
    return {
        "product_id": entity.product_id,
        "product_name": entity.product_name.strip(),
        "description": entity.description,
        "image_url": entity.image_url,
        "quantity": entity.quantity,
        "unit_price_ht": entity.unit_price_ht,
        "unit_price_ttc": entity.unit_price_ttc,
        "vat_rate": entity.vat_rate,
        "total_price_ht": entity.total_price_ht,
        "total_price_ttc": entity.total_price_ttc,
    }


class OrderItemMapper:
    """Static mapper for OrderItem ↔ OrderItemModel transformation."""

    @staticmethod
    def to_domain(model: OrderItemModel) -> OrderItem:
        """Convert ORM model to domain entity.

        Args:
            model: OrderItemModel instance

        Returns:
            OrderItem domain entity
        """
        return OrderItem(
            id=model.id,
            order_id=model.order_id,
            product_id=model.product_id,
            product_name=model.product_name,
            description=model.description,
            image_url=model.image_url,
            quantity=model.quantity,
            unit_price_ht=_decimal(model.unit_price_ht),
            unit_price_ttc=_decimal(model.unit_price_ttc),
            vat_rate=_decimal(model.vat_rate),
            total_price_ht=_decimal(model.total_price_ht),
            total_price_ttc=_decimal(model.total_price_ttc),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_persistence(entity: OrderItem, order_id: int) -> OrderItemModel:
        """Convert domain entity to ORM model.

        Args:
            entity: OrderItem domain entity
            order_id: Parent order id

        Returns:
            OrderItemModel instance
        """
        return OrderItemModel(order_id=order_id, **_line_values(entity))


class CreditNoteItemMapper:
    """Static mapper for CreditNoteItem ↔ CreditNoteItemModel transformation."""

    @staticmethod
    def to_domain(model: CreditNoteItemModel) -> CreditNoteItem:
        return CreditNoteItem(
            id=model.id,
            credit_note_id=model.credit_note_id,
            product_id=model.product_id,
            product_name=model.product_name,
            description=model.description,
            image_url=model.image_url,
            quantity=model.quantity,
            unit_price_ht=_decimal(model.unit_price_ht),
            unit_price_ttc=_decimal(model.unit_price_ttc),
            vat_rate=_decimal(model.vat_rate),
            total_price_ht=_decimal(model.total_price_ht),
            total_price_ttc=_decimal(model.total_price_ttc),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def to_persistence(entity: CreditNoteItem, credit_note_id: int) -> CreditNoteItemModel:
        return CreditNoteItemModel(credit_note_id=credit_note_id, **_line_values(entity))


class OrderAddressMapper:
    """Static mapper for OrderAddress ↔ OrderAddressModel transformation."""

    @staticmethod
    def to_domain(model: OrderAddressModel) -> OrderAddress:
        return OrderAddress(
            id=model.id,
            order_id=model.order_id,
            address_type=AddressType(model.address_type),
            address_snapshot=model.address_snapshot,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation."""

    @staticmethod
    def to_domain(model: OrderModel, with_children: bool = False) -> Order:
        """Convert ORM model to domain aggregate.

        Args:
            model: OrderModel instance
            with_children: Map items/addresses too (they must be eagerly loaded)

        Returns:
            Order domain aggregate
        """
        order = Order(
            id=model.id,
            customer_id=model.customer_id,
            customer_snapshot=model.customer_snapshot,
            total_amount_ht=_decimal(model.total_amount_ht),
            total_amount_ttc=_decimal(model.total_amount_ttc),
            payment_method=model.payment_method,
            notes=model.notes or "",
            delivered=bool(model.delivered),
            payment_reference=model.payment_reference,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

        if with_children:
            order.items = [OrderItemMapper.to_domain(item) for item in model.items]
            order.addresses = [
                OrderAddressMapper.to_domain(address) for address in model.addresses
            ]

        return order

    @staticmethod
    def to_insert_values(entity: Order) -> Dict[str, Any]:
        """Column values for the idempotent header INSERT.

        Args:
            entity: Order domain aggregate

        Returns:
            Dict of column values
        """
        now = utcnow()
        return {
            "customer_id": entity.customer_id,
            "customer_snapshot": entity.customer_snapshot,
            "total_amount_ht": entity.total_amount_ht,
            "total_amount_ttc": entity.total_amount_ttc,
            "payment_method": entity.payment_method,
            "notes": entity.notes or "",
            "delivered": bool(entity.delivered),
            "payment_reference": entity.payment_reference,
            "created_at": to_naive_utc(entity.created_at) or now,
            "updated_at": now,
        }


class CreditNoteMapper:
    """Static mapper for CreditNote ↔ CreditNoteModel transformation."""

    @staticmethod
    def to_domain(model: CreditNoteModel, with_children: bool = False) -> CreditNote:
        credit_note = CreditNote(
            id=model.id,
            customer_id=model.customer_id,
            order_id=model.order_id,
            reason=model.reason,
            description=model.description,
            issue_date=model.issue_date,
            payment_method=model.payment_method,
            notes=model.notes,
            status=model.status or "pending",
            total_amount_ht=_decimal(model.total_amount_ht),
            total_amount_ttc=_decimal(model.total_amount_ttc),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

        if with_children:
            credit_note.items = [CreditNoteItemMapper.to_domain(item) for item in model.items]

        return credit_note

    @staticmethod
    def to_persistence(entity: CreditNote) -> CreditNoteModel:
        """Convert domain aggregate header to ORM model (items are written separately)."""
        model = CreditNoteModel(
            customer_id=entity.customer_id,
            order_id=entity.order_id,
            reason=entity.reason.strip(),
            description=entity.description,
            payment_method=entity.payment_method,
            notes=entity.notes,
            status=entity.status.value,
            total_amount_ht=entity.total_amount_ht,
            total_amount_ttc=entity.total_amount_ttc,
        )
        if entity.issue_date:
            model.issue_date = to_naive_utc(entity.issue_date)
        if entity.created_at:
            model.created_at = to_naive_utc(entity.created_at)
        return model
