"""Application DTOs for revenue statistics and year-end export."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, PlainSerializer

from core.domain.entities import CreditNote, Order
from core.domain.value_objects import Totals

from .base import CamelModel


class StatisticsDTO(CamelModel):
    """Net revenue: orders minus credit notes, floored at zero."""

    total_amount_ht: Decimal = Field(..., alias="totalAmountHT")
    total_amount_ttc: Decimal = Field(..., alias="totalAmountTTC")


# =============================================================================
# EXPORT RECORDS
# =============================================================================
# camelCase like the gateway DTOs; the PDF/accounting exporters read
# totalAmountHT / totalAmountTTC as JSON numbers.

ExportAmount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ExportLineItem(CamelModel):
    id: Optional[int] = None
    product_id: int
    product_name: str
    quantity: int
    unit_price_ht: ExportAmount = Field(..., alias="unitPriceHT")
    unit_price_ttc: ExportAmount = Field(..., alias="unitPriceTTC")
    vat_rate: ExportAmount
    total_price_ht: ExportAmount = Field(..., alias="totalPriceHT")
    total_price_ttc: ExportAmount = Field(..., alias="totalPriceTTC")

    @classmethod
    def from_entity(cls, item: Any) -> "ExportLineItem":
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price_ht=item.unit_price_ht,
            unit_price_ttc=item.unit_price_ttc,
            vat_rate=item.vat_rate,
            total_price_ht=item.total_price_ht,
            total_price_ttc=item.total_price_ttc,
        )


class ExportAddress(CamelModel):
    id: Optional[int] = None
    address_type: str
    address_snapshot: Dict[str, Any]


class OrderExportRecord(CamelModel):
    """Denormalized order with reconciled totals."""

    id: int
    customer_id: Optional[int] = None
    customer_snapshot: Optional[Dict[str, Any]] = None
    total_amount_ht: ExportAmount = Field(..., alias="totalAmountHT")
    total_amount_ttc: ExportAmount = Field(..., alias="totalAmountTTC")
    payment_method: str
    notes: str = ""
    delivered: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[ExportLineItem] = Field(default_factory=list)
    addresses: List[ExportAddress] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, order: Order, totals: Totals) -> "OrderExportRecord":
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            customer_snapshot=order.customer_snapshot,
            total_amount_ht=totals.total_ht,
            total_amount_ttc=totals.total_ttc,
            payment_method=order.payment_method,
            notes=order.notes,
            delivered=order.delivered,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[ExportLineItem.from_entity(item) for item in order.items],
            addresses=[
                ExportAddress(
                    id=address.id,
                    address_type=address.address_type.value,
                    address_snapshot=address.address_snapshot,
                )
                for address in order.addresses
            ],
        )


class CreditNoteExportRecord(CamelModel):
    """Denormalized credit note with reconciled totals."""

    id: int
    customer_id: int
    order_id: int
    reason: str
    description: Optional[str] = None
    issue_date: Optional[datetime] = None
    payment_method: str
    status: str
    total_amount_ht: ExportAmount = Field(..., alias="totalAmountHT")
    total_amount_ttc: ExportAmount = Field(..., alias="totalAmountTTC")
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[ExportLineItem] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, credit_note: CreditNote, totals: Totals) -> "CreditNoteExportRecord":
        return cls(
            id=credit_note.id,
            customer_id=credit_note.customer_id,
            order_id=credit_note.order_id,
            reason=credit_note.reason,
            description=credit_note.description,
            issue_date=credit_note.issue_date,
            payment_method=credit_note.payment_method,
            status=credit_note.status.value,
            total_amount_ht=totals.total_ht,
            total_amount_ttc=totals.total_ttc,
            notes=credit_note.notes,
            created_at=credit_note.created_at,
            updated_at=credit_note.updated_at,
            items=[ExportLineItem.from_entity(item) for item in credit_note.items],
        )


class YearExportDTO(CamelModel):
    """Everything booked during one calendar year."""

    orders: List[OrderExportRecord] = Field(default_factory=list)
    credit_notes: List[CreditNoteExportRecord] = Field(default_factory=list)
