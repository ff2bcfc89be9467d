"""Application DTOs for CreditNote operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from core.domain.entities import CreditNote, CreditNoteItem
from core.domain.enums import CreditNoteStatus
from core.domain.value_objects import Totals

from .base import CamelModel
from .order_dto import LineItemDTO


class CreditNoteItemDTO(LineItemDTO):
    """Refunded line as submitted by the back office."""

    def to_credit_note_item(self) -> CreditNoteItem:
        return CreditNoteItem(**self._line_fields())


class CreateCreditNoteRequest(CamelModel):
    """Request DTO for creating a credit note, optionally with items."""

    customer_id: Optional[int] = None
    order_id: Optional[int] = None
    reason: Optional[str] = None
    description: Optional[str] = None
    issue_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    total_amount_ht: Decimal = Field(Decimal("0"), alias="totalAmountHT")
    total_amount_ttc: Decimal = Field(Decimal("0"), alias="totalAmountTTC")
    items: List[CreditNoteItemDTO] = Field(default_factory=list)


class UpdateCreditNoteStatusRequest(CamelModel):
    # Plain string so unknown values reach the domain check
    status: str


class CreditNoteItemResponse(CamelModel):
    id: Optional[int] = None
    credit_note_id: Optional[int] = None
    product_id: int
    product_name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    quantity: int
    unit_price_ht: Decimal = Field(..., alias="unitPriceHT")
    unit_price_ttc: Decimal = Field(..., alias="unitPriceTTC")
    vat_rate: Decimal
    total_price_ht: Decimal = Field(..., alias="totalPriceHT")
    total_price_ttc: Decimal = Field(..., alias="totalPriceTTC")

    @classmethod
    def from_entity(cls, item: CreditNoteItem) -> "CreditNoteItemResponse":
        return cls(
            id=item.id,
            credit_note_id=item.credit_note_id,
            product_id=item.product_id,
            product_name=item.product_name,
            description=item.description,
            image_url=item.image_url,
            quantity=item.quantity,
            unit_price_ht=item.unit_price_ht,
            unit_price_ttc=item.unit_price_ttc,
            vat_rate=item.vat_rate,
            total_price_ht=item.total_price_ht,
            total_price_ttc=item.total_price_ttc,
        )


class CreditNoteResponse(CamelModel):
    """Response DTO for credit note details."""

    id: int
    customer_id: int
    order_id: int
    reason: str
    description: Optional[str] = None
    issue_date: Optional[datetime] = None
    payment_method: str
    notes: Optional[str] = None
    status: CreditNoteStatus
    total_amount_ht: Decimal = Field(..., alias="totalAmountHT")
    total_amount_ttc: Decimal = Field(..., alias="totalAmountTTC")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[CreditNoteItemResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(
        cls, credit_note: CreditNote, totals: Optional[Totals] = None
    ) -> "CreditNoteResponse":
        totals = totals or credit_note.stored_totals
        return cls(
            id=credit_note.id,
            customer_id=credit_note.customer_id,
            order_id=credit_note.order_id,
            reason=credit_note.reason,
            description=credit_note.description,
            issue_date=credit_note.issue_date,
            payment_method=credit_note.payment_method,
            notes=credit_note.notes,
            status=credit_note.status,
            total_amount_ht=totals.total_ht,
            total_amount_ttc=totals.total_ttc,
            created_at=credit_note.created_at,
            updated_at=credit_note.updated_at,
            items=[CreditNoteItemResponse.from_entity(item) for item in credit_note.items],
        )
