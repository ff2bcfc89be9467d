"""
Credit note aggregate root.

A credit note references (does not own) an order.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ..enums import CreditNoteStatus
from ..exceptions import ValidationError
from .base import (
    LineItemRules,
    ReconcilableHeader,
    coerce_money_fields,
    validate_header_amounts,
    validate_payment_method,
)


def parse_credit_note_status(status) -> CreditNoteStatus:
    """
    Parse a raw status value.

    Raises:
        ValidationError: If status is not pending/refunded
    """
    if isinstance(status, CreditNoteStatus):
        return status
    try:
        return CreditNoteStatus(status)
    except ValueError:
        raise ValidationError(
            f"invalid credit note status: {status!r} "
            f"(expected one of {[s.value for s in CreditNoteStatus]})"
        )


@dataclass
class CreditNoteItem(LineItemRules):
    """Refunded line; same shape as an order item."""

    product_id: int
    product_name: str
    quantity: int
    unit_price_ht: Decimal
    unit_price_ttc: Decimal
    vat_rate: Decimal
    total_price_ht: Decimal
    total_price_ttc: Decimal
    description: Optional[str] = None
    image_url: Optional[str] = None
    credit_note_id: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        coerce_money_fields(self)


@dataclass
class CreditNote(ReconcilableHeader):
    """Refund document issued against an order."""

    customer_id: int
    order_id: int
    reason: str
    total_amount_ht: Decimal
    total_amount_ttc: Decimal
    payment_method: str
    description: Optional[str] = None
    issue_date: Optional[datetime] = None
    notes: Optional[str] = None
    status: CreditNoteStatus = CreditNoteStatus.PENDING
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[CreditNoteItem] = field(default_factory=list)

    def __post_init__(self):
        coerce_money_fields(self)
        self.status = parse_credit_note_status(self.status)

    def validate(self) -> None:
        """
        Check header invariants before persisting.

        Raises:
            ValidationError: On the first violated rule
        """
        if not self.customer_id or self.customer_id <= 0:
            raise ValidationError("customer identity required")

        if not self.order_id or self.order_id <= 0:
            raise ValidationError("order reference required")

        if not self.reason or not self.reason.strip():
            raise ValidationError("reason required")

        validate_header_amounts(self.total_amount_ht, self.total_amount_ttc)
        validate_payment_method(self.payment_method)

    def change_status(self, new_status) -> CreditNoteStatus:
        """
        Business rule: pending -> refunded is the only transition.

        Args:
            new_status: Raw or enum status

        Returns:
            Parsed new status

        Raises:
            ValidationError: If the status is unknown or the transition is illegal
        """
        target = parse_credit_note_status(new_status)

        if not self.status.can_transition_to(target):
            raise ValidationError(
                f"cannot change credit note status from {self.status.value} to {target.value}"
            )

        self.status = target
        return target
