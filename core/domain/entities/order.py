"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..enums import AddressType
from ..exceptions import ValidationError
from .base import (
    LineItemRules,
    ReconcilableHeader,
    coerce_money_fields,
    validate_header_amounts,
    validate_payment_method,
)


@dataclass
class OrderItem(LineItemRules):
    """Line item snapshotting the product at time of sale."""

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
    order_id: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        coerce_money_fields(self)


@dataclass
class OrderAddress:
    """Shipping or billing address snapshot attached to an order."""

    address_type: AddressType
    address_snapshot: Dict[str, Any]
    order_id: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not isinstance(self.address_type, AddressType):
            try:
                self.address_type = AddressType(self.address_type)
            except ValueError:
                raise ValidationError(f"invalid address type: {self.address_type}")


@dataclass
class Order(ReconcilableHeader):
    """
    Order aggregate root.

    The customer snapshot keeps name/email/phone as they were at order
    time, so history stays accurate when the customer record changes.
    Stored totals are a cache; use reconciled_totals() for money.
    """

    total_amount_ht: Decimal
    total_amount_ttc: Decimal
    payment_method: str
    customer_id: Optional[int] = None
    customer_snapshot: Optional[Dict[str, Any]] = None
    notes: str = ""
    delivered: bool = False
    payment_reference: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItem] = field(default_factory=list)
    addresses: List[OrderAddress] = field(default_factory=list)

    def __post_init__(self):
        coerce_money_fields(self)

    def validate(self) -> None:
        """
        Check header invariants before persisting.

        Raises:
            ValidationError: If customer identity, totals or payment method is invalid
        """
        if not self.customer_id and not self.customer_snapshot:
            raise ValidationError("customer identity required")

        validate_header_amounts(self.total_amount_ht, self.total_amount_ttc)
        validate_payment_method(self.payment_method)

    def address(self, address_type: AddressType) -> Optional[OrderAddress]:
        """First address of the given type, if any."""
        return next(
            (address for address in self.addresses if address.address_type == address_type),
            None,
        )
