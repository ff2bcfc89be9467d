"""
Shared invariants for headers and line items.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from decimal import Decimal
from typing import Any, Optional

from ..exceptions import ValidationError
from ..value_objects import Totals, reconcile_totals, to_decimal

MONEY_FIELDS = (
    "unit_price_ht",
    "unit_price_ttc",
    "vat_rate",
    "total_price_ht",
    "total_price_ttc",
    "total_amount_ht",
    "total_amount_ttc",
)


def coerce_money_fields(entity: Any) -> None:
    """Convert every money field present on a dataclass entity to Decimal."""
    for name in MONEY_FIELDS:
        if hasattr(entity, name):
            value = getattr(entity, name)
            if not isinstance(value, Decimal):
                object.__setattr__(entity, name, to_decimal(value))


def validate_header_amounts(total_ht: Decimal, total_ttc: Decimal) -> None:
    """Enforce total_ttc >= total_ht >= 0."""
    if total_ht < 0:
        raise ValidationError("total amount HT must be non-negative")
    if total_ttc < 0:
        raise ValidationError("total amount TTC must be non-negative")
    if total_ttc < total_ht:
        raise ValidationError("total amount TTC must be greater than or equal to total amount HT")


def validate_payment_method(payment_method: Optional[str]) -> None:
    if not payment_method or not payment_method.strip():
        raise ValidationError("payment method required")


class LineItemRules:
    """
    Invariants shared by order items and credit note items.

    Line totals are stored as supplied: total_price_ht is NOT checked
    against unit_price_ht * quantity.
    """

    product_id: Optional[int]
    product_name: Optional[str]
    quantity: Optional[int]
    unit_price_ht: Decimal
    unit_price_ttc: Decimal
    total_price_ht: Decimal
    total_price_ttc: Decimal

    def validate(self) -> None:
        """
        Check sale-time invariants.

        Raises:
            ValidationError: On the first violated rule
        """
        if self.product_id is None or self.product_id <= 0:
            raise ValidationError("product reference required")

        # The name snapshot must outlive catalog renames and deletions
        if not self.product_name or not self.product_name.strip():
            raise ValidationError("product name required")

        if self.quantity is None or self.quantity <= 0:
            raise ValidationError("quantity must be positive")

        if self.unit_price_ht < 0:
            raise ValidationError("unit price HT must be non-negative")

        if self.unit_price_ttc < self.unit_price_ht:
            raise ValidationError("unit price TTC must be greater than or equal to unit price HT")

    @property
    def line_totals(self) -> Totals:
        return Totals(total_ht=self.total_price_ht, total_ttc=self.total_price_ttc)


class ReconcilableHeader:
    """Header whose stored totals are a cache over its items."""

    total_amount_ht: Decimal
    total_amount_ttc: Decimal
    items: list

    @property
    def stored_totals(self) -> Totals:
        return Totals(total_ht=self.total_amount_ht, total_ttc=self.total_amount_ttc)

    def reconciled_totals(self) -> Totals:
        """Totals recomputed from items, stored totals when there are none."""
        return reconcile_totals(self.items, self.total_amount_ht, self.total_amount_ttc)
