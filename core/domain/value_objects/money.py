"""
Monetary helpers for HT (pre-tax) and TTC (tax-included) amounts.

CRITICAL: Always use Decimal, never float!

Every helper here is pure: degenerate input (None, garbage strings, NaN)
normalizes to zero instead of raising.
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

ZERO = Decimal("0")
TWO_PLACES = Decimal("0.01")

# snake_case attribute -> camelCase key used by gateway payloads
_CAMEL_KEYS = {
    "total_price_ht": "totalPriceHT",
    "total_price_ttc": "totalPriceTTC",
}


@dataclass(frozen=True)
class Totals:
    """Pair of HT/TTC amounts."""

    total_ht: Decimal
    total_ttc: Decimal

    def rounded(self) -> "Totals":
        """Return a copy rounded to 2 decimals."""
        return Totals(total_ht=round2(self.total_ht), total_ttc=round2(self.total_ttc))

    def __sub__(self, other: "Totals") -> "Totals":
        return Totals(
            total_ht=self.total_ht - other.total_ht,
            total_ttc=self.total_ttc - other.total_ttc,
        )

    def __add__(self, other: "Totals") -> "Totals":
        return Totals(
            total_ht=self.total_ht + other.total_ht,
            total_ttc=self.total_ttc + other.total_ttc,
        )

    @classmethod
    def zero(cls) -> "Totals":
        return cls(total_ht=ZERO, total_ttc=ZERO)


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a value to Decimal.

    Args:
        value: int, float, str, Decimal or None

    Returns:
        Decimal value, or 0 for None / unparsable / NaN / infinite input
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError):
            return ZERO

    if not amount.is_finite():
        return ZERO

    return amount


def round2(value: Any) -> Decimal:
    """Round to exactly 2 decimals, ties rounded up (away from zero)."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _line_amount(item: Any, field_name: str) -> Decimal:
    """Read a line total from an entity, ORM row or mapping."""
    if isinstance(item, Mapping):
        value = item.get(field_name)
        if value is None:
            value = item.get(_CAMEL_KEYS[field_name])
        return to_decimal(value)

    return to_decimal(getattr(item, field_name, None))


def calculate_totals_from_items(
    items: Optional[Iterable[Any]],
    fallback_ht: Any = 0,
    fallback_ttc: Any = 0,
) -> Totals:
    """
    Sum line totals across items.

    Args:
        items: Objects exposing total_price_ht/total_price_ttc (or mappings)
        fallback_ht: Returned as HT when there are no items
        fallback_ttc: Returned as TTC when there are no items

    Returns:
        Unrounded Totals
    """
    lines = list(items) if items else []

    if not lines:
        return Totals(total_ht=to_decimal(fallback_ht), total_ttc=to_decimal(fallback_ttc))

    total_ht = sum((_line_amount(line, "total_price_ht") for line in lines), ZERO)
    total_ttc = sum((_line_amount(line, "total_price_ttc") for line in lines), ZERO)

    return Totals(total_ht=total_ht, total_ttc=total_ttc)


def reconcile_totals(
    items: Optional[Iterable[Any]],
    stored_ht: Any,
    stored_ttc: Any,
) -> Totals:
    """
    Authoritative totals for a header.

    Item sums win whenever items exist; the stored header columns are only
    used for item-less headers.
    """
    return calculate_totals_from_items(items, stored_ht, stored_ttc).rounded()


def net_amount(gross: Any, deduction: Any) -> Decimal:
    """Gross minus deduction, rounded and floored at zero."""
    amount = round2(to_decimal(gross) - to_decimal(deduction))
    return amount if amount > ZERO else round2(ZERO)
