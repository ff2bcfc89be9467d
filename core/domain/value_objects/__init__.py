"""Domain value objects."""

from .filters import RevenueFilter, to_naive_utc, year_bounds
from .money import (
    Totals,
    calculate_totals_from_items,
    net_amount,
    reconcile_totals,
    round2,
    to_decimal,
)

__all__ = [
    "RevenueFilter",
    "Totals",
    "calculate_totals_from_items",
    "net_amount",
    "reconcile_totals",
    "round2",
    "to_decimal",
    "to_naive_utc",
    "year_bounds",
]
