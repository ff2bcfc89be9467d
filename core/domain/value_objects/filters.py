"""Filters for revenue queries."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC; convert aware values, keep naive ones."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def year_bounds(year: int) -> Tuple[datetime, datetime]:
    """
    Half-open [start, end) range covering a calendar year.

    Timestamps are stored as naive UTC, so the bounds are naive UTC too.
    """
    return datetime(year, 1, 1), datetime(year + 1, 1, 1)


@dataclass(frozen=True)
class RevenueFilter:
    """Criteria shared by order and credit note statistics."""

    customer_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    year: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "start_date", to_naive_utc(self.start_date))
        object.__setattr__(self, "end_date", to_naive_utc(self.end_date))
