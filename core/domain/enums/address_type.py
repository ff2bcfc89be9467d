"""
Address Type Enum.

Kinds of address snapshots attached to an order.
"""
from enum import Enum


class AddressType(str, Enum):
    """Order address types."""

    SHIPPING = "shipping"
    BILLING = "billing"
