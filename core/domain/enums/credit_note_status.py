"""
Credit Note Status Enum.

Refund lifecycle of a credit note.
"""
from enum import Enum


class CreditNoteStatus(str, Enum):
    """Credit note status values."""

    PENDING = "pending"
    REFUNDED = "refunded"

    def can_transition_to(self, new_status: "CreditNoteStatus") -> bool:
        """Only pending -> refunded is a real change; same status is a no-op."""
        if new_status == self:
            return True
        return self == CreditNoteStatus.PENDING and new_status == CreditNoteStatus.REFUNDED
