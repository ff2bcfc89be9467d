"""Domain enums."""

from .address_type import AddressType
from .credit_note_status import CreditNoteStatus
from .creation_stage import CreationStage

__all__ = ["AddressType", "CreationStage", "CreditNoteStatus"]
