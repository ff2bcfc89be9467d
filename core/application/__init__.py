"""Application layer - services and DTOs."""

from .dtos import (
    CreateCreditNoteRequest,
    CreateOrderFromCartRequest,
    CreditNoteResponse,
    OrderResponse,
    StatisticsDTO,
)
from .services import (
    OrderApplicationService,
    ReconciledCreditNote,
    ReconciledOrder,
    ReconciliationService,
)

__all__ = [
    # DTOs
    "CreateCreditNoteRequest",
    "CreateOrderFromCartRequest",
    "CreditNoteResponse",
    "OrderResponse",
    "StatisticsDTO",
    # Services
    "OrderApplicationService",
    "ReconciledCreditNote",
    "ReconciledOrder",
    "ReconciliationService",
]
