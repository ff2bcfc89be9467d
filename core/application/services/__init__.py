"""Application services."""
from .order_service import OrderApplicationService
from .reconciliation_service import (
    ReconciledCreditNote,
    ReconciledOrder,
    ReconciliationService,
)

__all__ = [
    "OrderApplicationService",
    "ReconciledCreditNote",
    "ReconciledOrder",
    "ReconciliationService",
]
