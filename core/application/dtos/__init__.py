"""Application DTOs."""

from .credit_note_dto import (
    CreateCreditNoteRequest,
    CreditNoteItemDTO,
    CreditNoteItemResponse,
    CreditNoteResponse,
    UpdateCreditNoteStatusRequest,
)
from .order_dto import (
    AddressDataDTO,
    CartDTO,
    CreateOrderFromCartRequest,
    CustomerDataDTO,
    LineItemDTO,
    OrderAddressResponse,
    OrderItemResponse,
    OrderResponse,
    UpdateDeliveryStatusRequest,
)
from .statistics_dto import (
    CreditNoteExportRecord,
    OrderExportRecord,
    StatisticsDTO,
    YearExportDTO,
)

__all__ = [
    "AddressDataDTO",
    "CartDTO",
    "CreateCreditNoteRequest",
    "CreateOrderFromCartRequest",
    "CreditNoteExportRecord",
    "CreditNoteItemDTO",
    "CreditNoteItemResponse",
    "CreditNoteResponse",
    "CustomerDataDTO",
    "LineItemDTO",
    "OrderAddressResponse",
    "OrderExportRecord",
    "OrderItemResponse",
    "OrderResponse",
    "StatisticsDTO",
    "UpdateCreditNoteStatusRequest",
    "UpdateDeliveryStatusRequest",
    "YearExportDTO",
]
