"""Credit note endpoints for REST API."""

from fastapi import APIRouter, Depends

from core.application.dtos import (
    CreateCreditNoteRequest,
    CreditNoteResponse,
    UpdateCreditNoteStatusRequest,
)
from core.application.services import OrderApplicationService, ReconciliationService

from apps.api.deps import get_order_service, get_reconciliation_service

router = APIRouter(prefix="/credit-notes", tags=["credit-notes"])


@router.post("", response_model=CreditNoteResponse, status_code=201)
async def create_credit_note(
    request: CreateCreditNoteRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> CreditNoteResponse:
    """Create a credit note, with its items if any.

    Args:
        request: CreateCreditNoteRequest DTO
        service: OrderApplicationService instance

    Returns:
        CreditNoteResponse
    """
    credit_note = await service.create_credit_note(request)
    return CreditNoteResponse.from_entity(credit_note, credit_note.reconciled_totals())


@router.get("/{credit_note_id}", response_model=CreditNoteResponse)
async def get_credit_note(
    credit_note_id: int,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> CreditNoteResponse:
    reconciled = await service.get_credit_note_with_reconciled_totals(credit_note_id)
    return CreditNoteResponse.from_entity(reconciled.credit_note, reconciled.totals)


@router.patch("/{credit_note_id}/status", response_model=CreditNoteResponse)
async def update_credit_note_status(
    credit_note_id: int,
    request: UpdateCreditNoteStatusRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> CreditNoteResponse:
    """Move a credit note from pending to refunded."""
    credit_note = await service.update_credit_note_status(credit_note_id, request.status)
    return CreditNoteResponse.from_entity(credit_note, credit_note.reconciled_totals())
