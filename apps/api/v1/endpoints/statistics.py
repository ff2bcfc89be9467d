"""Revenue statistics and year export endpoints."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from core.application.dtos import StatisticsDTO
from core.application.services import ReconciliationService
from core.domain.value_objects import RevenueFilter

from apps.api.deps import get_reconciliation_service

router = APIRouter(tags=["statistics"])


@router.get("/statistics", response_model=StatisticsDTO)
async def get_statistics(
    customer_id: Optional[int] = Query(None, alias="customerId"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    year: Optional[int] = Query(None),
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> StatisticsDTO:
    """Net revenue (orders minus credit notes), floored at zero.

    Args:
        customer_id: Restrict to one customer
        start_date: Inclusive lower bound on creation time
        end_date: Inclusive upper bound on creation time
        year: Calendar year (UTC)
    """
    criteria = RevenueFilter(
        customer_id=customer_id,
        start_date=start_date,
        end_date=end_date,
        year=year,
    )
    return await service.get_order_statistics(criteria)


@router.get("/exports/{year}")
async def get_year_export(
    year: int,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> Dict[str, List[Dict[str, Any]]]:
    """Orders and credit notes of a calendar year, with reconciled totals."""
    return await service.get_year_export_data(year)
