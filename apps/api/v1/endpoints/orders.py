"""Order endpoints for REST API."""

import logging

from fastapi import APIRouter, Depends

from core.application.dtos import (
    CreateOrderFromCartRequest,
    OrderResponse,
    UpdateDeliveryStatusRequest,
)
from core.application.services import OrderApplicationService, ReconciliationService

from apps.api.deps import get_order_service, get_reconciliation_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/from-cart", response_model=OrderResponse, status_code=201)
async def create_order_from_cart(
    request: CreateOrderFromCartRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderResponse:
    """Create an order with its items and addresses from a cart.

    Replaying the same payment reference returns the original order.

    Args:
        request: CreateOrderFromCartRequest DTO
        service: OrderApplicationService instance

    Returns:
        OrderResponse with items and addresses
    """
    order = await service.create_order_from_cart(request)
    logger.info(f"Order {order.id} returned for payment reference {order.payment_reference}")
    return OrderResponse.from_entity(order, order.reconciled_totals())


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    service: ReconciliationService = Depends(get_reconciliation_service),
) -> OrderResponse:
    """Get order by ID, with totals recomputed from its items."""
    reconciled = await service.get_order_with_reconciled_totals(order_id)
    return OrderResponse.from_entity(reconciled.order, reconciled.totals)


@router.patch("/{order_id}/delivery", response_model=OrderResponse)
async def update_delivery_status(
    order_id: int,
    request: UpdateDeliveryStatusRequest,
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderResponse:
    """Set the delivered flag; money is reconciled from the items."""
    order = await service.update_delivery_status(order_id, request.delivered)
    return OrderResponse.from_entity(order, order.reconciled_totals())
