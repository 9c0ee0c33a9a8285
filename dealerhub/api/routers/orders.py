"""
Order routes.
All operations act on the caller's own orders only.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from ..dependencies import get_current_actor_id, get_order_service
from ..schemas.order import (
    OrderCreateRequest,
    OrderEnvelope,
    OrderResponse,
    OrderStatusUpdateRequest,
)
from ..services import OrderService

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post("", response_model=OrderEnvelope, status_code=status.HTTP_201_CREATED)
async def create_order(
    request: OrderCreateRequest,
    actor_id: int = Depends(get_current_actor_id),
    service: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    """Place an order as the authenticated customer."""
    order = service.create(customer_id=actor_id, **request.model_dump())
    return OrderEnvelope(
        message="Order created successfully", order=OrderResponse.model_validate(order)
    )


@router.get("", response_model=List[OrderResponse])
async def list_orders(
    actor_id: int = Depends(get_current_actor_id),
    service: OrderService = Depends(get_order_service),
) -> List[OrderResponse]:
    return [OrderResponse.model_validate(o) for o in service.list_for(actor_id)]


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    actor_id: int = Depends(get_current_actor_id),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.model_validate(service.get(order_id, actor_id))


@router.put("/{order_id}/status", response_model=OrderEnvelope)
async def update_order_status(
    order_id: int,
    request: OrderStatusUpdateRequest,
    actor_id: int = Depends(get_current_actor_id),
    service: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    order = service.update_status(order_id, actor_id, request.order_status)
    return OrderEnvelope(
        message="Order status updated successfully", order=OrderResponse.model_validate(order)
    )


@router.delete("/{order_id}", response_model=OrderEnvelope)
async def cancel_order(
    order_id: int,
    actor_id: int = Depends(get_current_actor_id),
    service: OrderService = Depends(get_order_service),
) -> OrderEnvelope:
    """Cancel an order. The row is kept with status Canceled."""
    order = service.cancel(order_id, actor_id)
    return OrderEnvelope(
        message="Order canceled successfully", order=OrderResponse.model_validate(order)
    )
