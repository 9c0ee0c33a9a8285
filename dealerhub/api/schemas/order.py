"""
Order request/response schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from ...db.models import OrderStatus, PaymentMethod, PaymentStatus


class OrderCreateRequest(BaseModel):
    """Request schema for placing an order."""

    product_id: int = Field(..., gt=0, description="Catalog entry being bought")
    quantity: int = Field(..., ge=1, description="Number of items")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Agreed price")
    payment_method: PaymentMethod
    notes: Optional[str] = None
    delivery_date: Optional[datetime] = None
    transaction_id: Optional[str] = Field(None, max_length=255)


class OrderStatusUpdateRequest(BaseModel):
    order_status: OrderStatus = Field(..., description="New order status")


class OrderResponse(BaseModel):
    order_id: int
    customer_id: int
    product_id: Optional[int] = None
    quantity: int
    price: Decimal
    order_date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    transaction_id: Optional[str] = None
    order_status: OrderStatus
    tracking_number: Optional[str] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class OrderEnvelope(BaseModel):
    """Mutation response: a message plus the order as stored."""

    message: str
    order: OrderResponse
