"""
Order Service
Checkout orders and their status changes, always resolved by (order id,
customer id) so another customer's order is indistinguishable from a missing one.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from ...db.models import Order, OrderStatus, PaymentMethod
from ...db.repositories import OrderRepository, ProductRepository
from ..errors import ResourceNotFoundError

logger = logging.getLogger(__name__)


class OrderService:
    """Order state-transition controller."""

    def __init__(self, session: Session):
        self.session = session
        self.orders = OrderRepository(session)
        self.products = ProductRepository(session)

    def create(
        self,
        customer_id: int,
        product_id: int,
        quantity: int,
        price: Union[Decimal, float],
        payment_method: PaymentMethod,
        notes: Optional[str] = None,
        delivery_date: Optional[datetime] = None,
        transaction_id: Optional[str] = None,
    ) -> Order:
        """Place an order for a listed product. Status starts at Pending."""
        if self.products.get(product_id) is None:
            raise ResourceNotFoundError("Product", product_id)

        order = self.orders.add(
            Order(
                customer_id=customer_id,
                product_id=product_id,
                quantity=quantity,
                price=price,
                payment_method=payment_method,
                notes=notes,
                delivery_date=delivery_date,
                transaction_id=transaction_id,
            )
        )
        self.session.commit()

        logger.info(f"Order {order.order_id} created by user {customer_id} for product {product_id}")
        return order

    def list_for(self, customer_id: int) -> List[Order]:
        return self.orders.list_for_customer(customer_id)

    def get(self, order_id: int, customer_id: int) -> Order:
        order = self.orders.get_owned(order_id, customer_id)
        if order is None:
            raise ResourceNotFoundError("Order", order_id)
        return order

    def update_status(self, order_id: int, customer_id: int, new_status: OrderStatus) -> Order:
        """
        Overwrite the order status.

        Any member of OrderStatus is accepted; no forward-only graph is enforced.
        """
        order = self.get(order_id, customer_id)
        previous = order.order_status
        order.order_status = OrderStatus(new_status)
        self.session.commit()

        logger.info(f"Order {order_id} status {previous} -> {order.order_status}")
        return order

    def cancel(self, order_id: int, customer_id: int) -> Order:
        """Move the order to Canceled from any state."""
        order = self.get(order_id, customer_id)
        order.order_status = OrderStatus.CANCELED
        self.session.commit()

        logger.info(f"Order {order_id} canceled by user {customer_id}")
        return order
