"""
Tests for order placement and customer-scoped status changes.
"""

from decimal import Decimal

import pytest

from conftest import add_products
from dealerhub.api.errors import ResourceNotFoundError
from dealerhub.api.services.orders import OrderService
from dealerhub.db.models import OrderStatus, PaymentMethod, PaymentStatus


@pytest.fixture
def service(db_session):
    return OrderService(db_session)


@pytest.fixture
def order(service, db_session, seller, buyer):
    (product,) = add_products(db_session, seller, ["S1"])
    return service.create(buyer.id, product.id, 1, Decimal("14500.00"), PaymentMethod.CREDIT_CARD)


def test_create_defaults(order, buyer):
    assert order.order_id is not None
    assert order.customer_id == buyer.id
    assert order.order_status == OrderStatus.PENDING
    assert order.payment_status == PaymentStatus.PENDING
    assert order.price == Decimal("14500.00")


def test_create_for_missing_product(service, buyer):
    with pytest.raises(ResourceNotFoundError):
        service.create(buyer.id, 999, 1, 10, PaymentMethod.COD)


def test_listing_is_per_customer(service, order, seller, buyer):
    assert [o.order_id for o in service.list_for(buyer.id)] == [order.order_id]
    assert service.list_for(seller.id) == []


def test_other_customer_sees_nothing(service, order, seller):
    with pytest.raises(ResourceNotFoundError):
        service.get(order.order_id, seller.id)
    with pytest.raises(ResourceNotFoundError):
        service.cancel(order.order_id, seller.id)
    with pytest.raises(ResourceNotFoundError):
        service.update_status(order.order_id, seller.id, OrderStatus.SHIPPED)


def test_status_overwrite(service, order, buyer):
    service.update_status(order.order_id, buyer.id, OrderStatus.SHIPPED)
    updated = service.update_status(order.order_id, buyer.id, "Confirmed")

    assert updated.order_status == OrderStatus.CONFIRMED


def test_cancel_from_any_state(service, order, buyer):
    service.update_status(order.order_id, buyer.id, OrderStatus.DELIVERED)

    canceled = service.cancel(order.order_id, buyer.id)

    assert canceled.order_status == OrderStatus.CANCELED
    assert service.get(order.order_id, buyer.id).order_status == OrderStatus.CANCELED
