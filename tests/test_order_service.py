import logging
import re
from decimal import Decimal

import pytest

from storefront.data.models import OrderItemModel, OrderModel
from storefront.domain.enums import OrderStatus, PaymentStatus
from storefront.domain.errors import NotFoundError, StorefrontError, ValidationError
from storefront.domain.schemas import CheckoutIn, OrderUpdate
from storefront.services import order_service
from storefront.services.order_service import OrderService, generate_order_number


def _checkout(*lines, cart_code=None):
    return CheckoutIn(
        customer_name="Ada Obi",
        customer_email="ada@example.com",
        customer_phone="+2348000000000",
        shipping_city="Lagos",
        shipping_state="Lagos",
        payment_method="bank_transfer",
        cart_code=cart_code,
        items=[{"productId": pid, "quantity": qty} for pid, qty in lines],
    )


def test_generate_order_number_format():
    assert re.fullmatch(r"ORD-\d{8}-[A-Z0-9]{5}", generate_order_number())


def test_checkout_snapshots_current_prices(db, make_product, caplog):
    caplog.set_level(logging.INFO)
    a = make_product("PRD-001", price="5000.00")
    b = make_product("PRD-002", price="1200.00", stock=3)

    order = OrderService(db).checkout(_checkout((a.id, 2), (b.id, 3), cart_code="ed-1234"))

    assert order.total == Decimal("13600.00")
    assert order.status == OrderStatus.PENDING
    assert order.payment_status == "pending"
    assert order.cart_code == "ED-1234"
    assert [(i.product_number, i.quantity, i.price) for i in order.items] == [
        ("PRD-001", 2, Decimal("5000.00")),
        ("PRD-002", 3, Decimal("1200.00")),
    ]
    assert f"Order {order.order_number} received" in caplog.text


def test_checkout_rejects_empty_order(db):
    with pytest.raises(ValidationError):
        OrderService(db).checkout(_checkout())


def test_checkout_rejects_inactive_product(db, make_product):
    hidden = make_product("PRD-009", is_active=False)
    with pytest.raises(ValidationError, match="not available"):
        OrderService(db).checkout(_checkout((hidden.id, 1)))


def test_checkout_rejects_quantity_over_stock(db, make_product):
    few = make_product("PRD-003", stock=2)
    with pytest.raises(ValidationError, match="Only 2"):
        OrderService(db).checkout(_checkout((few.id, 3)))
    assert db.query(OrderModel).count() == 0


def test_update_order_status_and_payment(db, product):
    svc = OrderService(db)
    order = svc.checkout(_checkout((product.id, 1)))

    shipped = svc.update_order(OrderUpdate(id=order.id, status=OrderStatus.SHIPPED))
    assert shipped.status == OrderStatus.SHIPPED
    assert shipped.payment_status == "pending"

    paid = svc.update_order(OrderUpdate(id=order.id, payment_status=PaymentStatus.PAID))
    assert paid.status == OrderStatus.SHIPPED
    assert paid.payment_status == "paid"


def test_update_order_ignores_other_fields(db, product):
    svc = OrderService(db)
    order = svc.checkout(_checkout((product.id, 1)))

    updated = svc.update_order(
        OrderUpdate.model_validate({"id": order.id, "status": "delivered", "total": 1, "customerName": "Eve"})
    )

    assert updated.status == OrderStatus.DELIVERED
    assert updated.total == order.total
    assert updated.customer_name == "Ada Obi"


def test_update_unknown_order(db):
    with pytest.raises(NotFoundError):
        OrderService(db).update_order(OrderUpdate(id=404, status=OrderStatus.CANCELLED))


def test_list_orders_newest_first(db, product):
    svc = OrderService(db)
    first = svc.checkout(_checkout((product.id, 1)))
    second = svc.checkout(_checkout((product.id, 2)))

    assert [o.id for o in svc.list_orders()] == [second.id, first.id]


def test_order_number_collision_on_insert_is_retried(db, product):
    numbers = iter(["ORD-20260101-AAAAA", "ORD-20260101-AAAAA", "ORD-20260101-BBBBB"])
    svc = OrderService(db, number_generator=lambda: next(numbers))

    first = svc.checkout(_checkout((product.id, 1)))
    second = svc.checkout(_checkout((product.id, 2)))

    assert first.order_number == "ORD-20260101-AAAAA"
    assert second.order_number == "ORD-20260101-BBBBB"
    assert second.items[0].quantity == 2
    assert db.query(OrderModel).count() == 2
    # the rejected insert left no lines behind
    assert db.query(OrderItemModel).count() == 2


def test_checkout_gives_up_when_every_number_is_taken(db, product, monkeypatch):
    monkeypatch.setattr(order_service, "ORDER_NUMBER_MAX_ATTEMPTS", 3)
    svc = OrderService(db, number_generator=lambda: "ORD-20260101-AAAAA")
    svc.checkout(_checkout((product.id, 1)))

    with pytest.raises(StorefrontError, match="order number"):
        svc.checkout(_checkout((product.id, 1)))
    assert db.query(OrderModel).count() == 1
