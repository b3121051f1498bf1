"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json
from datetime import UTC, datetime

import pytest
from ordering.cart.cart import ShoppingCart
from ordering.cart.events import CartCheckedOut, CartCouponApplied, CartItemAdded, CartItemRemoved
from ordering.order.events import OrderCancelled, OrderPlaced, OrderStageChanged
from ordering.order.order import Order
from protean.exceptions import ValidationError
from protean.testing import given as given_
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup in Then steps
_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderStageChanged": OrderStageChanged,
    "OrderCancelled": OrderCancelled,
}

_CART_EVENT_CLASSES = {
    "CartItemAdded": CartItemAdded,
    "CartItemRemoved": CartItemRemoved,
    "CartCouponApplied": CartCouponApplied,
    "CartCheckedOut": CartCheckedOut,
}


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def order_id():
    return "ord-001"


@pytest.fixture()
def customer_id():
    return "user-001"


@pytest.fixture()
def error():
    """Container for captured validation errors (used by cart tests)."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Event fixtures (past tense: what happened)
# ---------------------------------------------------------------------------
@pytest.fixture()
def order_placed(order_id, customer_id):
    return OrderPlaced(
        order_id=order_id,
        customer_id=customer_id,
        customer=json.dumps({"name": "Jane Doe", "email": "jane@example.com"}),
        shipping_address=json.dumps({"street": "1 Main St", "city": "Springfield"}),
        products=json.dumps(
            [
                {
                    "id": "line-1",
                    "product_id": "1",
                    "name": "Backpack",
                    "price": 100.0,
                    "quantity": 1,
                }
            ]
        ),
        subtotal=100.0,
        discount=0.0,
        tax=18.0,
        shipping=0.0,
        total_price=118.0,
        currency="USD",
        payment_method="cod",
        payment_status="pending",
        placed_at=datetime.now(UTC),
    )


def _stage_changed(order_id, previous_stage, stage):
    return OrderStageChanged(
        order_id=order_id,
        previous_stage=previous_stage,
        stage=stage,
        changed_by="admin",
        changed_at=datetime.now(UTC),
    )


# ---------------------------------------------------------------------------
# Given steps: Order (event sourcing via protean.testing)
# ---------------------------------------------------------------------------
@given("an order was placed", target_fixture="order")
def _(order_placed):
    return given_(Order, order_placed)


@given(parsers.cfparse('the order moved from "{previous}" to "{stage}"'), target_fixture="order")
def _(order, order_id, previous, stage):
    return order.after(_stage_changed(order_id, previous, stage))


@given("the order was cancelled", target_fixture="order")
def _(order, order_id):
    return order.after(
        OrderCancelled(
            order_id=order_id,
            previous_stage="PLACED",
            reason="Changed my mind",
            cancelled_by="customer",
            cancelled_at=datetime.now(UTC),
        )
    )


# ---------------------------------------------------------------------------
# Given steps: Cart
# ---------------------------------------------------------------------------
@given("an active cart", target_fixture="cart")
def active_cart(customer_id):
    cart = ShoppingCart.create(customer_id=customer_id)
    cart._events.clear()
    return cart


@given(parsers.cfparse('the cart has {quantity:d} of product "{product_id}" at {price:f}'), target_fixture="cart")
def cart_with_item(cart, quantity, product_id, price):
    cart.add_item(product_id=product_id, title=f"Product {product_id}", price=price, quantity=quantity)
    cart._events.clear()
    return cart


# ---------------------------------------------------------------------------
# Then steps: Order
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order stage is "{stage}"'))
def _(order, stage):
    assert order.stage == stage


@then("the order action fails with a validation error")
def _(order):
    assert order.rejected
    assert isinstance(order.rejection, ValidationError)


@then(parsers.cfparse("an {event_type} order event is raised"))
def _(order, event_type):
    assert _ORDER_EVENT_CLASSES[event_type] in order.events


@then(parsers.cfparse("the order history has {count:d} entries"))
def _(order, count):
    assert len(order.status_history) == count


# ---------------------------------------------------------------------------
# Then steps: Cart
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the cart status is "{status}"'))
def _(cart, status):
    assert cart.status == status


@then(parsers.cfparse("the cart badge shows {count:d}"))
def _(cart, count):
    assert cart.item_count == count


@then(parsers.cfparse("a {event_type} cart event is raised"))
def _(cart, event_type):
    event_cls = _CART_EVENT_CLASSES[event_type]
    assert any(isinstance(e, event_cls) for e in cart._events)


@then(parsers.cfparse('the cart action fails with "{message}"'))
def _(error, message):
    assert error["exc"] is not None
    assert message in str(error["exc"])
