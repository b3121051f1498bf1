"""Tests for the event-sourced Order aggregate: placement, stage changes and cancellation."""

import pytest
from ordering.order.events import OrderCancelled, OrderPlaced, OrderStageChanged
from ordering.order.order import Order, PaymentStatus
from ordering.order.stages import OrderStage
from protean.exceptions import ValidationError

PRODUCTS = [
    {"product_id": "1", "name": "Backpack", "price": 109.95, "quantity": 1, "image": "bag.png"},
    {"product_id": "2", "name": "T-Shirt", "price": 22.3, "quantity": 2},
]
PRICING = {"subtotal": 154.55, "discount": 0.0, "tax": 27.82, "shipping": 0.0, "total_price": 182.37}


def _make_order(**overrides):
    fields = {
        "customer_id": "user-001",
        "products": PRODUCTS,
        "pricing": PRICING,
        "customer": {"name": "Jane Doe", "email": "jane@example.com"},
        "shipping_address": {"street": "1 Main St", "city": "Springfield"},
    }
    fields.update(overrides)
    return Order.place(**fields)


def _advance(order, *stages):
    for stage in stages:
        order.change_stage(stage)
    order._events.clear()
    return order


class TestPlace:
    def test_initial_state(self):
        order = _make_order()
        assert order.stage == OrderStage.PLACED.value
        assert order.customer_id == "user-001"
        assert order.total_price == 182.37
        assert order.payment_method == "cod"
        assert order.payment_status == PaymentStatus.PENDING
        assert order.customer.name == "Jane Doe"
        assert order.shipping_address.city == "Springfield"

    def test_lines_are_snapshotted(self):
        order = _make_order()
        assert len(order.products) == 2
        assert order.item_count == 3
        assert {line.name for line in order.products} == {"Backpack", "T-Shirt"}

    def test_history_starts_with_placement(self):
        order = _make_order()
        assert len(order.status_history) == 1
        assert order.status_history[0].stage == "PLACED"
        assert order.status_history[0].note == "Order placed"

    def test_raises_order_placed(self):
        order = _make_order()
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.order_id == str(order.id)

    def test_requires_products(self):
        with pytest.raises(ValidationError) as exc:
            _make_order(products=[])
        assert "products" in exc.value.messages

    def test_rejects_zero_quantity(self):
        with pytest.raises(ValidationError):
            _make_order(products=[{"product_id": "1", "name": "Backpack", "price": 10.0, "quantity": 0}])


class TestChangeStage:
    def test_forward_move(self):
        order = _advance(_make_order())
        order.change_stage("CONFIRMED", note="Verified by phone")

        assert order.stage == "CONFIRMED"
        event = order._events[0]
        assert isinstance(event, OrderStageChanged)
        assert event.previous_stage == "PLACED"
        assert event.note == "Verified by phone"
        assert order.status_history[-1].note == "Verified by phone"

    def test_skip_ahead(self):
        order = _advance(_make_order())
        order.change_stage("SHIPPED")
        assert order.stage == "SHIPPED"

    def test_move_back(self):
        order = _advance(_make_order(), "CONFIRMED", "PROCESSING")
        order.change_stage("CONFIRMED")
        assert order.stage == "CONFIRMED"
        assert order._events[-1].previous_stage == "PROCESSING"

    def test_delivery_marks_cash_on_delivery_paid(self):
        order = _advance(_make_order(), "SHIPPED", "DELIVERED")
        assert order.payment_status == PaymentStatus.PAID
        assert order.is_terminal

    def test_delivery_keeps_prepaid_status(self):
        order = _advance(_make_order(payment_method="card"), "DELIVERED")
        assert order.payment_status == PaymentStatus.PENDING

    def test_delivered_order_is_final(self):
        order = _advance(_make_order(), "DELIVERED")
        with pytest.raises(ValidationError):
            order.change_stage("CANCELLED")

    def test_admin_cancellation_through_stage_change(self):
        order = _advance(_make_order(), "SHIPPED")
        order.change_stage("CANCELLED", note="Lost in transit", changed_by="ops")

        assert order.stage == "CANCELLED"
        event = order._events[0]
        assert isinstance(event, OrderCancelled)
        assert event.cancelled_by == "ops"
        assert order.cancellation_reason == "Lost in transit"


class TestCustomerCancel:
    @pytest.mark.parametrize("stages", [(), ("CONFIRMED",)])
    def test_cancel_before_processing(self, stages):
        order = _advance(_make_order(), *stages)
        order.cancel(reason="Changed my mind")

        assert order.stage == "CANCELLED"
        assert order.cancelled_by == "customer"
        assert order.status_history[-1].stage == "CANCELLED"
        assert order.status_history[-1].note == "Changed my mind"

    def test_cannot_cancel_once_processing(self):
        order = _advance(_make_order(), "PROCESSING")
        with pytest.raises(ValidationError) as exc:
            order.cancel()
        assert "Cannot cancel" in str(exc.value)

    def test_cancel_without_reason_notes_the_actor(self):
        order = _make_order()
        order.cancel()
        assert order.status_history[-1].note == "Cancelled by customer"
