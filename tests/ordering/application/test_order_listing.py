"""Tests for the back-office order list and customer order history."""

import json

import pytest
from ordering.order.cancellation import CancelOrder
from ordering.order.placement import PlaceOrder
from ordering.order.stage import ChangeOrderStage
from ordering.projections.order_listing import customer_orders, list_orders, order_stats
from protean import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _place(customer_id, name, total):
    return _process(
        PlaceOrder(
            customer_id=customer_id,
            customer=json.dumps({"name": name, "email": f"{name.lower()}@example.com"}),
            products=json.dumps([{"product_id": "1", "name": "Thing", "price": total, "quantity": 1}]),
            subtotal=total,
            total_price=total,
        )
    )


@pytest.fixture()
def orders():
    ids = {
        "ann": _place("user-ann", "Ann", 100.0),
        "bob": _place("user-bob", "Bob", 50.0),
        "cyd": _place("user-ann", "Cyd", 25.0),
    }
    _process(ChangeOrderStage(order_id=ids["bob"], stage="DELIVERED"))
    _process(CancelOrder(order_id=ids["cyd"]))
    return ids


class TestStats:
    def test_stats_count_every_order(self, orders):
        stats = list_orders()["stats"]
        assert stats == {
            "total_orders": 3,
            "total_revenue": 175.0,
            "active_orders": 1,
            "completed_orders": 1,
        }

    def test_stats_ignore_filters(self, orders):
        assert list_orders(stage="DELIVERED")["stats"]["total_orders"] == 3

    def test_order_stats_on_rows(self):
        assert order_stats([]) == {"total_orders": 0, "total_revenue": 0, "active_orders": 0, "completed_orders": 0}


class TestListOrders:
    def test_stage_filter(self, orders):
        result = list_orders(stage="CANCELLED")
        assert [o["id"] for o in result["orders"]] == [orders["cyd"]]

    def test_search_by_name_email_or_id(self, orders):
        assert [o["id"] for o in list_orders(search="bob")["orders"]] == [orders["bob"]]
        assert [o["id"] for o in list_orders(search="ANN@EXAMPLE")["orders"]] == [orders["ann"]]
        assert [o["id"] for o in list_orders(search=orders["cyd"][:8])["orders"]] == [orders["cyd"]]

    def test_sort_by_total(self, orders):
        result = list_orders(sort="total_price", direction="asc")
        assert [o["total_price"] for o in result["orders"]] == [25.0, 50.0, 100.0]

    def test_sort_by_customer(self, orders):
        result = list_orders(sort="customer", direction="desc")
        assert [o["customer"]["name"] for o in result["orders"]] == ["Cyd", "Bob", "Ann"]

    def test_pagination(self, orders):
        result = list_orders(sort="total_price", direction="asc", page=2, page_size=2)
        assert result["total_pages"] == 2
        assert result["total"] == 3
        assert [o["total_price"] for o in result["orders"]] == [100.0]


class TestCustomerOrders:
    def test_only_own_orders(self, orders):
        rows = customer_orders("user-ann")
        assert {r["id"] for r in rows} == {orders["ann"], orders["cyd"]}

    def test_no_orders(self):
        assert customer_orders("user-nobody") == []
