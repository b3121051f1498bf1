"""Integration tests for the cart endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.routes import cart_router, order_router
from ordering.cart.cart import CartStatus, ShoppingCart
from ordering.order.order import Order
from protean import current_domain
from shared.auth import issue_token
from shared.errors import register_exception_handlers


@pytest.fixture()
def client(memory_source):
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(order_router)
    register_exception_handlers(app)
    return TestClient(app)


def _auth(user_id="user-001", username="jane"):
    return {"Authorization": f"Bearer {issue_token(user_id, username, 'user')}"}


def _create_cart(client, customer_id=None):
    body = {"customer_id": customer_id} if customer_id else None
    response = client.post("/api/carts", json=body)
    assert response.status_code == 201
    return response.json()["cart_id"]


def _add(client, cart_id, product_id=1, quantity=1):
    return client.post(f"/api/carts/{cart_id}/items", json={"product_id": product_id, "quantity": quantity})


class TestCartEndpoints:
    def test_guest_cart(self, client):
        cart_id = _create_cart(client)
        response = client.get(f"/api/carts/{cart_id}")
        assert response.status_code == 200
        assert response.json()["items"] == []
        assert response.json()["customer_id"] is None

    def test_add_item_returns_badge(self, client):
        cart_id = _create_cart(client)
        response = _add(client, cart_id, quantity=2)
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "item_count": 2}

    def test_badge_from_read_model(self, client):
        cart_id = _create_cart(client)
        assert client.get(f"/api/carts/{cart_id}/badge").json()["item_count"] == 0

        _add(client, cart_id, quantity=2)
        _add(client, cart_id, product_id=2)
        assert client.get(f"/api/carts/{cart_id}/badge").json()["item_count"] == 3

    def test_increment_decrement_remove_clear(self, client):
        cart_id = _create_cart(client)
        _add(client, cart_id)
        _add(client, cart_id, product_id=2)

        assert client.put(f"/api/carts/{cart_id}/items/1/increment").json()["item_count"] == 3
        assert client.put(f"/api/carts/{cart_id}/items/1/decrement").json()["item_count"] == 2
        assert client.delete(f"/api/carts/{cart_id}/items/2").json()["item_count"] == 1
        assert client.delete(f"/api/carts/{cart_id}/items").json()["item_count"] == 0

    def test_price_and_title_come_from_the_catalogue(self, client):
        cart_id = _create_cart(client)
        client.post(
            f"/api/carts/{cart_id}/items",
            json={"product_id": 1, "title": "Anything", "price": 0.01, "quantity": 1},
        )
        item = client.get(f"/api/carts/{cart_id}").json()["items"][0]
        assert item["title"] == "Fjallraven Backpack"
        assert item["price"] == 100.0
        assert item["category"] == "men's clothing"

    def test_unknown_product_is_404(self, client):
        cart_id = _create_cart(client)
        assert _add(client, cart_id, product_id=404).status_code == 404
        assert client.get(f"/api/carts/{cart_id}/badge").json()["item_count"] == 0

    def test_catalogue_down_is_503(self, client, memory_source):
        cart_id = _create_cart(client)
        memory_source.configure(available=False)
        assert _add(client, cart_id).status_code == 503

    def test_unknown_item_is_400(self, client):
        cart_id = _create_cart(client)
        response = client.put(f"/api/carts/{cart_id}/items/42/increment")
        assert response.status_code == 400
        assert response.json()["message"] == "Item not found in cart"

    def test_unknown_cart_is_404(self, client):
        assert client.get("/api/carts/does-not-exist").status_code == 404

    def test_apply_coupon(self, client):
        cart_id = _create_cart(client)
        _add(client, cart_id, quantity=2)
        response = client.post(f"/api/carts/{cart_id}/coupon", json={"coupon_code": "save10"})
        assert response.status_code == 200
        data = response.json()
        assert data["coupon_code"] == "SAVE10"
        assert data["totals"]["discount"] == 20.0
        assert data["totals"]["total_price"] == 212.4

    def test_invalid_coupon(self, client):
        cart_id = _create_cart(client)
        response = client.post(f"/api/carts/{cart_id}/coupon", json={"coupon_code": "HALFOFF"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid code. Try SAVE10."


class TestCheckout:
    def test_checkout_places_order(self, client):
        cart_id = _create_cart(client, customer_id="user-001")
        _add(client, cart_id, quantity=2)

        response = client.post(
            f"/api/carts/{cart_id}/checkout",
            json={"shipping_address": {"street": "1 Main St", "city": "Springfield"}},
            headers=_auth(),
        )
        assert response.status_code == 201
        order_id = response.json()["order_id"]

        order = current_domain.repository_for(Order).get(order_id)
        assert order.customer_id == "user-001"
        assert order.item_count == 2
        assert order.total_price == 236.0
        assert order.customer.name == "jane"
        assert current_domain.repository_for(ShoppingCart).get(cart_id).status == CartStatus.CHECKED_OUT.value

    def test_checkout_requires_login(self, client):
        cart_id = _create_cart(client)
        _add(client, cart_id)
        assert client.post(f"/api/carts/{cart_id}/checkout", json={}).status_code == 401

    def test_empty_cart(self, client):
        cart_id = _create_cart(client)
        response = client.post(f"/api/carts/{cart_id}/checkout", json={}, headers=_auth())
        assert response.status_code == 400

    def test_someone_elses_cart(self, client):
        cart_id = _create_cart(client, customer_id="user-002")
        _add(client, cart_id)
        response = client.post(f"/api/carts/{cart_id}/checkout", json={}, headers=_auth())
        assert response.status_code == 404

    def test_cart_cannot_be_checked_out_twice(self, client):
        cart_id = _create_cart(client)
        _add(client, cart_id)
        client.post(f"/api/carts/{cart_id}/checkout", json={}, headers=_auth())
        response = client.post(f"/api/carts/{cart_id}/checkout", json={}, headers=_auth())
        assert response.status_code == 400
