"""Cart view — current cart state for the cart page and header badge."""

import json

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import CartStatus, ShoppingCart
from ordering.cart.events import (
    CartCheckedOut,
    CartCleared,
    CartCouponApplied,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from ordering.domain import ordering


@ordering.projection
class CartView:
    cart_id = Identifier(identifier=True, required=True)
    items = Text()  # JSON: list of {product_id, title, price, image, quantity}
    coupon_code = String()
    status = String(required=True)
    item_count = Integer(default=0)
    updated_at = DateTime()


def _badge_count(items):
    return sum(i.get("quantity", 0) for i in items)


@ordering.projector(projector_for=CartView, aggregates=[ShoppingCart])
class CartViewProjector:
    @on(CartItemAdded)
    def on_item_added(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        items = json.loads(view.items) if view.items else []

        existing = next((i for i in items if i.get("product_id") == str(event.product_id)), None)
        if existing:
            existing["quantity"] = event.new_quantity
        else:
            items.append(
                {
                    "product_id": str(event.product_id),
                    "title": event.title,
                    "price": event.price,
                    "image": event.image,
                    "quantity": event.new_quantity,
                }
            )

        self._save_items(repo, view, items)

    @on(CartQuantityUpdated)
    def on_quantity_updated(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        items = json.loads(view.items) if view.items else []
        for item in items:
            if item.get("product_id") == str(event.product_id):
                item["quantity"] = event.new_quantity
                break
        self._save_items(repo, view, items)

    @on(CartItemRemoved)
    def on_item_removed(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        items = json.loads(view.items) if view.items else []
        items = [i for i in items if i.get("product_id") != str(event.product_id)]
        self._save_items(repo, view, items)

    @on(CartCleared)
    def on_cart_cleared(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        self._save_items(repo, view, [])

    @on(CartCouponApplied)
    def on_coupon_applied(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        view.coupon_code = event.coupon_code
        repo.add(view)

    @on(CartCheckedOut)
    def on_cart_checked_out(self, event):
        repo = current_domain.repository_for(CartView)
        view = self._get_or_create_view(repo, event.cart_id)
        view.status = CartStatus.CHECKED_OUT.value
        repo.add(view)

    @staticmethod
    def _save_items(repo, view, items):
        view.items = json.dumps(items)
        view.item_count = _badge_count(items)
        repo.add(view)

    @staticmethod
    def _get_or_create_view(repo, cart_id):
        try:
            return repo.get(cart_id)
        except ObjectNotFoundError:
            return CartView(
                cart_id=cart_id,
                status=CartStatus.ACTIVE.value,
                items="[]",
                item_count=0,
            )
