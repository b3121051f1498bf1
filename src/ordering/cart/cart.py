"""Shopping Cart aggregate (CQRS) — the cart behind the header badge, converted to an Order at checkout.

The cart is a standard CQRS aggregate (not event sourced). Items are keyed by
product id: adding a product that is already in the cart tops up its
quantity, and decrementing an item at quantity 1 removes it. The badge count
is the sum of item quantities.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.cart.events import (
    CartCheckedOut,
    CartCleared,
    CartCouponApplied,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from ordering.cart.pricing import normalize_code, price_lines, promo_percent
from ordering.domain import ordering


class CartStatus(Enum):
    ACTIVE = "Active"
    CHECKED_OUT = "Checked_Out"


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = String(required=True, max_length=50)
    title = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=500)
    category = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@ordering.aggregate
class ShoppingCart:
    customer_id = Identifier()  # Nullable for guest carts
    items = HasMany(CartItem)
    coupon_code = String(max_length=50)
    status = String(choices=CartStatus, default=CartStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def cart_must_have_items_to_check_out(self):
        if self.status == CartStatus.CHECKED_OUT.value and not self.items:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id=None):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            status=CartStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def item_count(self):
        """Badge count: total units in the cart, not distinct products."""
        return sum(item.quantity for item in self.items or [])

    def find_item(self, product_id):
        return next((i for i in self.items or [] if str(i.product_id) == str(product_id)), None)

    def totals(self):
        lines = [{"price": item.price, "quantity": item.quantity} for item in self.items or []]
        return price_lines(lines, self.coupon_code)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def _assert_active(self, action):
        if CartStatus(self.status) != CartStatus.ACTIVE:
            raise ValidationError({"status": [f"Cannot {action} a cart that is {self.status}"]})

    def _require_item(self, product_id):
        item = self.find_item(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})
        return item

    def add_item(self, product_id, title, price, quantity=1, image=None, category=None):
        """Add a product to the cart (or increase its quantity if already present)."""
        self._assert_active("add items to")
        quantity = max(1, int(quantity or 1))

        now = datetime.now(UTC)
        existing = self.find_item(product_id)
        if existing:
            existing.quantity += quantity
            new_quantity = existing.quantity
        else:
            self.add_items(
                CartItem(
                    product_id=str(product_id),
                    title=title,
                    price=price,
                    image=image,
                    category=category,
                    quantity=quantity,
                    added_at=now,
                )
            )
            new_quantity = quantity

        self.updated_at = now
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                title=title,
                price=price,
                image=image,
                quantity=quantity,
                new_quantity=new_quantity,
            )
        )

    def increment(self, product_id):
        self._assert_active("change")
        item = self._require_item(product_id)
        self._set_quantity(item, item.quantity + 1)

    def decrement(self, product_id):
        """Take one unit off. The last unit removes the item entirely."""
        self._assert_active("change")
        item = self._require_item(product_id)
        if item.quantity > 1:
            self._set_quantity(item, item.quantity - 1)
        else:
            self.remove_item(product_id)

    def _set_quantity(self, item, new_quantity):
        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(item.product_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, product_id):
        self._assert_active("remove items from")
        item = self._require_item(product_id)

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        self._assert_active("clear")
        for item in list(self.items or []):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id)))

    # -------------------------------------------------------------------
    # Promo codes
    # -------------------------------------------------------------------
    def apply_coupon(self, coupon_code):
        self._assert_active("apply a coupon to")

        code = normalize_code(coupon_code)
        percent = promo_percent(code)
        if percent is None:
            raise ValidationError({"coupon_code": ["Invalid code. Try SAVE10."]})

        self.coupon_code = code
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCouponApplied(cart_id=str(self.id), coupon_code=code, percent=percent))

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def check_out(self, order_id):
        """Mark the cart as converted into ``order_id``."""
        self._assert_active("check out")
        if not self.items:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        items_snapshot = [{"product_id": str(item.product_id), "quantity": item.quantity} for item in self.items]

        self.status = CartStatus.CHECKED_OUT.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartCheckedOut(
                cart_id=str(self.id),
                customer_id=str(self.customer_id) if self.customer_id else None,
                order_id=str(order_id),
                items=json.dumps(items_snapshot),
            )
        )
