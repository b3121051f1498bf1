"""Wishlist aggregate — products a customer saved for later, one wishlist per customer."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, String

from ordering.domain import ordering
from ordering.wishlist.events import WishlistItemAdded, WishlistItemRemoved


@ordering.entity(part_of="Wishlist")
class WishlistItem:
    product_id = String(required=True, max_length=50)
    title = String(required=True, max_length=255)
    price = Float(min_value=0.0)
    image = String(max_length=500)
    category = String(max_length=100)
    added_at = DateTime()


@ordering.aggregate
class Wishlist:
    customer_id = Identifier(identifier=True, required=True)
    items = HasMany(WishlistItem)
    updated_at = DateTime()

    def find_item(self, product_id):
        return next((i for i in self.items or [] if str(i.product_id) == str(product_id)), None)

    def toggle(self, product_id, title, price=None, image=None, category=None):
        """Save the product, or unsave it if it is already saved. Returns True when added."""
        if self.find_item(product_id):
            self.remove(product_id)
            return False

        now = datetime.now(UTC)
        self.add_items(
            WishlistItem(
                product_id=str(product_id),
                title=title,
                price=price,
                image=image,
                category=category,
                added_at=now,
            )
        )
        self.updated_at = now
        self.raise_(WishlistItemAdded(customer_id=str(self.customer_id), product_id=str(product_id), title=title))
        return True

    def remove(self, product_id):
        item = self.find_item(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Item not found in wishlist"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(WishlistItemRemoved(customer_id=str(self.customer_id), product_id=str(product_id)))
        return item
