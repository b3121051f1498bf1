"""Wishlist management — commands and handler.

A customer's wishlist is created the first time they save a product.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.wishlist.wishlist import Wishlist


@ordering.command(part_of="Wishlist")
class ToggleWishlistItem:
    customer_id = Identifier(required=True)
    product_id = String(required=True, max_length=50)
    title = String(required=True, max_length=255)
    price = Float(min_value=0.0)
    image = String(max_length=500)
    category = String(max_length=100)


@ordering.command(part_of="Wishlist")
class RemoveFromWishlist:
    customer_id = Identifier(required=True)
    product_id = String(required=True, max_length=50)


def wishlist_for(customer_id):
    """The customer's wishlist, or a fresh empty one if they have never saved anything."""
    try:
        return current_domain.repository_for(Wishlist).get(customer_id)
    except ObjectNotFoundError:
        return Wishlist(customer_id=customer_id)


@ordering.command_handler(part_of=Wishlist)
class ManageWishlistHandler:
    @handle(ToggleWishlistItem)
    def toggle(self, command):
        wishlist = wishlist_for(command.customer_id)
        added = wishlist.toggle(
            product_id=command.product_id,
            title=command.title,
            price=command.price,
            image=command.image,
            category=command.category,
        )
        current_domain.repository_for(Wishlist).add(wishlist)
        return added

    @handle(RemoveFromWishlist)
    def remove(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.get(command.customer_id)
        item = wishlist.remove(command.product_id)
        repo.add(wishlist)
        return {
            "product_id": item.product_id,
            "title": item.title,
            "price": item.price,
            "image": item.image,
            "category": item.category,
        }
