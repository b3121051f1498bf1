"""Domain events for the Wishlist aggregate."""

from protean.fields import Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="Wishlist")
class WishlistItemAdded:
    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = String(required=True)
    title = String()


@ordering.event(part_of="Wishlist")
class WishlistItemRemoved:
    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = String(required=True)
