"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the shopping cart, or its quantity was topped up."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = String(required=True)
    title = String()
    price = Float()
    image = String()
    quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart item was changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = String(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    """An item was removed from the shopping cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = String(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCleared:
    """Every item was removed from the shopping cart."""

    __version__ = 1

    cart_id = Identifier(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCouponApplied:
    """A promo code was applied to the shopping cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    coupon_code = String(required=True)
    percent = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCheckedOut:
    """A shopping cart was converted into an order at checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier()
    order_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
