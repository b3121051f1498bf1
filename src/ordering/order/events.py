"""Domain events for the Order aggregate.

All events are versioned, immutable facts representing state changes.
Events are persisted to the event store and used for:
- Rebuilding aggregate state via @apply (event sourcing)
- Updating the order summary projection via its projector
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer placed a new order, either directly or by checking out a cart."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    customer = Text()  # JSON: {name, email, phone}
    shipping_address = Text()  # JSON: address dict
    products = Text(required=True)  # JSON: list of line dicts
    subtotal = Float(required=True)
    discount = Float()
    tax = Float()
    shipping = Float()
    total_price = Float(required=True)
    currency = String(default="USD")
    coupon_code = String()
    payment_method = String()
    payment_status = String()
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStageChanged:
    """The back-office moved an order to another open stage."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_stage = String(required=True)
    stage = String(required=True)
    note = String()
    changed_by = String()
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled by the customer or the back-office."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_stage = String(required=True)
    reason = String()
    cancelled_by = String(required=True)
    cancelled_at = DateTime(required=True)
