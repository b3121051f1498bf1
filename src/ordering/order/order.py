"""Order aggregate (Event Sourced) — the core of the ordering domain.

The Order aggregate uses event sourcing: all state changes are captured as
domain events, and the current state is rebuilt by replaying events via
@apply decorators. The status history shown on the order timeline is part
of that state, so it is always consistent with the stage changes recorded.

Stages:
    PLACED → CONFIRMED → PROCESSING → PACKED → SHIPPED → OUT_FOR_DELIVERY → DELIVERED
    CANCELLED (from any stage that is not DELIVERED)
"""

import json
from datetime import UTC, datetime
from uuid import uuid4

from protean import apply
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import OrderCancelled, OrderPlaced, OrderStageChanged
from ordering.order.stages import (
    CUSTOMER_CANCELLABLE_STAGES,
    OrderStage,
    check_transition,
    is_terminal,
)


class PaymentStatus:
    PENDING = "pending"
    PAID = "paid"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class CustomerDetails:
    """Contact details captured at checkout, independent of later profile edits."""

    name = String(max_length=100)
    email = String(max_length=254)
    phone = String(max_length=30)


@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships to. Immutable once recorded on the order."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLine:
    """A product snapshot and the quantity ordered. Prices are locked at placement."""

    product_id = String(required=True, max_length=50)
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image = String(max_length=500)


@ordering.entity(part_of="Order")
class StatusEntry:
    stage = String(required=True, choices=OrderStage)
    date = DateTime(required=True)
    note = String(max_length=500)


# ---------------------------------------------------------------------------
# Aggregate Root (Event Sourced)
# ---------------------------------------------------------------------------
@ordering.aggregate(is_event_sourced=True)
class Order:
    customer_id = Identifier(required=True)
    customer = ValueObject(CustomerDetails)
    shipping_address = ValueObject(ShippingAddress)
    products = HasMany(OrderLine)
    subtotal = Float(default=0.0)
    discount = Float(default=0.0)
    tax = Float(default=0.0)
    shipping = Float(default=0.0)
    total_price = Float(default=0.0)
    currency = String(max_length=3, default="USD")
    coupon_code = String(max_length=50)
    payment_method = String(max_length=50)
    payment_status = String(max_length=20, default=PaymentStatus.PENDING)
    stage = String(choices=OrderStage, default=OrderStage.PLACED.value)
    status_history = HasMany(StatusEntry)
    cancellation_reason = String(max_length=500)
    cancelled_by = String(max_length=50)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        products,
        pricing,
        customer=None,
        shipping_address=None,
        coupon_code=None,
        payment_method="cod",
    ):
        """Place a new order.

        Uses _create_new() to get a blank aggregate with auto-generated
        identity. All state is established by the OrderPlaced event's
        @apply handler.

        Args:
            customer_id: The user placing the order.
            products: List of dicts with product_id, name, price, quantity, image.
            pricing: Dict with subtotal, discount, tax, shipping, total_price, currency.
            customer: Dict with name, email, phone.
            shipping_address: Dict with street, city, state, postal_code, country.
        """
        if not products:
            raise ValidationError({"products": ["An order needs at least one product"]})
        for line in products:
            if int(line.get("quantity") or 0) < 1:
                raise ValidationError({"products": ["Quantity must be at least 1"]})

        # Pre-generate line IDs for deterministic replay
        lines_with_ids = [{**line, "id": str(uuid4())} for line in products]

        order = cls._create_new()
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                customer=json.dumps(customer or {}),
                shipping_address=json.dumps(shipping_address or {}),
                products=json.dumps(lines_with_ids),
                subtotal=pricing.get("subtotal", 0.0),
                discount=pricing.get("discount", 0.0),
                tax=pricing.get("tax", 0.0),
                shipping=pricing.get("shipping", 0.0),
                total_price=pricing.get("total_price", 0.0),
                currency=pricing.get("currency", "USD"),
                coupon_code=coupon_code,
                payment_method=payment_method,
                payment_status=PaymentStatus.PENDING,
                placed_at=datetime.now(UTC),
            )
        )
        return order

    @property
    def item_count(self):
        return sum(line.quantity for line in self.products or [])

    @property
    def is_terminal(self):
        return is_terminal(self.stage)

    # -------------------------------------------------------------------
    # Stage transitions
    # -------------------------------------------------------------------
    def change_stage(self, stage, note=None, changed_by="admin"):
        """Move the order to ``stage``, forwards or back. Terminal orders never move."""
        check_transition(self.stage, stage)

        now = datetime.now(UTC)
        if stage == OrderStage.CANCELLED.value:
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    previous_stage=self.stage,
                    reason=note,
                    cancelled_by=changed_by,
                    cancelled_at=now,
                )
            )
            return

        self.raise_(
            OrderStageChanged(
                order_id=str(self.id),
                previous_stage=self.stage,
                stage=stage,
                note=note,
                changed_by=changed_by,
                changed_at=now,
            )
        )

    def cancel(self, reason=None, cancelled_by="customer"):
        """Customer cancellation. Only possible before the order is being processed."""
        if self.stage not in CUSTOMER_CANCELLABLE_STAGES:
            raise ValidationError(
                {
                    "stage": [
                        f"Cannot cancel an order that is {self.stage}. "
                        f"Cancellation is only allowed from: {', '.join(sorted(CUSTOMER_CANCELLABLE_STAGES))}"
                    ]
                }
            )

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_stage=self.stage,
                reason=reason,
                cancelled_by=cancelled_by,
                cancelled_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # @apply methods: rebuild state during event replay
    # -------------------------------------------------------------------
    @apply
    def _on_order_placed(self, event: OrderPlaced):
        self.id = event.order_id
        self.customer_id = event.customer_id
        self.stage = OrderStage.PLACED.value
        self.created_at = event.placed_at
        self.updated_at = event.placed_at

        lines = json.loads(event.products) if isinstance(event.products, str) else []
        self.products = [OrderLine(**line) for line in lines]

        customer = json.loads(event.customer) if isinstance(event.customer, str) else {}
        if customer:
            self.customer = CustomerDetails(**customer)

        address = json.loads(event.shipping_address) if isinstance(event.shipping_address, str) else {}
        if address:
            self.shipping_address = ShippingAddress(**address)

        self.subtotal = event.subtotal
        self.discount = event.discount or 0.0
        self.tax = event.tax or 0.0
        self.shipping = event.shipping or 0.0
        self.total_price = event.total_price
        self.currency = event.currency or "USD"
        self.coupon_code = event.coupon_code
        self.payment_method = event.payment_method
        self.payment_status = event.payment_status or PaymentStatus.PENDING

        self.add_status_history(StatusEntry(stage=OrderStage.PLACED.value, date=event.placed_at, note="Order placed"))

    @apply
    def _on_stage_changed(self, event: OrderStageChanged):
        self.stage = event.stage
        self.updated_at = event.changed_at
        if event.stage == OrderStage.DELIVERED.value and self.payment_method == "cod":
            self.payment_status = PaymentStatus.PAID
        self.add_status_history(StatusEntry(stage=event.stage, date=event.changed_at, note=event.note or ""))

    @apply
    def _on_order_cancelled(self, event: OrderCancelled):
        self.stage = OrderStage.CANCELLED.value
        self.cancellation_reason = event.reason
        self.cancelled_by = event.cancelled_by
        self.updated_at = event.cancelled_at
        self.add_status_history(
            StatusEntry(
                stage=OrderStage.CANCELLED.value,
                date=event.cancelled_at,
                note=event.reason or f"Cancelled by {event.cancelled_by}",
            )
        )
