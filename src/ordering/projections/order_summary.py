"""Order summary — the row shown in order listings, for customers and the back-office."""

import json

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import OrderCancelled, OrderPlaced, OrderStageChanged
from ordering.order.order import Order
from ordering.order.stages import OrderStage


@ordering.projection
class OrderSummary:
    order_id = Identifier(identifier=True, required=True)
    customer_id = Identifier(required=True)
    customer_name = String(max_length=100)
    customer_email = String(max_length=254)
    stage = String(required=True)
    item_count = Integer(default=0)
    total_price = Float(default=0.0)
    currency = String(default="USD")
    created_at = DateTime()
    updated_at = DateTime()


@ordering.projector(projector_for=OrderSummary, aggregates=[Order])
class OrderSummaryProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        products = json.loads(event.products) if isinstance(event.products, str) else []
        customer = json.loads(event.customer) if isinstance(event.customer, str) else {}
        current_domain.repository_for(OrderSummary).add(
            OrderSummary(
                order_id=event.order_id,
                customer_id=event.customer_id,
                customer_name=(customer or {}).get("name"),
                customer_email=(customer or {}).get("email"),
                stage=OrderStage.PLACED.value,
                item_count=sum(int(line.get("quantity") or 0) for line in products),
                total_price=event.total_price,
                currency=event.currency or "USD",
                created_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    def _update_stage(self, order_id, stage, updated_at=None):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(order_id)
        summary.stage = stage
        if updated_at:
            summary.updated_at = updated_at
        repo.add(summary)

    @on(OrderStageChanged)
    def on_stage_changed(self, event):
        self._update_stage(event.order_id, event.stage, event.changed_at)

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        self._update_stage(event.order_id, OrderStage.CANCELLED.value, event.cancelled_at)
