"""Order placement — command and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    customer = Text()  # JSON: {name, email, phone}
    shipping_address = Text()  # JSON: address dict
    products = Text(required=True)  # JSON: list of line dicts
    subtotal = Float(required=True)
    discount = Float(default=0.0)
    tax = Float(default=0.0)
    shipping = Float(default=0.0)
    total_price = Float(required=True)
    currency = String(max_length=3, default="USD")
    coupon_code = String(max_length=50)
    payment_method = String(max_length=50, default="cod")


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        pricing = {
            "subtotal": command.subtotal,
            "discount": command.discount or 0.0,
            "tax": command.tax or 0.0,
            "shipping": command.shipping or 0.0,
            "total_price": command.total_price,
            "currency": command.currency or "USD",
        }

        order = Order.place(
            customer_id=command.customer_id,
            products=_loads(command.products) or [],
            pricing=pricing,
            customer=_loads(command.customer),
            shipping_address=_loads(command.shipping_address),
            coupon_code=command.coupon_code,
            payment_method=command.payment_method or "cod",
        )
        current_domain.repository_for(Order).add(order)
        logger.info("order.placed", order_id=str(order.id), total_price=order.total_price)
        return str(order.id)
