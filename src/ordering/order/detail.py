"""Order detail — the full representation of a single order for the API."""

from ordering.order.stages import next_stage, stage_label
from ordering.order.timeline import admin_history, build_timeline


def _iso(value):
    return value.isoformat() if value else None


def order_detail(order):
    history = [
        {"stage": entry.stage, "date": _iso(entry.date), "note": entry.note or ""}
        for entry in order.status_history or []
    ]

    return {
        "id": str(order.id),
        "customer_id": str(order.customer_id),
        "customer": {
            "name": order.customer.name if order.customer else None,
            "email": order.customer.email if order.customer else None,
            "phone": order.customer.phone if order.customer else None,
        },
        "shipping_address": (
            {
                "street": order.shipping_address.street,
                "city": order.shipping_address.city,
                "state": order.shipping_address.state,
                "postal_code": order.shipping_address.postal_code,
                "country": order.shipping_address.country,
            }
            if order.shipping_address
            else None
        ),
        "products": [
            {
                "product_id": line.product_id,
                "name": line.name,
                "price": line.price,
                "quantity": line.quantity,
                "image": line.image,
            }
            for line in order.products or []
        ],
        "item_count": order.item_count,
        "subtotal": order.subtotal,
        "discount": order.discount,
        "tax": order.tax,
        "shipping": order.shipping,
        "total_price": order.total_price,
        "currency": order.currency,
        "coupon_code": order.coupon_code,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "stage": order.stage,
        "stage_label": stage_label(order.stage),
        "next_stage": next_stage(order.stage),
        "is_terminal": order.is_terminal,
        "status_history": history,
        "history": admin_history(order),
        "timeline": build_timeline(order.stage, history, order.created_at),
        "cancellation_reason": order.cancellation_reason,
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
    }
