"""Order listings over the OrderSummary read model.

The back-office list supports search, a stage filter, sorting and
pagination, and reports revenue and order counts across every order.
"""

import math

from protean.utils.globals import current_domain

from ordering.order.stages import TERMINAL_STAGES, OrderStage
from ordering.projections.order_summary import OrderSummary

PAGE_SIZE = 10
_MAX_ROWS = 5000

ALL = "ALL"
SORT_KEYS = ("created_at", "total_price", "customer", "stage")


def _row(summary):
    return {
        "id": str(summary.order_id),
        "customer_id": str(summary.customer_id),
        "customer": {"name": summary.customer_name, "email": summary.customer_email},
        "stage": summary.stage,
        "item_count": summary.item_count or 0,
        "total_price": summary.total_price or 0.0,
        "currency": summary.currency,
        "created_at": summary.created_at.isoformat() if summary.created_at else None,
        "updated_at": summary.updated_at.isoformat() if summary.updated_at else None,
    }


def _all_summaries():
    return current_domain.repository_for(OrderSummary)._dao.query.limit(_MAX_ROWS).all().items


def _sort_value(row, key):
    if key == "total_price":
        return row["total_price"]
    if key == "customer":
        return (row["customer"]["name"] or "").lower()
    if key == "stage":
        return row["stage"] or ""
    return row["created_at"] or ""


def order_stats(rows):
    return {
        "total_orders": len(rows),
        "total_revenue": round(sum(r["total_price"] for r in rows), 2),
        "active_orders": sum(1 for r in rows if r["stage"] not in TERMINAL_STAGES),
        "completed_orders": sum(1 for r in rows if r["stage"] == OrderStage.DELIVERED.value),
    }


def list_orders(search="", stage=ALL, sort="created_at", direction="desc", page=1, page_size=PAGE_SIZE):
    rows = [_row(s) for s in _all_summaries()]
    stats = order_stats(rows)

    q = (search or "").strip().lower()
    if q:
        rows = [
            r
            for r in rows
            if q in r["id"].lower()
            or q in (r["customer"]["name"] or "").lower()
            or q in (r["customer"]["email"] or "").lower()
        ]

    if stage and stage != ALL:
        rows = [r for r in rows if r["stage"] == stage]

    key = sort if sort in SORT_KEYS else "created_at"
    rows.sort(key=lambda r: _sort_value(r, key), reverse=direction != "asc")

    total_pages = max(1, math.ceil(len(rows) / page_size))
    page = min(max(1, page), total_pages)
    start = (page - 1) * page_size

    return {
        "orders": rows[start : start + page_size],
        "page": page,
        "total_pages": total_pages,
        "total": len(rows),
        "stats": stats,
    }


def customer_orders(customer_id):
    """A customer's own orders, newest first."""
    summaries = (
        current_domain.repository_for(OrderSummary)._dao.query.filter(customer_id=customer_id).limit(_MAX_ROWS).all().items
    )
    rows = [_row(s) for s in summaries]
    rows.sort(key=lambda r: r["created_at"] or "", reverse=True)
    return rows
