"""Product browsing — search, price window, sorting and "load more" paging.

Paging is cumulative: page ``n`` returns the first ``n * ITEMS_PER_PAGE``
matches, and ``has_more`` tells the client whether another page exists.
"""

from catalogue.product import Product

ITEMS_PER_PAGE = 6
DEFAULT_MIN_PRICE = 0.0
DEFAULT_MAX_PRICE = 1000.0

SORT_OPTIONS = ("title", "price", "rating")


def _sort_key(option):
    if option == "title":
        return lambda p: p.title.lower()
    if option == "rating":
        return lambda p: p.rating.rate
    return lambda p: p.price


def filter_products(products, q="", min_price=DEFAULT_MIN_PRICE, max_price=DEFAULT_MAX_PRICE):
    term = (q or "").strip().lower()
    return [p for p in products if term in p.title.lower() and min_price <= p.price <= max_price]


def sort_products(products, sort=None, order="asc"):
    if sort not in SORT_OPTIONS:
        return list(products)
    return sorted(products, key=_sort_key(sort), reverse=order == "desc")


def browse(
    products: list[Product],
    q: str = "",
    min_price: float = DEFAULT_MIN_PRICE,
    max_price: float = DEFAULT_MAX_PRICE,
    sort: str | None = None,
    order: str = "asc",
    page: int = 1,
    per_page: int = ITEMS_PER_PAGE,
) -> dict:
    matches = sort_products(filter_products(products, q, min_price, max_price), sort, order)
    visible = matches[: max(1, page) * per_page]
    return {
        "products": visible,
        "has_more": len(visible) < len(matches),
        "total": len(matches),
    }
