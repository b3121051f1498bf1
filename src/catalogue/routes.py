"""FastAPI routes for browsing the third-party product catalogue.

The product source makes blocking HTTP calls, so these are plain ``def`` routes
that FastAPI runs in its threadpool rather than on the event loop.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from catalogue.browse import DEFAULT_MAX_PRICE, DEFAULT_MIN_PRICE, browse
from catalogue.source import get_source
from catalogue.source.port import ProductSource

product_router = APIRouter(prefix="/api/products", tags=["products"])


def product_source() -> ProductSource:
    return get_source()


@product_router.get("")
def list_products(
    q: str = "",
    category: str | None = None,
    min_price: float = Query(DEFAULT_MIN_PRICE, ge=0),
    max_price: float = Query(DEFAULT_MAX_PRICE, ge=0),
    sort: str | None = Query(None, pattern="^(title|price|rating)$"),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    source: ProductSource = Depends(product_source),
):
    products = source.list_products(category=category)
    return browse(products, q=q, min_price=min_price, max_price=max_price, sort=sort, order=order, page=page)


@product_router.get("/categories")
def list_categories(source: ProductSource = Depends(product_source)):
    return {"categories": source.list_categories()}


@product_router.get("/{product_id}")
def get_product(product_id: str, source: ProductSource = Depends(product_source)):
    product = source.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
