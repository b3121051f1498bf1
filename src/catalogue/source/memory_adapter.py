"""In-memory product source for development and testing.

Holds a fixed list of products and can be switched into a failing mode to
exercise the "catalogue unavailable" paths without any network access.
"""

from catalogue.product import Product
from catalogue.source.port import CatalogueUnavailable, ProductSource


class InMemorySource(ProductSource):
    def __init__(self, products: list[Product] | None = None) -> None:
        self.products: list[Product] = list(products or [])
        self.available: bool = True
        self.calls: list[str] = []

    def configure(self, available: bool) -> None:
        self.available = available

    def _check(self, call: str) -> None:
        self.calls.append(call)
        if not self.available:
            raise CatalogueUnavailable("Failed to fetch products, please try again")

    def list_products(self, category: str | None = None) -> list[Product]:
        self._check("list_products")
        if category:
            return [p for p in self.products if p.category.lower() == category.lower()]
        return list(self.products)

    def get_product(self, product_id: str) -> Product | None:
        self._check("get_product")
        return next((p for p in self.products if str(p.id) == str(product_id)), None)

    def list_categories(self) -> list[str]:
        self._check("list_categories")
        return sorted({p.category for p in self.products if p.category})
