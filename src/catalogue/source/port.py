"""Product source port (abstract interface).

Defines the contract every catalogue backend implements, so routes and the
shopping assistant work the same against the live third-party API and the
in-memory source used in development and tests.
"""

from abc import ABC, abstractmethod

from catalogue.product import Product
from shared.errors import ServiceUnavailable


class CatalogueUnavailable(ServiceUnavailable):
    """The product catalogue could not be fetched. Safe to retry."""


class ProductSource(ABC):
    """Abstract product source interface."""

    @abstractmethod
    def list_products(self, category: str | None = None) -> list[Product]:
        """All products, optionally narrowed to one category."""
        ...

    @abstractmethod
    def get_product(self, product_id: str) -> Product | None:
        """A single product, or None if the source does not know it."""
        ...

    @abstractmethod
    def list_categories(self) -> list[str]:
        ...
