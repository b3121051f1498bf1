"""Product source backed by the public Fake Store API (fakestoreapi.com)."""

import requests
import structlog
from pydantic import ValidationError as PydanticValidationError

from catalogue.product import Product
from catalogue.source.port import CatalogueUnavailable, ProductSource

logger = structlog.get_logger(__name__)


class FakeStoreSource(ProductSource):
    def __init__(self, base_url: str, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str):
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.get(url, timeout=self.timeout)
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            if not resp.content.strip():
                return None
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("catalogue.fetch_failed", url=url, error=str(exc))
            raise CatalogueUnavailable("Failed to fetch products, please try again") from exc

        logger.debug("catalogue.fetched", url=url)
        return payload

    def _to_product(self, payload) -> Product | None:
        try:
            return Product.model_validate(payload)
        except PydanticValidationError:
            logger.warning("catalogue.bad_product", payload=payload)
            return None

    def list_products(self, category: str | None = None) -> list[Product]:
        path = f"/products/category/{category}" if category else "/products"
        payload = self._get(path) or []
        products = (self._to_product(item) for item in payload if isinstance(item, dict))
        return [p for p in products if p is not None]

    def get_product(self, product_id: str) -> Product | None:
        # The API answers unknown ids with an empty body rather than a 404
        payload = self._get(f"/products/{product_id}")
        if not isinstance(payload, dict) or not payload:
            return None
        return self._to_product(payload)

    def list_categories(self) -> list[str]:
        payload = self._get("/products/categories") or []
        return [str(c) for c in payload]
