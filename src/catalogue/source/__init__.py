"""Product source factory.

Provides get_source() / set_source() to swap implementations:
- FakeStoreSource (the live third-party API) by default
- InMemorySource for development and testing
"""

from catalogue.source.fakestore_adapter import FakeStoreSource
from catalogue.source.port import ProductSource
from shared.settings import get_settings

_current_source: ProductSource | None = None


def get_source() -> ProductSource:
    """Return the current product source. Defaults to the Fake Store API."""
    global _current_source
    if _current_source is None:
        settings = get_settings()
        _current_source = FakeStoreSource(settings.catalogue_base_url, timeout=settings.catalogue_timeout)
    return _current_source


def set_source(source: ProductSource) -> None:
    """Override the active product source (useful for tests)."""
    global _current_source
    _current_source = source


def reset_source() -> None:
    """Reset to default source."""
    global _current_source
    _current_source = None
