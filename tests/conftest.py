import os
from pathlib import Path

import pytest
from catalogue.product import Product, Rating
from catalogue.source import reset_source, set_source
from catalogue.source.memory_adapter import InMemorySource

# Cheap bcrypt work factor for the whole suite
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Selects the config overlay every domain reads from its domain.toml.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("ENVIRONMENT", "test")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


# ---------------------------------------------------------------------------
# Catalogue fixtures shared by the catalogue and assistant tests
# ---------------------------------------------------------------------------
def _product(id, title, price, category, rate, count, description=""):
    return Product(
        id=id,
        title=title,
        price=price,
        category=category,
        image=f"https://img.example.com/{id}.jpg",
        description=description,
        rating=Rating(rate=rate, count=count),
    )


@pytest.fixture()
def products():
    return [
        _product(1, "Fjallraven Backpack", 109.95, "men's clothing", 3.9, 120, "Fits 15 inch laptops"),
        _product(2, "Slim Fit T-Shirt", 22.3, "men's clothing", 4.1, 259),
        _product(5, "Dragon Station Bracelet", 695.0, "jewelery", 4.6, 400),
        _product(8, "Rose Gold Earrings", 10.99, "jewelery", 1.9, 100),
        _product(9, "WD 2TB Hard Drive", 64.0, "electronics", 3.3, 203),
        _product(10, "SanDisk SSD 1TB", 109.0, "electronics", 2.9, 470),
        _product(14, "Samsung 49-Inch Monitor", 999.99, "electronics", 2.2, 140),
        _product(15, "Snowboard Jacket", 56.99, "women's clothing", 2.6, 235),
        _product(18, "Boat Neck Top", 9.85, "women's clothing", 4.7, 130),
    ]


@pytest.fixture()
def memory_source(products):
    source = InMemorySource(products)
    set_source(source)
    yield source
    reset_source()
