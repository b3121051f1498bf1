import os

import pytest


@pytest.fixture(scope="session")
def _ordering_domain(request):
    """Initialize the ordering domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from ordering.domain import ordering

    ordering.init()
    return ordering


@pytest.fixture(autouse=True)
def run_around_tests(_ordering_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _ordering_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def products():
    """Round-priced catalogue so order totals are easy to check by hand."""
    from catalogue.product import Product, Rating

    def _product(id, title, price, category):
        return Product(
            id=id,
            title=title,
            price=price,
            category=category,
            image=f"https://img.example.com/{id}.jpg",
            rating=Rating(rate=4.0, count=10),
        )

    return [
        _product(1, "Fjallraven Backpack", 100.0, "men's clothing"),
        _product(2, "Gold Ring", 50.0, "jewelery"),
        _product(5, "Silver Ring", 9.99, "jewelery"),
    ]
