import os

import pytest


@pytest.fixture(scope="session")
def _assistant_domain(request):
    """Initialize the assistant domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from assistant.domain import assistant

    assistant.init()
    return assistant


@pytest.fixture(autouse=True)
def run_around_tests(_assistant_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _assistant_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()
