"""Ordering bounded context — orders, shopping carts and wishlists.

Handles the order lifecycle (event-sourced, with a stage timeline), shopping
cart management (CQRS), wishlists, and the checkout flow that converts carts
to orders.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
