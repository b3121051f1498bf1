"""Storefront FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV selects the config overlay from each domain.toml.
from assistant.domain import assistant  # noqa: E402
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from identity.domain import identity  # noqa: E402
from ordering.domain import ordering  # noqa: E402

from shared.errors import register_exception_handlers
from shared.settings import get_settings

identity.init()
ordering.init()
assistant.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
# Longest prefixes first: /api/admin/users and /api/admin/orders share a stem.
_ROUTE_DOMAIN_MAP = {
    "/api/admin/users": identity,
    "/api/admin/orders": ordering,
    "/api/register": identity,
    "/api/login": identity,
    "/api/logout": identity,
    "/api/verify": identity,
    "/api/profile": identity,
    "/api/orders": ordering,
    "/api/carts": ordering,
    "/api/wishlists": ordering,
    "/api/ai": assistant,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Storefront: accounts, catalogue, carts, orders, wishlists and the shopping assistant",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: catalogue proxy, health check, docs
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from assistant.api.routes import router as assistant_router  # noqa: E402
from catalogue.routes import product_router  # noqa: E402
from identity.api.routes import admin_users_router, auth_router, profile_router  # noqa: E402
from ordering.api.routes import (  # noqa: E402
    admin_order_router,
    cart_router,
    order_router,
    wishlist_router,
)

app.include_router(auth_router)
app.include_router(admin_users_router)
app.include_router(profile_router)
app.include_router(product_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(admin_order_router)
app.include_router(wishlist_router)
app.include_router(assistant_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "identity": {"name": identity.name},
                "ordering": {"name": ordering.name},
                "assistant": {"name": assistant.name},
            },
        }
    )
