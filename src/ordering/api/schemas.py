"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CustomerSchema(BaseModel):
    name: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=254)
    phone: str | None = Field(None, max_length=30)


class AddressSchema(BaseModel):
    street: str
    city: str
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


class OrderLineSchema(BaseModel):
    """A product and quantity. Title and price are looked up in the catalogue."""

    product_id: str | int
    quantity: int = Field(ge=1, default=1)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    products: list[OrderLineSchema] = Field(min_length=1)
    customer: CustomerSchema | None = None
    shipping_address: AddressSchema | None = None
    coupon_code: str | None = None
    payment_method: str = "cod"

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "products": [
                        {
                            "product_id": "1",
                            "quantity": 1,
                        }
                    ],
                    "customer": {"name": "Jane Doe", "email": "jane@example.com"},
                    "shipping_address": {"street": "1 Main St", "city": "Springfield"},
                    "coupon_code": "SAVE10",
                }
            ]
        }
    }


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class ChangeStageRequest(BaseModel):
    stage: str
    note: str | None = Field(None, max_length=500)


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    customer_id: str | None = None


class AddToCartRequest(BaseModel):
    product_id: str | int
    quantity: int = Field(ge=1, default=1)


class ApplyCouponRequest(BaseModel):
    coupon_code: str


class CheckoutRequest(BaseModel):
    customer: CustomerSchema | None = None
    shipping_address: AddressSchema | None = None
    payment_method: str = "cod"


# ---------------------------------------------------------------------------
# Wishlist Request Schemas
# ---------------------------------------------------------------------------
class WishlistItemRequest(BaseModel):
    product_id: str | int
    title: str
    price: float | None = Field(None, ge=0)
    image: str | None = None
    category: str | None = None


class MoveToCartRequest(BaseModel):
    cart_id: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class CartIdResponse(BaseModel):
    cart_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class ItemCountResponse(BaseModel):
    status: str = "ok"
    item_count: int


class ToggleResponse(BaseModel):
    in_wishlist: bool
