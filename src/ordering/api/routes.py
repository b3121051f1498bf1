"""FastAPI routes for the Ordering domain — carts, orders, wishlists and the admin order desk."""

import json

from fastapi import APIRouter, Depends, HTTPException, Query
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from catalogue.routes import product_source
from catalogue.source.port import ProductSource
from ordering.api.schemas import (
    AddToCartRequest,
    ApplyCouponRequest,
    CancelOrderRequest,
    CartIdResponse,
    ChangeStageRequest,
    CheckoutRequest,
    CreateCartRequest,
    ItemCountResponse,
    MoveToCartRequest,
    OrderIdResponse,
    PlaceOrderRequest,
    StatusResponse,
    ToggleResponse,
    WishlistItemRequest,
)
from ordering.cart.cart import CartStatus, ShoppingCart
from ordering.cart.conversion import CheckOutCart
from ordering.cart.coupons import ApplyCouponToCart
from ordering.cart.items import (
    AddToCart,
    ClearCart,
    DecrementCartItem,
    IncrementCartItem,
    RemoveFromCart,
)
from ordering.cart.management import CreateCart
from ordering.cart.pricing import price_lines, promo_percent
from ordering.order.cancellation import CancelOrder
from ordering.order.detail import order_detail
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from ordering.order.stage import ChangeOrderStage
from ordering.projections.cart_view import CartView
from ordering.projections.order_listing import ALL, customer_orders, list_orders
from ordering.wishlist.management import RemoveFromWishlist, ToggleWishlistItem, wishlist_for
from shared.auth import TokenClaims, current_claims, require_admin


def _catalogue_product(source, product_id):
    """The live catalogue listing for ``product_id``; prices never come from the client."""
    product = source.get_product(str(product_id))
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")
    return product


def _customer_details(customer, claims):
    details = customer.model_dump() if customer else {}
    details["name"] = details.get("name") or claims.username
    return details


def _place_order(claims, lines, pricing, customer, shipping_address, coupon_code, payment_method):
    command = PlaceOrder(
        customer_id=claims.user_id,
        customer=json.dumps(_customer_details(customer, claims)),
        shipping_address=json.dumps(shipping_address.model_dump()) if shipping_address else None,
        products=json.dumps(lines),
        subtotal=pricing["subtotal"],
        discount=pricing["discount"],
        tax=pricing["tax"],
        shipping=pricing["shipping"],
        total_price=pricing["total_price"],
        currency=pricing["currency"],
        coupon_code=coupon_code,
        payment_method=payment_method,
    )
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/api/carts", tags=["carts"])


def _cart_payload(cart):
    return {
        "id": str(cart.id),
        "customer_id": str(cart.customer_id) if cart.customer_id else None,
        "status": cart.status,
        "coupon_code": cart.coupon_code,
        "items": [
            {
                "product_id": item.product_id,
                "title": item.title,
                "price": item.price,
                "image": item.image,
                "category": item.category,
                "quantity": item.quantity,
            }
            for item in cart.items or []
        ],
        "item_count": cart.item_count,
        "totals": cart.totals(),
    }


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest | None = None) -> CartIdResponse:
    command = CreateCart(customer_id=body.customer_id if body else None)
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}")
async def get_cart(cart_id: str):
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    return _cart_payload(cart)


@cart_router.get("/{cart_id}/badge", response_model=ItemCountResponse)
async def get_cart_badge(cart_id: str) -> ItemCountResponse:
    """Header badge count, served from the cart read model."""
    try:
        view = current_domain.repository_for(CartView).get(cart_id)
    except ObjectNotFoundError:
        return ItemCountResponse(item_count=0)
    return ItemCountResponse(item_count=view.item_count or 0)


@cart_router.post("/{cart_id}/items", response_model=ItemCountResponse)
def add_cart_item(
    cart_id: str,
    body: AddToCartRequest,
    source: ProductSource = Depends(product_source),
) -> ItemCountResponse:
    product = _catalogue_product(source, body.product_id)
    command = AddToCart(
        cart_id=cart_id,
        product_id=str(product.id),
        title=product.title,
        price=product.price,
        image=product.image,
        category=product.category,
        quantity=body.quantity,
    )
    count = current_domain.process(command, asynchronous=False)
    return ItemCountResponse(item_count=count)


@cart_router.put("/{cart_id}/items/{product_id}/increment", response_model=ItemCountResponse)
async def increment_cart_item(cart_id: str, product_id: str) -> ItemCountResponse:
    count = current_domain.process(IncrementCartItem(cart_id=cart_id, product_id=product_id), asynchronous=False)
    return ItemCountResponse(item_count=count)


@cart_router.put("/{cart_id}/items/{product_id}/decrement", response_model=ItemCountResponse)
async def decrement_cart_item(cart_id: str, product_id: str) -> ItemCountResponse:
    count = current_domain.process(DecrementCartItem(cart_id=cart_id, product_id=product_id), asynchronous=False)
    return ItemCountResponse(item_count=count)


@cart_router.delete("/{cart_id}/items/{product_id}", response_model=ItemCountResponse)
async def remove_cart_item(cart_id: str, product_id: str) -> ItemCountResponse:
    count = current_domain.process(RemoveFromCart(cart_id=cart_id, product_id=product_id), asynchronous=False)
    return ItemCountResponse(item_count=count)


@cart_router.delete("/{cart_id}/items", response_model=ItemCountResponse)
async def clear_cart(cart_id: str) -> ItemCountResponse:
    count = current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return ItemCountResponse(item_count=count)


@cart_router.post("/{cart_id}/coupon")
async def apply_cart_coupon(cart_id: str, body: ApplyCouponRequest):
    current_domain.process(ApplyCouponToCart(cart_id=cart_id, coupon_code=body.coupon_code), asynchronous=False)
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    return _cart_payload(cart)


@cart_router.post("/{cart_id}/checkout", status_code=201, response_model=OrderIdResponse)
async def checkout_cart(
    cart_id: str,
    body: CheckoutRequest,
    claims: TokenClaims = Depends(current_claims),
) -> OrderIdResponse:
    """Convert cart to an order.

    1. Load cart to get items and totals
    2. Place the order for the signed-in customer
    3. Mark cart as checked out
    """
    cart = current_domain.repository_for(ShoppingCart).get(cart_id)
    if cart.customer_id and str(cart.customer_id) != claims.user_id:
        raise HTTPException(status_code=404, detail="Cart not found")
    if cart.status != CartStatus.ACTIVE.value:
        raise ValidationError({"status": [f"Cannot check out a cart that is {cart.status}"]})
    if not cart.items:
        raise ValidationError({"cart": ["Cannot check out an empty cart"]})

    lines = [
        {
            "product_id": item.product_id,
            "name": item.title,
            "price": item.price,
            "quantity": item.quantity,
            "image": item.image,
        }
        for item in cart.items
    ]

    # Placing the order and closing the cart are two separate commits with no
    # compensation. Nothing awaits between the status check above and CheckOutCart,
    # so requests in one worker cannot interleave here; separate workers can.
    order_id = _place_order(
        claims,
        lines,
        cart.totals(),
        body.customer,
        body.shipping_address,
        cart.coupon_code,
        body.payment_method,
    )
    current_domain.process(CheckOutCart(cart_id=cart_id, order_id=order_id), asynchronous=False)
    return OrderIdResponse(order_id=order_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/api/orders", tags=["orders"])


def _own_order(order_id, claims):
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Order not found") from exc
    if str(order.customer_id) != claims.user_id and not claims.is_admin:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@order_router.post("", status_code=201, response_model=OrderIdResponse)
def place_order(
    body: PlaceOrderRequest,
    claims: TokenClaims = Depends(current_claims),
    source: ProductSource = Depends(product_source),
) -> OrderIdResponse:
    if body.coupon_code and promo_percent(body.coupon_code) is None:
        raise ValidationError({"coupon_code": ["Invalid code. Try SAVE10."]})

    lines = []
    for line in body.products:
        product = _catalogue_product(source, line.product_id)
        lines.append(
            {
                "product_id": str(product.id),
                "name": product.title,
                "price": product.price,
                "quantity": line.quantity,
                "image": product.image,
            }
        )
    pricing = price_lines(lines, body.coupon_code)
    order_id = _place_order(
        claims,
        lines,
        pricing,
        body.customer,
        body.shipping_address,
        body.coupon_code.strip().upper() if body.coupon_code else None,
        body.payment_method,
    )
    return OrderIdResponse(order_id=order_id)


@order_router.get("")
async def get_my_orders(claims: TokenClaims = Depends(current_claims)):
    return {"orders": customer_orders(claims.user_id)}


@order_router.get("/{order_id}")
async def get_order(order_id: str, claims: TokenClaims = Depends(current_claims)):
    return {"order": order_detail(_own_order(order_id, claims))}


@order_router.put("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    claims: TokenClaims = Depends(current_claims),
):
    _own_order(order_id, claims)
    command = CancelOrder(order_id=order_id, reason=body.reason if body else None, cancelled_by="customer")
    current_domain.process(command, asynchronous=False)
    return {"order": order_detail(current_domain.repository_for(Order).get(order_id))}


# ---------------------------------------------------------------------------
# Admin Order Router
# ---------------------------------------------------------------------------
admin_order_router = APIRouter(prefix="/api/admin/orders", tags=["admin"])


@admin_order_router.get("")
async def get_orders(
    q: str = "",
    stage: str = ALL,
    sort: str = "created_at",
    direction: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    _admin: TokenClaims = Depends(require_admin),
):
    return list_orders(search=q, stage=stage, sort=sort, direction=direction, page=page)


@admin_order_router.get("/{order_id}")
async def get_order_for_admin(order_id: str, _admin: TokenClaims = Depends(require_admin)):
    order = current_domain.repository_for(Order).get(order_id)
    return {"order": order_detail(order)}


@admin_order_router.patch("/{order_id}/stage")
async def change_order_stage(
    order_id: str,
    body: ChangeStageRequest,
    admin: TokenClaims = Depends(require_admin),
):
    command = ChangeOrderStage(order_id=order_id, stage=body.stage, note=body.note, changed_by=admin.username)
    current_domain.process(command, asynchronous=False)
    return {"order": order_detail(current_domain.repository_for(Order).get(order_id))}


# ---------------------------------------------------------------------------
# Wishlist Router
# ---------------------------------------------------------------------------
wishlist_router = APIRouter(prefix="/api/wishlists", tags=["wishlists"])


def _owner(customer_id, claims):
    if customer_id != claims.user_id and not claims.is_admin:
        raise HTTPException(status_code=403, detail="Not allowed to access this wishlist")


@wishlist_router.get("/{customer_id}")
async def get_wishlist(customer_id: str, claims: TokenClaims = Depends(current_claims)):
    _owner(customer_id, claims)
    wishlist = wishlist_for(customer_id)
    return {
        "customer_id": customer_id,
        "items": [
            {
                "product_id": item.product_id,
                "title": item.title,
                "price": item.price,
                "image": item.image,
                "category": item.category,
            }
            for item in wishlist.items or []
        ],
    }


@wishlist_router.post("/{customer_id}/toggle", response_model=ToggleResponse)
async def toggle_wishlist_item(
    customer_id: str,
    body: WishlistItemRequest,
    claims: TokenClaims = Depends(current_claims),
) -> ToggleResponse:
    _owner(customer_id, claims)
    command = ToggleWishlistItem(
        customer_id=customer_id,
        product_id=str(body.product_id),
        title=body.title,
        price=body.price,
        image=body.image,
        category=body.category,
    )
    added = current_domain.process(command, asynchronous=False)
    return ToggleResponse(in_wishlist=added)


@wishlist_router.delete("/{customer_id}/items/{product_id}", response_model=StatusResponse)
async def remove_wishlist_item(
    customer_id: str,
    product_id: str,
    claims: TokenClaims = Depends(current_claims),
) -> StatusResponse:
    _owner(customer_id, claims)
    current_domain.process(RemoveFromWishlist(customer_id=customer_id, product_id=product_id), asynchronous=False)
    return StatusResponse()


@wishlist_router.post("/{customer_id}/items/{product_id}/move-to-cart", response_model=ItemCountResponse)
def move_wishlist_item_to_cart(
    customer_id: str,
    product_id: str,
    body: MoveToCartRequest,
    claims: TokenClaims = Depends(current_claims),
    source: ProductSource = Depends(product_source),
) -> ItemCountResponse:
    """Put one unit of a saved product in the cart, then take it off the wishlist.

    The wishlist is only touched once the cart has accepted the item, so a
    missing or closed cart leaves the saved product where it was.
    """
    _owner(customer_id, claims)
    if wishlist_for(customer_id).find_item(product_id) is None:
        raise ValidationError({"product_id": ["Item not found in wishlist"]})

    product = _catalogue_product(source, product_id)
    count = current_domain.process(
        AddToCart(
            cart_id=body.cart_id,
            product_id=str(product.id),
            title=product.title,
            price=product.price,
            image=product.image,
            category=product.category,
            quantity=1,
        ),
        asynchronous=False,
    )
    current_domain.process(RemoveFromWishlist(customer_id=customer_id, product_id=product_id), asynchronous=False)
    return ItemCountResponse(item_count=count)
