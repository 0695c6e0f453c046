"""
Cart Router

Session cart endpoints. The cart is keyed by the `cart_session` cookie,
issued on first contact, so anonymous visitors can fill a cart before
signing in. Every endpoint returns the cart summary.
"""
import secrets

from fastapi import APIRouter, Cookie, Depends, HTTPException, Response

from thermal.cart import CartStore, KeyValueStorage, get_cart_store
from thermal.cart.storage import get_default_storage
from thermal.catalog import MEMBERSHIP_PLANS, PUNCH_CARD_OPTIONS, catalog_cart_item
from thermal.errors import ERROR_CATALOG_ITEM_NOT_FOUND
from thermal.logging import get_logger, sanitize_string_for_logging
from .models import AddCartItemRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])

CART_SESSION_COOKIE = "cart_session"
CART_SESSION_MAX_AGE = 86400


def get_cart_storage() -> KeyValueStorage:
    return get_default_storage()


def get_cart_session(
    response: Response,
    cart_session: str | None = Cookie(None, alias=CART_SESSION_COOKIE),
) -> str:
    """Cart session id from the cookie, issuing a fresh one when absent."""
    if cart_session:
        return cart_session
    cart_session = secrets.token_urlsafe(16)
    response.set_cookie(
        CART_SESSION_COOKIE,
        cart_session,
        max_age=CART_SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
    )
    return cart_session


def get_session_cart(
    session_id: str = Depends(get_cart_session),
    storage: KeyValueStorage = Depends(get_cart_storage),
) -> CartStore:
    return get_cart_store(session_id, storage=storage)


@router.get("/cart")
def get_cart(cart: CartStore = Depends(get_session_cart)):
    """Current cart contents and totals."""
    return cart.summary()


@router.get("/catalog")
def get_catalog():
    """Membership plans and punch-card packages on sale."""
    return {"plans": MEMBERSHIP_PLANS, "punch_cards": PUNCH_CARD_OPTIONS}


@router.post("/cart/items")
def add_cart_item(request: AddCartItemRequest, cart: CartStore = Depends(get_session_cart)):
    """Add a membership plan (replaces any other) or punch-card package by catalog id."""
    item = catalog_cart_item(request.id, request.quantity)
    if item is None:
        logger.warning(f"Unknown catalog item {sanitize_string_for_logging(request.id)}")
        raise HTTPException(status_code=404, detail=ERROR_CATALOG_ITEM_NOT_FOUND)

    cart.add_item(item)
    return cart.summary()


@router.patch("/cart/items/{item_id}")
def update_cart_item(
    item_id: str,
    request: UpdateCartItemRequest,
    cart: CartStore = Depends(get_session_cart),
):
    """Update item quantity (0 or less removes it)."""
    cart.update_quantity(item_id, request.quantity)
    return cart.summary()


@router.delete("/cart/items/{item_id}")
def remove_cart_item(item_id: str, cart: CartStore = Depends(get_session_cart)):
    cart.remove_item(item_id)
    return cart.summary()


@router.delete("/cart")
def clear_cart(cart: CartStore = Depends(get_session_cart)):
    cart.clear_cart()
    return cart.summary()
