"""
Cart Router

Session cart endpoints. Every response carries the full cart plus the
summary the cart sidebar renders, so the client never re-fetches after a
mutation.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from storefront.cart import CartStore
from storefront.cart.stock import StockLevels
from storefront.catalog import CatalogClient
from storefront.checkout import complete_checkout, summarize
from storefront.errors import CatalogUnavailable, ERROR_INVALID_PROMO_CODE, ERROR_ITEM_NOT_IN_CART
from storefront.logging import get_logger
from .deps import get_cart_store, get_catalog_client
from .models import (
    AddToCartRequest,
    ApplyPromoRequest,
    RemoveCartItemRequest,
    UpdateCartItemRequest,
    UpdateWarrantyRequest,
)

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


def _format_cart_response(cart: CartStore, stock: Optional[StockLevels] = None) -> dict:
    items = cart.get_cart()
    summary = summarize(items, stock)
    return {
        "items": [item.to_dict() for item in items],
        "promo_code": cart.get_applied_promo(),
        **summary.to_dict(),
    }


@router.get("/cart")
def get_cart(
    check_stock: bool = False,
    cart: CartStore = Depends(get_cart_store),
    catalog: CatalogClient = Depends(get_catalog_client),
):
    """Get the session cart, optionally flagging lines the catalog cannot cover."""
    stock = None
    if check_stock:
        try:
            stock = catalog.fetch_stock_levels()
        except CatalogUnavailable as e:
            raise HTTPException(status_code=503, detail=str(e))
    return _format_cart_response(cart, stock)


@router.post("/cart/add")
def add_to_cart(request: AddToCartRequest, cart: CartStore = Depends(get_cart_store)):
    """Add one unit of a product configuration."""
    cart.add_to_cart(request.to_line_item())
    return _format_cart_response(cart)


@router.patch("/cart/item")
def update_cart_item(request: UpdateCartItemRequest, cart: CartStore = Depends(get_cart_store)):
    """Set a line's quantity (<= 0 removes it)."""
    updated = cart.update_qty(
        request.id,
        request.quantity,
        color=request.color,
        selected_ram=request.selected_ram,
        selected_storage=request.selected_storage,
        warranty=request.get_warranty(),
    )
    if not updated:
        raise HTTPException(status_code=404, detail=ERROR_ITEM_NOT_IN_CART)
    return _format_cart_response(cart)


@router.post("/cart/remove")
def remove_cart_item(request: RemoveCartItemRequest, cart: CartStore = Depends(get_cart_store)):
    """Remove a line; removing a missing line is not an error."""
    cart.remove_from_cart(
        request.id,
        color=request.color,
        selected_ram=request.selected_ram,
        selected_storage=request.selected_storage,
        warranty=request.get_warranty(),
    )
    return _format_cart_response(cart)


@router.patch("/cart/warranty")
def update_cart_warranty(request: UpdateWarrantyRequest, cart: CartStore = Depends(get_cart_store)):
    """Swap (or drop) the warranty on a line and re-price it."""
    updated = cart.update_warranty(
        request.id,
        request.new_warranty.to_warranty() if request.new_warranty else None,
        color=request.color,
        selected_ram=request.selected_ram,
        selected_storage=request.selected_storage,
        current_warranty=request.current_warranty.to_warranty() if request.current_warranty else None,
    )
    if not updated:
        raise HTTPException(status_code=404, detail=ERROR_ITEM_NOT_IN_CART)
    return _format_cart_response(cart)


@router.post("/cart/clear")
def clear_cart(cart: CartStore = Depends(get_cart_store)):
    cart.clear_cart()
    return _format_cart_response(cart)


@router.post("/cart/promo/apply")
def apply_cart_promo(request: ApplyPromoRequest, cart: CartStore = Depends(get_cart_store)):
    """Store the promo code; validating it is the payment step's job."""
    code = request.code.strip().upper()
    if not code:
        raise HTTPException(status_code=400, detail=ERROR_INVALID_PROMO_CODE)
    cart.apply_promo_code(code)
    return _format_cart_response(cart)


@router.post("/cart/promo/remove")
def remove_cart_promo(cart: CartStore = Depends(get_cart_store)):
    cart.clear_promo_code()
    return _format_cart_response(cart)


@router.post("/cart/checkout/complete")
def complete_cart_checkout(cart: CartStore = Depends(get_cart_store)):
    """Called after the payment gateway confirms the order."""
    summary = complete_checkout(cart)
    return {"status": "ok", "order": summary.to_dict()}
