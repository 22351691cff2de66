"""Wishlist Router"""
from fastapi import APIRouter, Depends, HTTPException

from storefront.cart import CartStore
from storefront.errors import ERROR_ITEM_NOT_IN_WISHLIST
from storefront.wishlist import WishlistStore
from .deps import get_cart_store, get_wishlist_store
from .models import WishlistItemRequest

router = APIRouter(tags=["wishlist"])


def _format_wishlist_response(wishlist: WishlistStore) -> dict:
    items = wishlist.get_wishlist()
    return {"items": [item.to_dict() for item in items], "count": len(items)}


@router.get("/wishlist")
def get_wishlist(wishlist: WishlistStore = Depends(get_wishlist_store)):
    return _format_wishlist_response(wishlist)


@router.post("/wishlist/toggle")
def toggle_wishlist(request: WishlistItemRequest, wishlist: WishlistStore = Depends(get_wishlist_store)):
    """Heart button on a product card."""
    added = wishlist.toggle_wishlist(request.to_wishlist_item())
    return {"added": added, **_format_wishlist_response(wishlist)}


@router.delete("/wishlist/{item_id}")
def remove_from_wishlist(item_id: str, wishlist: WishlistStore = Depends(get_wishlist_store)):
    wishlist.remove_from_wishlist(item_id)
    return _format_wishlist_response(wishlist)


@router.post("/wishlist/{item_id}/cart")
def move_to_cart(
    item_id: str,
    wishlist: WishlistStore = Depends(get_wishlist_store),
    cart: CartStore = Depends(get_cart_store),
):
    """Add a saved product to the cart, keeping it in the wishlist."""
    line = wishlist.add_to_cart(item_id, cart)
    if line is None:
        raise HTTPException(status_code=404, detail=ERROR_ITEM_NOT_IN_WISHLIST)
    return {"item": line.to_dict(), "cart_count": cart.item_count()}
