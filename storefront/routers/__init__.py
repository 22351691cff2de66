"""HTTP routers exposing the session stores."""
from fastapi import APIRouter

from .cart import router as cart_router
from .misc import router as misc_router
from .wishlist import router as wishlist_router

router = APIRouter(prefix="/api")
router.include_router(cart_router)
router.include_router(wishlist_router)
router.include_router(misc_router)

__all__ = ["router"]
