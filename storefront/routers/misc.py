"""Health, image cache and session housekeeping endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from storefront.errors import ERROR_IMAGE_HOST_NOT_ALLOWED, ERROR_INVALID_IMAGE_SOURCE
from storefront.image_cache import ImageCache
from storefront.storage import KeyValueStorage, clear_site_data, is_cache_enabled
from .deps import get_image_cache, get_session_storage

router = APIRouter(tags=["misc"])


@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "storefront"}


@router.get("/images/resolve")
def resolve_image(src: str, cache: ImageCache = Depends(get_image_cache)):
    if not src.startswith(("http://", "https://")):
        raise HTTPException(status_code=400, detail=ERROR_INVALID_IMAGE_SOURCE)
    if not cache.is_allowed(src):
        raise HTTPException(status_code=400, detail=ERROR_IMAGE_HOST_NOT_ALLOWED)
    lookup = cache.resolve(src)
    return {"src": lookup.src, "cached_src": lookup.cached_src, "loaded": lookup.loaded}


@router.post("/images/cache/clear")
def clear_image_cache(cache: ImageCache = Depends(get_image_cache)):
    cache.clear()
    return {"status": "ok"}


@router.get("/session")
def get_session_info(storage: KeyValueStorage = Depends(get_session_storage)):
    return {"keys": sorted(storage.keys()), "cache_enabled": is_cache_enabled(storage)}


@router.post("/session/clear")
def clear_session(storage: KeyValueStorage = Depends(get_session_storage)):
    """Forget everything but cookie consent for this session."""
    removed = clear_site_data(storage)
    return {"status": "ok", "removed": sorted(removed)}
