"""
Storefront configuration.

Read once from the environment at import time. The API entry point loads a
local .env file before importing this module.
"""

import os


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_list(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.environ.get(name, default).split(",") if item.strip()]


# "memory" keeps every session in-process; "redis" uses Upstash
STORAGE_BACKEND = os.environ.get("STOREFRONT_STORAGE", "memory").strip().lower()

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# 0 disables expiry of session keys
SESSION_TTL_SECONDS = _env_int("SESSION_TTL_SECONDS", 2592000)

# Mirror cart/wishlist events onto Redis streams
REALTIME_ENABLED = _env_bool("REALTIME_ENABLED")

CATALOG_API_URL = os.environ.get("CATALOG_API_URL", "http://localhost:3000").rstrip("/")
CATALOG_TIMEOUT_SECONDS = float(os.environ.get("CATALOG_TIMEOUT_SECONDS", "5.0"))

IMAGE_PROBE_TIMEOUT_SECONDS = float(os.environ.get("IMAGE_PROBE_TIMEOUT_SECONDS", "5.0"))

# Only these hosts are ever probed by the image cache
IMAGE_ALLOWED_HOSTS = _env_list(
    "IMAGE_ALLOWED_HOSTS",
    "images.unsplash.com,via.placeholder.com,lh3.googleusercontent.com,res.cloudinary.com",
)
IMAGE_CACHE_MAX_ENTRIES = _env_int("IMAGE_CACHE_MAX_ENTRIES", 1000)

# In-process backend only; least recently used sessions are dropped past this
MEMORY_MAX_SESSIONS = _env_int("MEMORY_MAX_SESSIONS", 10000)

CORS_ORIGINS = _env_list("CORS_ORIGINS", "*")
