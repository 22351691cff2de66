"""
Image Cache Service

Remembers which product image URLs are known to load, so repeated renders
of the same image skip the network probe. One instance is created at
application start and can be cleared at any time.

Only URLs on the configured image hosts are probed; anything else is
rejected without a request leaving the server.
"""
from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import urlsplit

import httpx

from storefront import config
from storefront.logging import get_logger, sanitize_string_for_logging

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImageLookup:
    """Result of resolving an image URL."""
    src: str
    cached_src: Optional[str]
    from_cache: bool = False

    @property
    def loaded(self) -> bool:
        return self.cached_src is not None


class ImageCache:
    """
    Cache of image URLs that were probed successfully.

    Failed probes are not cached; the next lookup probes again. Past
    `max_entries` the least recently resolved URL is forgotten.

    Usage:
        cache = ImageCache()
        lookup = cache.resolve("https://res.cloudinary.com/.../mouse.png")
        cache.clear()
        cache.close()
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        allowed_hosts: Optional[Iterable[str]] = None,
        max_entries: Optional[int] = None,
    ):
        self._client = client or httpx.Client(
            timeout=config.IMAGE_PROBE_TIMEOUT_SECONDS,
            # Redirects could leave the allowed hosts
            follow_redirects=False,
        )
        hosts = config.IMAGE_ALLOWED_HOSTS if allowed_hosts is None else allowed_hosts
        self.allowed_hosts = frozenset(host.lower() for host in hosts)
        self.max_entries = max(1, max_entries or config.IMAGE_CACHE_MAX_ENTRIES)
        self._entries: OrderedDict[str, str] = OrderedDict()

    def __contains__(self, src: str) -> bool:
        return src in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def is_allowed(self, src: str) -> bool:
        """Whether `src` is an http(s) URL on one of the allowed image hosts."""
        try:
            parts = urlsplit(src)
        except ValueError:
            return False
        if parts.scheme not in ("http", "https") or not parts.hostname:
            return False
        return parts.hostname.lower() in self.allowed_hosts

    def _probe(self, src: str) -> bool:
        try:
            response = self._client.head(src)
        except httpx.HTTPError as e:
            logger.warning(f"Image probe failed for {sanitize_string_for_logging(src)}: {type(e).__name__}")
            return False

        if not response.is_success:
            logger.warning(f"Image probe for {sanitize_string_for_logging(src)} returned {response.status_code}")
            return False

        content_type = response.headers.get("content-type", "")
        # Some CDNs answer HEAD without a content type
        return not content_type or content_type.startswith("image/")

    def resolve(self, src: str) -> ImageLookup:
        """Return the cached URL for `src`, probing it first if it is not cached yet."""
        if src in self._entries:
            self._entries.move_to_end(src)
            return ImageLookup(src=src, cached_src=self._entries[src], from_cache=True)

        if not self.is_allowed(src):
            logger.warning(f"Refusing to probe image outside allowed hosts: {sanitize_string_for_logging(src)}")
            return ImageLookup(src=src, cached_src=None)

        if not self._probe(src):
            return ImageLookup(src=src, cached_src=None)

        self._entries[src] = src
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return ImageLookup(src=src, cached_src=src)

    def clear(self) -> None:
        logger.info(f"Clearing image cache ({len(self._entries)} entries)")
        self._entries.clear()

    def close(self) -> None:
        self._client.close()
