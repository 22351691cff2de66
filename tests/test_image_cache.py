"""Tests for the image cache service"""
import httpx
import pytest

from storefront.image_cache import ImageCache

SRC = "https://res.cloudinary.com/demo/image/upload/mouse.png"


def _cache(handler):
    return ImageCache(client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_successful_probe_is_cached():
    """Test only the first lookup hits the network"""
    calls = []

    def handler(request):
        calls.append(request)
        assert request.method == "HEAD"
        return httpx.Response(200, headers={"content-type": "image/png"})

    cache = _cache(handler)

    first = cache.resolve(SRC)
    second = cache.resolve(SRC)

    assert first.loaded and not first.from_cache
    assert second.cached_src == SRC and second.from_cache
    assert len(calls) == 1
    assert SRC in cache
    assert len(cache) == 1


def test_failed_probe_is_not_cached():
    cache = _cache(lambda request: httpx.Response(404))

    lookup = cache.resolve(SRC)

    assert lookup.loaded is False
    assert lookup.cached_src is None
    assert SRC not in cache


def test_non_image_content_is_rejected():
    cache = _cache(lambda request: httpx.Response(200, headers={"content-type": "text/html"}))
    assert cache.resolve(SRC).loaded is False


def test_transport_error_is_not_cached():
    def handler(request):
        raise httpx.ConnectTimeout("timeout", request=request)

    assert _cache(handler).resolve(SRC).loaded is False


def test_clear_forgets_entries():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, headers={"content-type": "image/webp"})

    cache = _cache(handler)
    cache.resolve(SRC)
    cache.clear()
    cache.resolve(SRC)

    assert len(calls) == 2


def test_instances_are_independent():
    ok = lambda request: httpx.Response(200, headers={"content-type": "image/png"})  # noqa: E731
    a, b = _cache(ok), _cache(ok)

    a.resolve(SRC)

    assert SRC in a
    assert SRC not in b


@pytest.mark.parametrize("src", [
    "http://169.254.169.254/latest/meta-data/",
    "http://localhost:8000/admin",
    "https://res.cloudinary.com.evil.test/x.png",
    "ftp://res.cloudinary.com/x.png",
])
def test_hosts_outside_allow_list_are_never_probed(src):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, headers={"content-type": "image/png"})

    cache = _cache(handler)

    assert cache.is_allowed(src) is False
    assert cache.resolve(src).loaded is False
    assert calls == []
    assert len(cache) == 0


def test_allowed_hosts_can_be_overridden():
    cache = ImageCache(
        client=httpx.Client(transport=httpx.MockTransport(
            lambda request: httpx.Response(200, headers={"content-type": "image/png"})
        )),
        allowed_hosts=["cdn.example.com"],
    )

    assert cache.resolve("https://cdn.example.com/a.png").loaded is True
    assert cache.resolve(SRC).loaded is False


def test_redirect_is_not_followed():
    cache = _cache(lambda request: httpx.Response(302, headers={"location": "http://127.0.0.1/"}))
    assert cache.resolve(SRC).loaded is False


def test_least_recently_used_entry_is_evicted():
    ok = lambda request: httpx.Response(200, headers={"content-type": "image/png"})  # noqa: E731
    cache = ImageCache(client=httpx.Client(transport=httpx.MockTransport(ok)), max_entries=2)
    first, second, third = (f"https://res.cloudinary.com/demo/{n}.png" for n in range(3))

    cache.resolve(first)
    cache.resolve(second)
    cache.resolve(first)
    cache.resolve(third)

    assert len(cache) == 2
    assert first in cache
    assert second not in cache
    assert third in cache
