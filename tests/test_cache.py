"""Tests for the TTL response cache."""

from unittest.mock import MagicMock

import pytest

from storefront_client.cache import (
    CacheMarkers,
    CacheTTLConfig,
    DEFAULT_TTL_MINUTES,
    MINUTE_MS,
    ResponseCache,
)


def test_get_empty(cache):
    assert cache.get("/products") is None


def test_set_and_get(cache):
    cache.set("/products", {"products": [1, 2]})
    assert cache.get("/products") == {"products": [1, 2]}


def test_payload_returned_as_is(cache):
    payload = [{"id": "1"}]
    cache.set("/favorites", payload)
    assert cache.get("/favorites") is payload


def test_key_without_params_is_path():
    assert ResponseCache.make_key("/products") == "/products"
    assert ResponseCache.make_key("/products", {}) == "/products"


def test_key_sorts_params():
    assert ResponseCache.make_key("/products", {"page": 2, "category": "rings"}) == \
        "/products?category=rings&page=2"


def test_key_order_independent():
    a = ResponseCache.make_key("/p", {"a": 1, "b": 2})
    b = ResponseCache.make_key("/p", {"b": 2, "a": 1})
    assert a == b == "/p?a=1&b=2"


def test_params_and_plain_path_are_distinct(cache):
    cache.set("/products", ["rings"], {"category": "rings"})
    cache.set("/products", ["all"], {})
    assert cache.get("/products") == ["all"]
    assert cache.get("/products", {"category": "rings"}) == ["rings"]


def test_fresh_until_ttl_boundary(cache, clock):
    cache.set("/products/7", {"id": "7"})
    clock.advance(minutes=30)
    assert cache.get("/products/7") == {"id": "7"}
    clock.advance(ms=1)
    assert cache.get("/products/7") is None


def test_expired_entry_is_evicted_on_get(cache, clock):
    cache.set("/favorites", [])
    clock.advance(minutes=6)
    assert cache.stats().keys == ["/favorites"]
    assert cache.get("/favorites") is None
    stats = cache.stats()
    assert stats.count == 0
    assert "/favorites" not in stats.keys


def test_read_does_not_extend_lifetime(cache, clock):
    cache.set("/favorites", ["a"])
    clock.advance(minutes=4)
    assert cache.get("/favorites") == ["a"]
    clock.advance(minutes=1, ms=1)
    assert cache.get("/favorites") is None


def test_overwrite_resets_lifetime(cache, clock):
    cache.set("/favorites", ["old"])
    clock.advance(minutes=4)
    cache.set("/favorites", ["new"])
    clock.advance(minutes=4)
    assert cache.get("/favorites") == ["new"]
    assert cache.stats().count == 1


def test_stats_includes_logically_expired_entries(cache, clock):
    cache.set("/users", [])
    clock.advance(minutes=60)
    assert cache.stats().to_dict() == {"count": 1, "keys": ["/users"]}


@pytest.mark.parametrize("path,params,minutes", [
    ("/products/featured", None, 30),
    ("/products/categories", None, 5),
    ("/products/42", None, 30),
    ("/products", None, 30),
    ("/products", {"category": "rings"}, 30),
    ("/favorites/count", None, 5),
    ("/favorites", None, 5),
    ("/favorites/check/3", None, 5),
    ("/users", {"page": 2}, 10),
    ("/users/9", None, 10),
    ("/orders", None, DEFAULT_TTL_MINUTES),
])
def test_default_ttl_policy(path, params, minutes):
    assert ResponseCache().ttl_for(path, params) == minutes * MINUTE_MS


def test_ttl_overrides_apply_per_kind():
    ttl = CacheTTLConfig(
        products=1, product_list=2, featured_products=3, categories=4,
        favorites=6, favorites_count=7, users_list=8,
    )
    cache = ResponseCache(ttl)
    assert cache.ttl_for("/products/1") == 1 * MINUTE_MS
    assert cache.ttl_for("/products") == 2 * MINUTE_MS
    assert cache.ttl_for("/products/featured") == 3 * MINUTE_MS
    assert cache.ttl_for("/products/categories") == 4 * MINUTE_MS
    assert cache.ttl_for("/favorites") == 6 * MINUTE_MS
    assert cache.ttl_for("/favorites/count") == 7 * MINUTE_MS
    assert cache.ttl_for("/users") == 8 * MINUTE_MS


def test_partial_override_keeps_defaults():
    cache = ResponseCache(CacheTTLConfig(users_list=1))
    assert cache.ttl_for("/users") == MINUTE_MS
    assert cache.ttl_for("/products") == 30 * MINUTE_MS


def test_featured_rule_beats_generic_product_rules():
    cache = ResponseCache(CacheTTLConfig(featured_products=1, products=2, product_list=3))
    assert cache.ttl_for("/products/featured") == MINUTE_MS
    assert cache.ttl_for("/products/featured", {"limit": 6}) == MINUTE_MS


def test_item_detail_with_query_uses_list_ttl():
    cache = ResponseCache(CacheTTLConfig(products=1, product_list=2))
    assert cache.ttl_for("/products/42") == MINUTE_MS
    assert cache.ttl_for("/products/42", {"expand": "images"}) == 2 * MINUTE_MS


def test_ttl_is_fixed_at_write_time(clock):
    cache = ResponseCache(CacheTTLConfig(favorites=5), clock=clock)
    cache.set("/favorites", [])
    cache.ttl_config.favorites = 60
    clock.advance(minutes=6)
    assert cache.get("/favorites") is None


def test_custom_markers():
    markers = CacheMarkers(products="/items", featured_products="/items/featured")
    cache = ResponseCache(CacheTTLConfig(product_list=2, featured_products=3), markers=markers)
    assert cache.ttl_for("/items") == 2 * MINUTE_MS
    assert cache.ttl_for("/items/featured") == 3 * MINUTE_MS
    assert cache.ttl_for("/products") == DEFAULT_TTL_MINUTES * MINUTE_MS


def test_invalidate_substring(cache):
    for key in ("/items", "/items/7", "/other"):
        cache.set(key, key)
    cache.set("/items", "filtered", {"category": "x"})

    removed = cache.invalidate("/items")

    assert removed == 3
    assert cache.stats().keys == ["/other"]


def test_invalidate_is_literal_not_regex(cache):
    cache.set("/products", [])
    cache.set("/favorites", [])
    assert cache.invalidate("/pro.*") == 0
    assert cache.stats().count == 2


def test_invalidate_resource_group(cache):
    cache.set("/products", [])
    cache.set("/products", [], {"page": 2})
    cache.set("/products/featured", [])
    cache.set("/favorites", [])
    cache.invalidate_resource_group("products")
    assert cache.stats().keys == ["/favorites"]


def test_invalidate_single_item_cascades(cache):
    cache.set("/items/7", {"id": "7"})
    cache.set("/items", [{"id": "7"}])
    cache.set("/users", [])
    cache.invalidate_single_item("items", "7")
    assert cache.stats().keys == ["/users"]


def test_invalidate_product_clears_lists_and_detail(cache):
    cache.set("/products/7", {"id": "7"})
    cache.set("/products/8", {"id": "8"})
    cache.set("/products", [], {"category": "rings"})
    cache.set("/favorites/count", {"count": 1})
    cache.invalidate_product("7")
    assert cache.stats().keys == ["/favorites/count"]


def test_named_group_helpers(cache):
    cache.set("/favorites", [])
    cache.set("/favorites/count", {"count": 0})
    cache.set("/users", [])
    cache.set("/products", [])
    cache.invalidate_favorites()
    assert sorted(cache.stats().keys) == ["/products", "/users"]
    cache.invalidate_users()
    assert cache.stats().keys == ["/products"]
    cache.invalidate_products()
    assert cache.stats().count == 0


def test_clear(cache):
    cache.set("/products", [])
    cache.set("/users", [])
    assert cache.clear() == 2
    assert len(cache) == 0
    assert cache.get("/products") is None


def test_get_default_tells_cached_none_from_miss(cache, clock):
    missing = object()
    assert cache.get("/favorites/count", default=missing) is missing
    cache.set("/favorites/count", None)
    assert cache.get("/favorites/count", default=missing) is None
    clock.advance(minutes=6)
    assert cache.get("/favorites/count", default=missing) is missing


def test_len_takes_lock(cache):
    cache.set("/products", [])
    cache._lock = MagicMock()
    assert len(cache) == 1
    cache._lock.__enter__.assert_called_once()
