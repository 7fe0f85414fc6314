"""In-memory TTL cache for storefront API responses.

Entries are keyed by request path plus sorted query parameters. Each entry
gets its lifetime when it is written, from a policy table keyed on resource
markers in the path. Reads never extend a lifetime, and expired entries are
dropped the next time they are read (there is no background sweep).

Mutations on the server are reflected by invalidating every key that
contains a resource marker as a plain substring.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from .logging import get_logger

logger = get_logger(__name__)

MINUTE_MS = 60 * 1000
DEFAULT_TTL_MINUTES = 5


@dataclass
class CacheTTLConfig:
    """TTL per resource kind, in minutes."""
    products: float = 30          # Single product detail
    product_list: float = 30      # Product listings (any filters)
    featured_products: float = 30
    categories: float = 5
    favorites: float = 5
    favorites_count: float = 5
    users_list: float = 10        # Admin only


@dataclass
class CacheMarkers:
    """
    Path substrings used to classify requests.

    Markers are matched with plain containment, so pick them so that no
    marker is accidentally contained in an unrelated resource's path.
    """
    products: str = "/products"
    featured_products: str = "/products/featured"
    categories: str = "/products/categories"
    favorites: str = "/favorites"
    favorites_count: str = "/favorites/count"
    users: str = "/users"


@dataclass
class CacheEntry:
    """A cached payload with the lifetime assigned when it was written."""
    payload: Any
    stored_at: float  # ms since epoch
    ttl_millis: float

    def is_fresh(self, now: float) -> bool:
        return now - self.stored_at <= self.ttl_millis


@dataclass
class CacheStats:
    """Snapshot of the store, including entries not yet lazily evicted."""
    count: int
    keys: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"count": self.count, "keys": self.keys}


def _now_ms() -> float:
    return time.time() * 1000


def _marker_root(marker: str) -> str:
    return marker if marker.startswith("/") else f"/{marker}"


class ResponseCache:
    """
    Thread-safe in-memory cache with per-resource TTL policy.

    Usage:
        cache = ResponseCache(CacheTTLConfig(users_list=2))

        cached = cache.get("/products", {"category": "rings"})
        if cached is None:
            cached = fetch_products(category="rings")
            cache.set("/products", cached, {"category": "rings"})

        # After a product is edited:
        cache.invalidate_product(product_id)
    """

    def __init__(
        self,
        ttl_config: CacheTTLConfig | None = None,
        markers: CacheMarkers | None = None,
        clock: Callable[[], float] = _now_ms,
    ):
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self.ttl_config = ttl_config or CacheTTLConfig()
        self.markers = markers or CacheMarkers()
        self._clock = clock

    @staticmethod
    def make_key(path: str, params: Mapping[str, Any] | None = None) -> str:
        """
        Build the cache key for a request.

        Parameters are sorted by name so insertion order never matters:
        ``/products?category=rings&page=2``.
        """
        if not params:
            return path
        query = "&".join(f"{name}={params[name]}" for name in sorted(params))
        return f"{path}?{query}"

    def ttl_for(self, path: str, params: Mapping[str, Any] | None = None) -> float:
        """Resolve the TTL in milliseconds for a request."""
        return self._resolve_ttl(path, self.make_key(path, params))

    def _resolve_ttl(self, path: str, key: str) -> float:
        # Most specific rule first
        m, ttl = self.markers, self.ttl_config
        if m.featured_products in path:
            minutes = ttl.featured_products
        elif m.categories in path:
            minutes = ttl.categories
        elif f"{m.products}/" in path and "?" not in key:
            minutes = ttl.products
        elif m.products in path:
            minutes = ttl.product_list
        elif m.favorites_count in path:
            minutes = ttl.favorites_count
        elif m.favorites in path:
            minutes = ttl.favorites
        elif m.users in path:
            minutes = ttl.users_list
        else:
            minutes = DEFAULT_TTL_MINUTES
        return minutes * MINUTE_MS

    def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        default: Any = None,
    ) -> Any | None:
        """
        Return the cached payload, or ``default`` if absent or expired.

        Pass a sentinel as ``default`` to tell a cached None from a miss.
        """
        key = self.make_key(path, params)
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return default
            if not entry.is_fresh(self._clock()):
                del self._store[key]
                logger.debug("[Cache EXPIRED] %s", key)
                return default
        logger.debug("[Cache HIT] %s", key)
        return entry.payload

    def set(self, path: str, payload: Any, params: Mapping[str, Any] | None = None) -> None:
        """Store a payload, replacing any entry for the same key."""
        key = self.make_key(path, params)
        ttl_millis = self._resolve_ttl(path, key)
        with self._lock:
            self._store[key] = CacheEntry(payload, self._clock(), ttl_millis)
        logger.debug("[Cache SET] %s (TTL: %ss)", key, ttl_millis / 1000)

    def invalidate(self, substring: str) -> int:
        """
        Remove every entry whose key contains ``substring``.

        This is literal containment, not a pattern. Returns the number of
        entries removed.
        """
        with self._lock:
            keys = [k for k in self._store if substring in k]
            for k in keys:
                del self._store[k]
        for k in keys:
            logger.debug("[Cache INVALIDATE] %s", k)
        return len(keys)

    def invalidate_resource_group(self, marker: str) -> int:
        """Remove all list and item entries under a resource."""
        return self.invalidate(_marker_root(marker))

    def invalidate_single_item(self, marker: str, item_id: str) -> int:
        """
        Remove one item's detail entry and every entry of its resource.

        Listings may embed a copy of the item, so they go too.
        """
        root = _marker_root(marker)
        return self.invalidate(f"{root}/{item_id}") + self.invalidate(root)

    def invalidate_products(self) -> int:
        return self.invalidate_resource_group(self.markers.products)

    def invalidate_product(self, product_id: str) -> int:
        return self.invalidate_single_item(self.markers.products, product_id)

    def invalidate_favorites(self) -> int:
        return self.invalidate_resource_group(self.markers.favorites)

    def invalidate_users(self) -> int:
        return self.invalidate_resource_group(self.markers.users)

    def clear(self) -> int:
        """Remove all entries. Returns the number of entries cleared."""
        with self._lock:
            count = len(self._store)
            self._store.clear()
        logger.debug("[Cache CLEAR] %d entries removed", count)
        return count

    def stats(self) -> CacheStats:
        with self._lock:
            keys = list(self._store)
        return CacheStats(count=len(keys), keys=keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
