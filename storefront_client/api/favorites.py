"""Favorites of the logged-in user."""

from .products import normalize_product
from .session import StorefrontSession


def list_favorites(session: StorefrontSession, use_cache: bool = True) -> list[dict]:
    data = session.request("GET", "/favorites", use_cache=use_cache)
    return [normalize_product(p) for p in data]


def add_favorite(session: StorefrontSession, product_id: str) -> dict:
    result = session.request("POST", "/favorites", json={"productId": product_id})
    session.cache.invalidate_favorites()
    return result


def remove_favorite(session: StorefrontSession, product_id: str) -> dict:
    result = session.request("DELETE", f"/favorites/{product_id}")
    session.cache.invalidate_favorites()
    return result


def clear_favorites(session: StorefrontSession) -> dict:
    result = session.request("DELETE", "/favorites")
    session.cache.invalidate_favorites()
    return result


def check_favorite(session: StorefrontSession, product_id: str, use_cache: bool = True) -> bool:
    data = session.request("GET", f"/favorites/check/{product_id}", use_cache=use_cache)
    return bool(data.get("isFavorite"))


def count_favorites(session: StorefrontSession, use_cache: bool = True) -> int:
    data = session.request("GET", "/favorites/count", use_cache=use_cache)
    return int(data.get("count", 0))
