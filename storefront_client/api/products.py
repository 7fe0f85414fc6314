"""Product catalogue endpoints."""

from typing import Any, Iterable, Optional

from .session import StorefrontSession
from ..logging import get_logger

logger = get_logger(__name__)


def normalize_product(raw: dict) -> dict:
    """Copy a product, filling ``id`` from ``uuid`` or ``_id`` if needed."""
    product = dict(raw)
    product["id"] = raw.get("id") or raw.get("uuid") or raw.get("_id")
    return product


def collect_filter_options(products: Iterable[dict]) -> dict:
    """
    Distinct categories and subcategories present in a product list.

    Returns:
        {'categories': [...], 'subcategories': [...]} both sorted
    """
    categories = set()
    subcategories = set()
    for p in products:
        if p.get("category"):
            categories.add(p["category"])
        if p.get("subcategory"):
            subcategories.add(p["subcategory"])
    return {
        "categories": sorted(categories),
        "subcategories": sorted(subcategories),
    }


def list_products(
    session: StorefrontSession,
    max_results: Optional[int] = None,
    page: Optional[int] = None,
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    use_cache: bool = True,
) -> dict:
    """
    List products with pagination and filters.

    Returns:
        {'products': [...], 'total': int, 'page': int, 'maxResults': int}
    """
    params = {
        "maxResults": max_results,
        "page": page,
        "category": category,
        "subcategory": subcategory,
    }
    data = session.request("GET", "/products", params=params, use_cache=use_cache)
    result = dict(data)
    result["products"] = [normalize_product(p) for p in data.get("products", [])]
    return result


def get_product(session: StorefrontSession, product_id: str, use_cache: bool = True) -> dict:
    data = session.request("GET", f"/products/{product_id}", use_cache=use_cache)
    return normalize_product(data)


def get_featured_products(session: StorefrontSession, use_cache: bool = True) -> list[dict]:
    """Featured products (at most 6, enforced by the server)."""
    data = session.request("GET", "/products/featured", use_cache=use_cache)
    return [normalize_product(p) for p in data]


def get_categories(session: StorefrontSession, use_cache: bool = True) -> list:
    return session.request("GET", "/products/categories", use_cache=use_cache)


def _image_files(image: Optional[Any]) -> Optional[dict]:
    return {"image": image} if image is not None else None


def create_product(session: StorefrontSession, fields: dict, image: Optional[Any] = None) -> dict:
    """
    Create a product (admin).

    Args:
        session: Authenticated admin session
        fields: Form fields (name, price, category, ...)
        image: Optional file object or (filename, fileobj, content_type) tuple
    """
    data = session.request("POST", "/products", data=fields, files=_image_files(image))
    session.cache.invalidate_products()
    return normalize_product(data)


def update_product(
    session: StorefrontSession,
    product_id: str,
    fields: dict,
    image: Optional[Any] = None,
) -> dict:
    data = session.request("PUT", f"/products/{product_id}", data=fields, files=_image_files(image))
    session.cache.invalidate_product(product_id)
    return normalize_product(data)


def delete_product(session: StorefrontSession, product_id: str) -> None:
    """Delete a product (admin). The server also removes its stored image."""
    session.request("DELETE", f"/products/{product_id}")
    session.cache.invalidate_product(product_id)


def toggle_featured(session: StorefrontSession, product_id: str, is_featured: bool) -> dict:
    """
    Mark or unmark a product as featured (admin).

    Raises:
        ApiError: with code FEATURED_LIMIT_REACHED when 6 are already featured
    """
    data = session.request(
        "PATCH",
        f"/products/{product_id}/featured",
        json={"isFeatured": is_featured},
    )
    session.cache.invalidate_products()
    return normalize_product(data)


def delete_products_bulk(session: StorefrontSession, ids: list[str]) -> dict:
    """Delete several products at once (admin)."""
    result = session.request("DELETE", "/products/bulk", json={"ids": list(ids)})
    session.cache.invalidate_products()
    logger.info("Bulk deleted %s products", (result or {}).get("deletedCount", len(ids)))
    return result
