"""Configuration management for the storefront client."""

import os
from dotenv import load_dotenv

from .cache import CacheTTLConfig

# Load environment variables from .env file
load_dotenv()


def _minutes(name: str, default: float) -> float:
    """Read a TTL override in minutes, falling back to the default."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


class Config:
    """Application configuration."""

    # Storefront API
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:3000")
    API_TOKEN: str | None = os.getenv("API_TOKEN")
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "30"))  # Seconds
    USER_AGENT: str = "Storefront-Client/1.0"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str | None = os.getenv("LOG_FILE")

    # Cache TTLs (minutes)
    CACHE_TTL_PRODUCTS: float = _minutes("CACHE_TTL_PRODUCTS", 30)
    CACHE_TTL_PRODUCT_LIST: float = _minutes("CACHE_TTL_PRODUCT_LIST", 30)
    CACHE_TTL_FEATURED_PRODUCTS: float = _minutes("CACHE_TTL_FEATURED_PRODUCTS", 30)
    CACHE_TTL_CATEGORIES: float = _minutes("CACHE_TTL_CATEGORIES", 5)
    CACHE_TTL_FAVORITES: float = _minutes("CACHE_TTL_FAVORITES", 5)
    CACHE_TTL_FAVORITES_COUNT: float = _minutes("CACHE_TTL_FAVORITES_COUNT", 5)
    CACHE_TTL_USERS_LIST: float = _minutes("CACHE_TTL_USERS_LIST", 10)

    @classmethod
    def cache_ttl(cls) -> CacheTTLConfig:
        """Build the cache TTL table from the configured minute values."""
        return CacheTTLConfig(
            products=cls.CACHE_TTL_PRODUCTS,
            product_list=cls.CACHE_TTL_PRODUCT_LIST,
            featured_products=cls.CACHE_TTL_FEATURED_PRODUCTS,
            categories=cls.CACHE_TTL_CATEGORIES,
            favorites=cls.CACHE_TTL_FAVORITES,
            favorites_count=cls.CACHE_TTL_FAVORITES_COUNT,
            users_list=cls.CACHE_TTL_USERS_LIST,
        )

    @classmethod
    def validate(cls) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []
        if not cls.API_BASE_URL.startswith(("http://", "https://")):
            errors.append(f"API_BASE_URL must be an http(s) URL, got {cls.API_BASE_URL!r}")
        if cls.REQUEST_TIMEOUT <= 0:
            errors.append("REQUEST_TIMEOUT must be positive")
        for name, minutes in vars(cls.cache_ttl()).items():
            if minutes <= 0:
                errors.append(f"Cache TTL for {name} must be positive")
        return errors
