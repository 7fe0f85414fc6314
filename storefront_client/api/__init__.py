"""Storefront REST API client."""

from .session import ApiError, NetworkError, StorefrontSession
from .auth import login, logout, register

__all__ = ["ApiError", "NetworkError", "StorefrontSession", "login", "logout", "register"]
