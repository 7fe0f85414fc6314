"""User administration endpoints."""

from typing import Optional

from .session import StorefrontSession


def list_users(
    session: StorefrontSession,
    max_results: Optional[int] = None,
    page: Optional[int] = None,
    use_cache: bool = True,
) -> dict:
    """
    List users with pagination (admin).

    Returns:
        {'users': [...], 'total': int, 'page': int, 'maxResults': int}
    """
    params = {"maxResults": max_results, "page": page}
    return session.request("GET", "/users", params=params, use_cache=use_cache)


def get_user(session: StorefrontSession, user_id: str, use_cache: bool = True) -> dict:
    return session.request("GET", f"/users/{user_id}", use_cache=use_cache)
