"""Login, registration and token helpers."""

import re
import time
from typing import Optional

from jose import JWTError, jwt

from .session import ApiError, StorefrontSession
from ..logging import get_logger

logger = get_logger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def _require_valid_email(email: str) -> None:
    if not is_valid_email(email):
        raise ApiError("Invalid email. Please provide a valid email address.", 400)


def decode_jwt_payload(token: str) -> Optional[dict]:
    """
    Decode the payload segment of a JWT without verifying it.

    Returns:
        The payload dict, or None if the token is malformed
    """
    if not token:
        return None
    try:
        return jwt.get_unverified_claims(token)
    except JWTError:
        return None


def is_token_expired(token: str, now: Optional[float] = None) -> bool:
    """True if the token's ``exp`` claim has passed, or the token is unreadable."""
    payload = decode_jwt_payload(token)
    if payload is None:
        return True
    exp = payload.get("exp")
    if exp is None:
        return False
    now = time.time() if now is None else now
    return now >= exp


def is_admin(token: str, user: Optional[dict] = None) -> bool:
    """Check the user's role, falling back to the token claims."""
    if user and user.get("role"):
        return user["role"] == "admin"
    payload = decode_jwt_payload(token) or {}
    return payload.get("role") == "admin" or bool(payload.get("is_admin"))


def login(session: StorefrontSession, email: str, password: str) -> dict:
    """
    Log in and keep the returned token on the session.

    Args:
        session: Session to authenticate
        email: Account email
        password: Account password

    Returns:
        Login response (``token``, optional ``user`` and ``is_admin``)
    """
    _require_valid_email(email)
    response = session.request("POST", "/auth/login", json={"email": email, "password": password})
    session.set_token(response["token"])
    # Cached favorites belong to whoever was logged in before
    session.cache.clear()
    logger.info("Logged in as %s", email)
    return response


def register(session: StorefrontSession, email: str, password: str) -> dict:
    _require_valid_email(email)
    return session.request("POST", "/auth/register", json={"email": email, "password": password})


def logout(session: StorefrontSession) -> None:
    """Forget the token and everything cached under it."""
    session.clear_token()
    session.cache.clear()
    logger.info("Logged out")
