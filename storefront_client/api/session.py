"""HTTP session for the storefront REST API."""

from typing import Any, Optional

import requests

from ..cache import ResponseCache
from ..config import Config
from ..logging import get_logger

logger = get_logger(__name__)

_MISS = object()


class ApiError(Exception):
    """Error response from the storefront API."""

    def __init__(self, message: str, status: int, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code  # e.g. FEATURED_LIMIT_REACHED

    def __repr__(self) -> str:
        return f"ApiError({self.message!r}, status={self.status}, code={self.code!r})"


class NetworkError(ApiError):
    """The request never got an HTTP response."""

    def __init__(self, message: str):
        super().__init__(message, status=0)


def _clean_params(params: Optional[dict]) -> dict:
    """Drop unset query parameters."""
    if not params:
        return {}
    return {k: v for k, v in params.items() if v is not None and v != ""}


def _error_from_response(response: requests.Response) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = body.get("message") or body.get("error") or f"HTTP error! status: {response.status_code}"
    return ApiError(message, response.status_code, body.get("code"))


class StorefrontSession:
    """
    Talks to the storefront API and owns the response cache.

    GET requests made with ``use_cache`` are served from the cache while
    fresh and stored in it afterwards. Mutating helpers in the resource
    modules invalidate the cache after the server accepts the change.

    Usage:
        session = StorefrontSession()
        login(session, "me@example.com", "secret")
        products = list_products(session, category="rings")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        cache: Optional[ResponseCache] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": Config.USER_AGENT})
        self.base_url = (base_url or Config.API_BASE_URL).rstrip("/")
        self.cache = cache if cache is not None else ResponseCache(Config.cache_ttl())
        self.token = token
        self.timeout = timeout or Config.REQUEST_TIMEOUT

    def set_token(self, token: str) -> None:
        self.token = token

    def clear_token(self) -> None:
        self.token = None

    def _headers(self) -> dict:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json: Any = None,
        data: Optional[dict] = None,
        files: Optional[dict] = None,
        use_cache: bool = False,
    ) -> Any:
        """
        Make a request against the API.

        Args:
            method: HTTP method
            endpoint: Path relative to the base URL (e.g. "/products/42")
            params: Query parameters; None values are dropped
            json: JSON body
            data: Form fields (multipart when ``files`` is given)
            files: Files for a multipart upload
            use_cache: Serve/store GET responses through the cache

        Returns:
            Decoded JSON body, or None for 204 responses

        Raises:
            ApiError: on a non-2xx response
            NetworkError: when the request fails before a response arrives
        """
        method = method.upper()
        params = _clean_params(params)
        cacheable = use_cache and method == "GET"

        if cacheable:
            cached = self.cache.get(endpoint, params, default=_MISS)
            if cached is not _MISS:
                return cached

        url = f"{self.base_url}{endpoint}" if endpoint.startswith("/") else f"{self.base_url}/{endpoint}"

        try:
            response = self.session.request(
                method,
                url,
                params=params or None,
                json=json,
                data=data,
                files=files,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Request failed for %s %s: %s", method, endpoint, e)
            raise NetworkError(f"Request failed for {method} {endpoint}: {e}") from e

        if not response.ok:
            error = _error_from_response(response)
            logger.warning("%s %s -> %s: %s", method, endpoint, error.status, error.message)
            raise error

        if response.status_code == 204:
            return None

        payload = response.json()

        if cacheable:
            self.cache.set(endpoint, payload, params)

        return payload

    def get(self, endpoint: str, params: Optional[dict] = None, use_cache: bool = True) -> Any:
        """Cached GET."""
        return self.request("GET", endpoint, params=params, use_cache=use_cache)

    def close(self) -> None:
        self.session.close()
