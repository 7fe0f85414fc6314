"""Shared fixtures: a controllable clock and a session with a stubbed transport."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from storefront_client.api.session import StorefrontSession
from storefront_client.cache import ResponseCache


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, minutes: float = 0, ms: float = 0) -> None:
        self.now += minutes * 60 * 1000 + ms


def make_response(body=None, status: int = 200) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = b"" if body is None else json.dumps(body).encode()
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResponseCache(clock=clock)


@pytest.fixture
def session(cache):
    s = StorefrontSession(base_url="http://api.test", cache=cache, timeout=5)
    s.session = MagicMock()
    s.session.request.return_value = make_response({})
    return s


@pytest.fixture
def respond(session):
    """Set the body (and status) of the next stubbed HTTP response."""
    def _respond(body=None, status: int = 200):
        session.session.request.return_value = make_response(body, status)
    return _respond
