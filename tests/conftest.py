"""Shared fixtures for the proxy test suite."""

import json

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from auth import TokenManager
from config import ProxyConfig

SHARED_SECRET = "S"
AUTH_HEADERS = {"x-internal-secret": SHARED_SECRET}
START_TIME = 1_700_000_000.0


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, now: float = START_TIME) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def build_response(
    status_code: int = 200,
    json_body=None,
    body: bytes | None = None,
    content_type: str | None = "application/json",
) -> requests.Response:
    """Build a real requests.Response, as returned by requests.post/request."""
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        body = json.dumps(json_body).encode() if json_body is not None else b""
    response._content = body
    response.encoding = "utf-8"
    response.headers = CaseInsensitiveDict()
    if content_type:
        response.headers["Content-Type"] = content_type
    return response


@pytest.fixture
def make_response():
    """Factory for upstream responses."""
    return build_response


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def proxy_config():
    """Minimal valid configuration."""
    return ProxyConfig(
        client_id="test-client-id",
        client_secret="test-client-secret",
        base_url="https://papi.test",
        token_url="https://auth.test/oauth2/token",
        shared_secret=SHARED_SECRET,
    )


@pytest.fixture
def token_manager(proxy_config, fake_clock):
    """TokenManager on a fake clock, single attempt so failures surface at once."""
    return TokenManager(
        proxy_config.credentials,
        proxy_config.token_url,
        scope=proxy_config.scope,
        expiry_margin=proxy_config.token_expiry_margin,
        max_attempts=1,
        clock=fake_clock,
    )


@pytest.fixture
def auth_headers():
    return dict(AUTH_HEADERS)
