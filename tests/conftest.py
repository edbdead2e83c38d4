"""
Test configuration — offline settings and a mock backend.

Every gateway in the suite talks to an ``httpx.MockTransport``; nothing
reaches the network.
"""

import os
import sys
from pathlib import Path

import httpx
import pytest

# Settings are read at import time, so pin them before importing the package
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("BACKEND_URL", "http://backend.test")
os.environ.setdefault("BACKEND_ANON_KEY", "anon-key")
os.environ.pop("ANTHROPIC_API_KEY", None)

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from suitepulse.core.context import RequestContext  # noqa: E402
from suitepulse.gateway.client import GatewayClient  # noqa: E402

BASE_URL = "http://backend.test"


class MockBackend:
    """Routes requests by (method, path) to canned responses and records them."""

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, response):
        """``response`` is an httpx.Response, a list of them (served in order),
        a callable taking the request, or an exception instance to raise."""
        self.routes[(method, path)] = response

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": f"no route {request.url.path}"})
        if isinstance(handler, Exception):
            raise handler
        if isinstance(handler, list):
            return handler.pop(0) if len(handler) > 1 else handler[0]
        if callable(handler):
            return handler(request)
        return handler


@pytest.fixture
def backend():
    return MockBackend()


@pytest.fixture
def ctx():
    return RequestContext(access_token="user-token", user_id="u1")


@pytest.fixture
def make_gateway(backend):
    def _make(context=None, max_retries=3):
        return GatewayClient(
            ctx=context or RequestContext(access_token="user-token", user_id="u1"),
            base_url=BASE_URL,
            api_key="anon-key",
            transport=httpx.MockTransport(backend),
            max_retries=max_retries,
            retry_base_delay=0,
        )

    return _make
