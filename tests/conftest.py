"""Shared fixtures: an in-memory credential store and a scripted fake backend."""

from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from mconnect.credentials import InMemoryKeyValueStore, build_storage_resolver
from mconnect.integrations.clients.real_http import RequestClient

BASE_URL = "http://backend.test/api"
TOKEN = "tok-123"


class FakeBackend:
    """Answers requests from scripted routes and records everything it receives."""

    def __init__(self, prefix: str = "/api"):
        self.prefix = prefix
        self.routes: Dict[Tuple[str, str], Tuple[int, Any, Optional[type]]] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, json: Any = None, status: int = 200) -> None:
        self.routes[(method, self.prefix + path)] = (status, json, None)

    def fail(self, method: str, path: str, failure: Any) -> None:
        """`failure` is an HTTP status code or an httpx transport exception class."""
        if isinstance(failure, int):
            self.routes[(method, self.prefix + path)] = (failure, {"message": f"HTTP {failure} from backend"}, None)
        else:
            self.routes[(method, self.prefix + path)] = (0, None, failure)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"success": False, "message": "Not found"})
        status, body, exc = route
        if exc is not None:
            raise exc("simulated failure", request=request)
        return httpx.Response(status, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


FAILURES = [httpx.ReadTimeout, httpx.ConnectError, 400, 404, 500, 503]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def store():
    return InMemoryKeyValueStore({"accessToken": TOKEN})


@pytest.fixture
def client(backend, store):
    return RequestClient(
        BASE_URL,
        resolver=build_storage_resolver(store, timeout_seconds=0.5),
        transport=httpx.MockTransport(backend.handler),
    )


@pytest.fixture(params=FAILURES, ids=lambda f: str(f) if isinstance(f, int) else f.__name__)
def failure(request):
    """Every failure kind the client can meet: timeout, no network, 4xx, 5xx."""
    return request.param
