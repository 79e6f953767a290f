"""
Shared fixtures: a fake NWS API served through httpx.MockTransport.
"""

import httpx
import pytest

from core.config import Settings


class FakeNWS:
    """Routes requests by URL path to canned JSON (or Response) payloads.

    Every request is recorded so tests can assert which calls were (or were
    not) issued.  Unknown paths answer 404 like the real API.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"title": "Not Found"})
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def fake_nws():
    return FakeNWS()
