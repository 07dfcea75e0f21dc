"""Shared fakes for the reporting client tests."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import pytest

from reporting_client.config import Settings

PORTAL_URL = "https://portal.test"
SERVICE_URL = "https://svc.test/reporting"
ITEM_ID = "25c278bd96aa49949f8a89564c6347ce"


class FakeService:
    """Serves canned responses through httpx.MockTransport.

    Responses are queued per (method, path). A dict becomes a 200 JSON
    response, an httpx.Response is returned as is and an exception is raised.
    The last queued response repeats.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses: Any) -> "FakeService":
        self.routes.setdefault((method, path), []).extend(responses)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404)
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


class FakeStatusSocket:
    """Stands in for a websocket connector and the connection it opens."""

    def __init__(self, *messages: Any, connect_error: Exception | None = None):
        self.messages = list(messages)
        self.connect_error = connect_error
        self.urls: list[str] = []
        self.opened = False
        self.closed = False

    def __call__(self, url: str):
        self.urls.append(url)
        return self._open()

    @asynccontextmanager
    async def _open(self):
        if self.connect_error is not None:
            raise self.connect_error
        self.opened = True
        try:
            yield self
        finally:
            self.closed = True

    async def recv(self) -> Any:
        message = self.messages.pop(0)
        if isinstance(message, Exception):
            raise message
        return message


@pytest.fixture
def fake_service():
    """Create an empty FakeService."""
    return FakeService()


@pytest.fixture
def test_settings():
    """Settings with no delay between polls."""
    return Settings(POLL_INTERVAL=0.0, REQUEST_TIMEOUT=5.0, USE_POLLING=False, MAX_POLL_ATTEMPTS=None)
