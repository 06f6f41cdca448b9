"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

HTTP is never sent over the network: the API client is wired to an
httpx.MockTransport whose handler is a FakeApi. Tests register canned
responses per endpoint path and inspect the recorded requests.
"""

from collections.abc import Callable, Generator
from typing import Any

import httpx
import pytest

from tensordock_cli.api.client import Credentials, TensorDockClient

BASE_URL = "http://testserver/api"

Handler = Callable[[httpx.Request], httpx.Response]


# =============================================================================
# Fake API
# =============================================================================


class FakeApi:
    """
    Route table for httpx.MockTransport.

    Usage:
        api.add("list", json={"success": True, "servers": {}})
        api.add("billing", content=b"<html></html>", content_type="text/html")
        client.list_servers()
        assert api.last.url.path == "/api/list"
    """

    def __init__(self) -> None:
        self.routes: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        path: str,
        *,
        json: Any = None,
        content: bytes | None = None,
        status: int = 200,
        content_type: str = "application/json",
    ) -> None:
        """Register a canned response for an endpoint path."""
        if json is not None:
            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(status, json=json)
        else:
            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(
                    status,
                    content=content or b"",
                    headers={"Content-Type": content_type},
                )
        self.routes[path] = handler

    def route(self, path: str, handler: Handler) -> None:
        """Register a custom handler for an endpoint path."""
        self.routes[path] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/")
        handler = self.routes.get(path)
        if handler is None:
            return httpx.Response(404, json={"success": False, "error": f"no route for {path}"})
        return handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_query(self) -> dict[str, str]:
        """Query-string parameters of the last request."""
        return dict(self.last.url.params)

    def last_form(self) -> dict[str, str]:
        """Form-encoded body of the last request."""
        return dict(httpx.QueryParams(self.last.content.decode("ascii")))


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep tests away from the real home directory and TENSORDOCK_* variables."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("TENSORDOCK_API_KEY", "TENSORDOCK_API_TOKEN", "TENSORDOCK_SERVICE_URL", "TENSORDOCK_DEBUG"):
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def api() -> FakeApi:
    """Empty fake API; tests register routes on it."""
    return FakeApi()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(api_key="test-key", api_token="test-token")


@pytest.fixture
def client(api: FakeApi, credentials: Credentials) -> Generator[TensorDockClient, None, None]:
    """API client wired to the fake API."""
    td_client = TensorDockClient(
        BASE_URL,
        credentials,
        http_transport=httpx.MockTransport(api),
    )
    yield td_client
    td_client.close()


@pytest.fixture
def server_payload() -> dict[str, Any]:
    """A get/single server record as the API returns it."""
    return {
        "id": "abc123",
        "name": "trainer",
        "location": "na-us-chi-1",
        "status": "running",
        "ip": "203.0.113.10",
        "type": "gpu",
        "cpu_model": "",
        "gpu_model": "Quadro_4000",
        "gpu_count": 2,
        "vcpus": 4,
        "ram": 16,
        "storage": 100,
        "storage_class": "io1",
        "cost": {
            "charged": 12.5,
            "hour_on": 0.48,
            "hour_off": 0.01,
            "minutes_on": 1500,
            "minutes_off": 30,
        },
        "links": {
            "dashboard": {"href": "https://console.tensordock.com/servers/abc123"},
        },
    }
