"""Pytest configuration and fixtures for zdata tests."""

import json
from typing import Any, Callable

import httpx
import pytest

from zdata.monitoring import reset_metrics

BASE_URL = "https://api.example.com"
WORKSPACE_ID = "workspace-123"


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_ms: int = 1_000_000):
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class RecordingSleep:
    """Async sleep that records requested delays instead of waiting."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def json_response(status: int, body: Any = None) -> httpx.Response:
    if body is None:
        return httpx.Response(status)
    return httpx.Response(status, json=body)


def auth_payload(token: str = "token-abc") -> dict[str, Any]:
    return {
        "access_token": token,
        "expires_in": 3600,
        "token_type": "Bearer",
        "user": {"id": "u1", "email": "user@example.com", "name": "Test User"},
    }


def page_payload(records: list, page: int = 1, limit: int = 10) -> dict[str, Any]:
    return {
        "records": records,
        "meta": {
            "activePageNumber": page,
            "limit": limit,
            "totalRecords": len(records),
            "totalPages": 1,
            "hasNext": False,
            "hasPrev": False,
        },
    }


class MockApi:
    """Scripted API server for httpx.MockTransport.

    Responses are queued per (method, path); the last queued response for
    a route keeps being served once the queue is down to one entry.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *responses) -> None:
        self.routes.setdefault((method, path), []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return json_response(404, {"message": f"No route for {request.method} {request.url.path}"})
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(request)
        return response

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def body(self, request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None


@pytest.fixture(autouse=True)
def clean_metrics():
    """Start every test with zeroed metrics."""
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture(autouse=True)
def use_test_environment(monkeypatch):
    """Keep the host environment out of Settings."""
    for name in ("ZDATA_BASE_URL", "ZDATA_WORKSPACE_ID", "ZDATA_ENABLE_CACHE", "ZDATA_ENABLE_RETRY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def no_jitter() -> Callable[[float, float], float]:
    return lambda low, high: 0.0


@pytest.fixture
def mock_api() -> MockApi:
    return MockApi()


@pytest.fixture
def api_path() -> Callable[[str], str]:
    """Absolute request path for an endpoint in the test workspace."""
    return lambda endpoint: f"/api/v1/{WORKSPACE_ID}{endpoint}"


@pytest.fixture
def http_client(mock_api) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=f"{BASE_URL}/api/v1/{WORKSPACE_ID}",
        transport=httpx.MockTransport(mock_api.handler),
    )


@pytest.fixture
def client_config() -> dict[str, Any]:
    return {
        "base_url": BASE_URL,
        "workspace_id": WORKSPACE_ID,
        "enable_cache": True,
        "enable_retry": True,
        "retry_config": {"max_attempts": 3, "base_delay_ms": 1, "max_delay_ms": 5, "jitter_ms": 1},
    }
