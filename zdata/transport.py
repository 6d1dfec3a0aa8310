"""HTTP transport using httpx.

The rest of the client only depends on the Transport protocol: perform one
request, return a response or raise an ApiError. HttpxTransport is the
default implementation; failures are classified here, once.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Protocol

import httpx

from .errors import response_body, to_api_error
from .monitoring import metrics
from .validation import API_ERROR_SCHEMA, validate_safely

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10_000

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

Method = Literal["GET", "POST", "PUT", "DELETE"]


@dataclass(frozen=True)
class HttpRequest:
    """One request to the API, relative to the transport's base URL."""

    method: Method
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    data: Any = None
    params: Optional[dict[str, str]] = None
    timeout_ms: Optional[float] = None


@dataclass(frozen=True)
class HttpResponse:
    """Decoded response."""

    data: Any
    status: int
    headers: dict[str, str] = field(default_factory=dict)


class Transport(Protocol):
    """Anything able to perform a single request."""

    async def request(self, request: HttpRequest) -> HttpResponse: ...


def build_base_url(base_url: str, workspace_id: str) -> str:
    """Workspace-scoped API root."""
    return f"{base_url.rstrip('/')}/api/v1/{workspace_id}"


def _server_message(error: httpx.HTTPError) -> Optional[str]:
    """Message from a well-formed API error body, if the server sent one."""
    if not isinstance(error, httpx.HTTPStatusError):
        return None
    body = response_body(error.response)
    if validate_safely(API_ERROR_SCHEMA, body).ok:
        return body["message"]
    return None


class HttpxTransport:
    """Transport backed by httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
        headers: Optional[dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize transport.

        Args:
            base_url: API root every request URL is relative to
            timeout_ms: Default request timeout in milliseconds
            headers: Extra headers sent with every request
            client: Pre-built httpx client (tests pass one with a MockTransport)
        """
        self.base_url = base_url
        self.timeout_ms = timeout_ms
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_ms / 1000,
            headers={**DEFAULT_HEADERS, **(headers or {})},
        )

    async def request(self, request: HttpRequest) -> HttpResponse:
        """Send a request.

        Args:
            request: Request description

        Returns:
            Decoded response

        Raises:
            ApiError: UNAUTHENTICATED for 401, TRANSPORT for other statuses
                and connectivity failures
        """
        kwargs: dict[str, Any] = {"headers": request.headers}
        if request.data is not None:
            kwargs["json"] = request.data
        if request.params is not None:
            kwargs["params"] = request.params
        if request.timeout_ms is not None:
            kwargs["timeout"] = request.timeout_ms / 1000

        logger.debug(f"{request.method} {request.url}")
        start = time.perf_counter()
        try:
            response = await self._client.request(request.method, request.url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            error = to_api_error(e, message=_server_message(e))
            logger.debug(f"{request.method} {request.url} failed: {error!r}")
            raise error from e
        finally:
            metrics.request_latency_seconds.labels(method=request.method).observe(
                time.perf_counter() - start
            )

        return HttpResponse(
            data=response_body(response),
            status=response.status_code,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
