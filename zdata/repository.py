"""CRUD access to workspace resources."""

import logging
from typing import Any, Optional

from .auth import AuthService
from .errors import ApiError, ValidationFailureDetail
from .resilience import ResilientExecutor, make_cache_key
from .transport import HttpRequest, Transport
from .validation import FIND_RECORDS_PARAMS_SCHEMA, PAGINATED_RESPONSE_SCHEMA, validate

logger = logging.getLogger(__name__)

CACHE_TTL_MS = 300_000  # 5 minutes
DEFAULT_PAGE_SIZE = 10


def _check_identifier(field: str, value: Any) -> None:
    if not value or not isinstance(value, str):
        raise ApiError.validation(
            [ValidationFailureDetail("required", (field,), f"{field} must be a non-empty string")]
        )
    if value.strip() != value:
        raise ApiError.validation(
            [
                ValidationFailureDetail(
                    "whitespace", (field,), f"{field} cannot have leading or trailing whitespace"
                )
            ]
        )


def build_search_params(params: dict[str, Any]) -> dict[str, str]:
    """Query string for a list request."""
    search_params = {
        "page": str(params.get("page") or 1),
        "limit": str(params.get("limit") or DEFAULT_PAGE_SIZE),
    }
    if params.get("search"):
        search_params["search"] = params["search"]
    return search_params


class ResourceRepository:
    """Routes record operations to /{resource} endpoints through the executor."""

    def __init__(
        self,
        transport: Transport,
        auth: AuthService,
        executor: Optional[ResilientExecutor] = None,
        cache_ttl_ms: int = CACHE_TTL_MS,
    ):
        self.transport = transport
        self.auth = auth
        self.executor = executor or ResilientExecutor()
        self.cache_ttl_ms = cache_ttl_ms

    async def _send(self, method: str, url: str, **kwargs) -> Any:
        request = HttpRequest(method=method, url=url, headers=self.auth.auth_header(), **kwargs)
        response = await self.transport.request(request)
        return response.data

    async def create_record(self, resource_name: str, data: Any) -> Any:
        """Create a record.

        Args:
            resource_name: Resource (e.g., "users")
            data: Record fields

        Returns:
            Created record with id, created_at and updated_at
        """
        _check_identifier("resource_name", resource_name)
        return await self.executor.write(
            lambda: self._send("POST", f"/{resource_name}", data=data),
            name=f"create {resource_name}",
        )

    async def update_record(self, resource_name: str, record_id: str, data: Any) -> Any:
        """Update a record (partial updates supported).

        Args:
            resource_name: Resource name
            record_id: Record identifier
            data: Fields to change

        Returns:
            Updated record
        """
        _check_identifier("resource_name", resource_name)
        _check_identifier("id", record_id)
        return await self.executor.write(
            lambda: self._send("PUT", f"/{resource_name}/{record_id}", data=data),
            name=f"update {resource_name}/{record_id}",
        )

    async def delete_record(self, resource_name: str, record_id: str) -> None:
        """Delete a record."""
        _check_identifier("resource_name", resource_name)
        _check_identifier("id", record_id)
        await self.executor.write(
            lambda: self._send("DELETE", f"/{resource_name}/{record_id}"),
            name=f"delete {resource_name}/{record_id}",
        )

    async def find_record_by_id(self, resource_name: str, record_id: str) -> Any:
        """Fetch one record, served from cache when possible."""
        _check_identifier("resource_name", resource_name)
        _check_identifier("id", record_id)
        return await self.executor.read(
            make_cache_key(resource_name, record_id),
            lambda: self._send("GET", f"/{resource_name}/{record_id}"),
            ttl_ms=self.cache_ttl_ms,
        )

    async def find_records(self, params: dict[str, Any]) -> dict[str, Any]:
        """List records with pagination and search.

        Args:
            params: {"resource_name": ..., "page": ..., "limit": ..., "search": ...}

        Returns:
            {"records": [...], "meta": {...}}

        Raises:
            ApiError: VALIDATION for bad params or a malformed envelope
        """
        validate(FIND_RECORDS_PARAMS_SCHEMA, params)
        resource_name = params["resource_name"]
        return await self.executor.read(
            make_cache_key(resource_name, "list", params),
            lambda: self._send("GET", f"/{resource_name}", params=build_search_params(params)),
            shape=PAGINATED_RESPONSE_SCHEMA,
            ttl_ms=self.cache_ttl_ms,
        )
