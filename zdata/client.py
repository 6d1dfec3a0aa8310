"""zdata API client.

Usage:
    async with ZDataClient({
        "base_url": "https://api.example.com",
        "workspace_id": "workspace-123",
        "enable_cache": True,
        "enable_retry": True,
    }) as client:
        await client.login({"email": "user@example.com", "password": "secret"})
        users = await client.find_records({"resource_name": "users", "page": 1})
        await client.create_record("users", {"name": "Jane"})
"""

import logging
from typing import Any, Generic, Optional, TypeVar

from .auth import AuthService
from .config import Settings
from .errors import ApiError, ErrorKind
from .repository import CACHE_TTL_MS, ResourceRepository
from .resilience import CacheConfig, MemoryCache, ResilientExecutor, RetryConfig, RetryPolicy
from .transport import DEFAULT_TIMEOUT_MS, HttpxTransport, Transport, build_base_url
from .validation import API_CONFIG_SCHEMA, validate

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404

T = TypeVar("T")


class ZDataClient:
    """Authentication and CRUD against one zdata workspace."""

    def __init__(self, config: dict[str, Any], transport: Optional[Transport] = None):
        """Initialize client.

        Args:
            config: base_url, workspace_id and optional timeout, headers,
                enable_cache, cache_config, enable_retry, retry_config
            transport: Transport override (defaults to HttpxTransport)

        Raises:
            ApiError: VALIDATION if config is malformed
        """
        config = validate(API_CONFIG_SCHEMA, config)

        self.cache: Optional[MemoryCache] = None
        if config.get("enable_cache"):
            cache_config = config.get("cache_config") or {}
            self.cache = MemoryCache(
                CacheConfig(
                    default_ttl_ms=cache_config.get("default_ttl_ms", CACHE_TTL_MS),
                    max_entries=cache_config.get("max_entries"),
                )
            )

        self.retry_policy: Optional[RetryPolicy] = None
        if config.get("enable_retry"):
            self.retry_policy = RetryPolicy(RetryConfig(**(config.get("retry_config") or {})))

        self.transport = transport or HttpxTransport(
            build_base_url(config["base_url"], config["workspace_id"]),
            timeout_ms=config.get("timeout", DEFAULT_TIMEOUT_MS),
            headers=config.get("headers"),
        )
        self.executor = ResilientExecutor(self.cache, self.retry_policy)
        self.auth = AuthService(self.transport)
        self.repository = ResourceRepository(
            self.transport,
            self.auth,
            self.executor,
            cache_ttl_ms=self.cache.config.default_ttl_ms if self.cache is not None else CACHE_TTL_MS,
        )

        logger.info(
            f"ZDataClient initialized: workspace={config['workspace_id']}, "
            f"cache={'on' if self.cache is not None else 'off'}, "
            f"retry={'on' if self.retry_policy is not None else 'off'}"
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[Transport] = None,
    ) -> "ZDataClient":
        """Build a client from environment-backed settings."""
        return cls((settings or Settings()).to_client_config(), transport=transport)

    # Authentication

    async def login(self, credentials: dict[str, Any]) -> dict[str, Any]:
        return await self.executor.run(lambda: self.auth.login(credentials), name="login")

    async def register(self, user_data: dict[str, Any]) -> dict[str, Any]:
        return await self.executor.run(lambda: self.auth.register(user_data), name="register")

    def logout(self) -> None:
        """Drop the token and every cached response fetched with it."""
        self.auth.logout()
        self.executor.clear_cache()

    def is_authenticated(self) -> bool:
        return self.auth.is_authenticated()

    def set_access_token(self, token: str) -> None:
        self.auth.set_access_token(token)

    def get_access_token(self) -> Optional[str]:
        return self.auth.get_access_token()

    # CRUD

    async def create_record(self, resource_name: str, data: Any) -> Any:
        return await self.repository.create_record(resource_name, data)

    async def update_record(self, resource_name: str, record_id: str, data: Any) -> Any:
        return await self.repository.update_record(resource_name, record_id, data)

    async def delete_record(self, resource_name: str, record_id: str) -> None:
        await self.repository.delete_record(resource_name, record_id)

    async def find_record_by_id(self, resource_name: str, record_id: str) -> Any:
        return await self.repository.find_record_by_id(resource_name, record_id)

    async def find_records(self, params: dict[str, Any]) -> dict[str, Any]:
        return await self.repository.find_records(params)

    # Cache management

    def clear_cache(self) -> None:
        self.executor.clear_cache()

    @property
    def cache_size(self) -> int:
        return self.executor.cache_size

    def get_cache_stats(self) -> Optional[dict[str, Any]]:
        """Cache statistics, None when caching is disabled."""
        return self.cache.stats() if self.cache is not None else None

    async def aclose(self) -> None:
        aclose = getattr(self.transport, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> "ZDataClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class DataSourceClient(ZDataClient, Generic[T]):
    """Client bound to a single resource.

    Usage:
        payments = DataSourceClient(config, "payments")
        page = await payments.find({"page": 1, "limit": 20})
    """

    def __init__(
        self,
        config: dict[str, Any],
        resource_name: str,
        transport: Optional[Transport] = None,
    ):
        super().__init__(config, transport=transport)
        self.resource_name = resource_name

    async def create(self, data: dict[str, Any]) -> T:
        return await self.create_record(self.resource_name, data)

    async def find_by_id(self, record_id: str) -> Optional[T]:
        """Fetch a record, returning None when the API reports 404."""
        try:
            return await self.find_record_by_id(self.resource_name, record_id)
        except ApiError as e:
            if e.kind == ErrorKind.TRANSPORT and e.status_code == HTTP_NOT_FOUND:
                return None
            raise

    async def find(self, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await self.find_records({**(params or {}), "resource_name": self.resource_name})

    async def update(self, record_id: str, data: dict[str, Any]) -> T:
        return await self.update_record(self.resource_name, record_id, data)

    async def delete(self, record_id: str) -> None:
        await self.delete_record(self.resource_name, record_id)
