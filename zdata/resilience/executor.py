"""Resilient operation executor.

Every read and write the client performs passes through here:
- Reads consult the cache first, then run through the retry policy,
  validate the result and populate the cache
- Writes run through the retry policy and then invalidate the whole cache
"""

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from ..errors import ApiError, to_api_error
from ..monitoring import metrics
from ..validation import validate
from .cache import MemoryCache
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISS = object()


class ResilientExecutor:
    """Composes cache, retry and validation around caller operations.

    Both collaborators are optional: without a cache every read goes to
    the operation, without a retry policy every operation runs once.
    """

    def __init__(
        self,
        cache: Optional[MemoryCache] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.cache = cache
        self.retry_policy = retry_policy

    async def _attempt(self, operation: Callable[[], Awaitable[T]], name: Optional[str]) -> T:
        try:
            if self.retry_policy is not None:
                return await self.retry_policy.execute(operation, name=name)
            return await operation()
        except ApiError as e:
            metrics.operation_failures_total.labels(kind=e.kind.value).inc()
            raise
        except Exception as e:
            error = to_api_error(e)
            metrics.operation_failures_total.labels(kind=error.kind.value).inc()
            raise error from e

    async def read(
        self,
        key: str,
        operation: Callable[[], Awaitable[T]],
        shape: Optional[dict[str, Any]] = None,
        ttl_ms: Optional[int] = None,
    ) -> T:
        """Serve a read from cache or run it.

        Args:
            key: Cache key for the request
            operation: Zero-argument coroutine function performing the read
            shape: Optional JSON Schema the result must satisfy
            ttl_ms: Cache TTL override

        Returns:
            Cached or freshly fetched value

        Raises:
            ApiError: Validation failure or exhausted retries
        """
        if self.cache is not None:
            cached = self.cache.get(key, _MISS)
            if cached is not _MISS:
                return cached

        result = await self._attempt(operation, key)

        if shape is not None:
            try:
                validate(shape, result)
            except ApiError as e:
                metrics.operation_failures_total.labels(kind=e.kind.value).inc()
                raise

        if self.cache is not None:
            self.cache.set(key, result, ttl_ms)
        return result

    async def write(self, operation: Callable[[], Awaitable[T]], name: Optional[str] = None) -> T:
        """Run a mutating operation and invalidate the cache.

        Entries are not tagged with the resource they came from, so every
        successful write clears the whole cache.

        Args:
            operation: Zero-argument coroutine function performing the write
            name: Label used in log messages

        Returns:
            The operation's result
        """
        result = await self._attempt(operation, name)
        if self.cache is not None:
            self.cache.clear()
        return result

    async def run(self, operation: Callable[[], Awaitable[T]], name: Optional[str] = None) -> T:
        """Run an operation with retry only, leaving the cache untouched."""
        return await self._attempt(operation, name)

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()

    @property
    def cache_size(self) -> int:
        return self.cache.size if self.cache is not None else 0
