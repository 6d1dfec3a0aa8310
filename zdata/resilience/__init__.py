"""Resilience layer for the zdata client.

This module provides:
- Response cache with TTL and bounded FIFO eviction
- Retry with exponential backoff and jitter
- The executor composing both around every client operation
"""

from .cache import CacheConfig, MemoryCache, make_cache_key
from .executor import ResilientExecutor
from .retry import (
    DEFAULT_RETRY_CONFIG,
    RetryConfig,
    RetryPolicy,
    calculate_backoff,
    retry_with_backoff,
    should_retry,
)

__all__ = [
    "MemoryCache",
    "CacheConfig",
    "make_cache_key",
    "RetryPolicy",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "calculate_backoff",
    "should_retry",
    "retry_with_backoff",
    "ResilientExecutor",
]
