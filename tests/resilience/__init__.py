"""Tests for resilience module."""


def test_resilience_imports():
    """Test that resilience module can be imported."""
    from zdata.resilience import (
        CacheConfig,
        MemoryCache,
        ResilientExecutor,
        RetryConfig,
        RetryPolicy,
        retry_with_backoff,
    )

    assert MemoryCache is not None
    assert CacheConfig is not None
    assert RetryPolicy is not None
    assert RetryConfig is not None
    assert retry_with_backoff is not None
    assert ResilientExecutor is not None
