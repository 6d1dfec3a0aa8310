"""In-memory response cache.

Provides:
- Per-entry time-to-live with lazy expiry on read
- Bounded size with FIFO eviction (oldest inserted entry goes first)
- Explicit invalidation (delete, clear) and an optional expiry sweep

The cache is used from a single event loop, so it takes no locks.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..monitoring import metrics

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 300_000  # 5 minutes

_MISSING = object()


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CacheConfig:
    """Configuration for the memory cache."""

    default_ttl_ms: int = DEFAULT_TTL_MS
    max_entries: Optional[int] = None  # Unbounded when None

    def __post_init__(self):
        if self.default_ttl_ms <= 0:
            raise ValueError(f"default_ttl_ms must be positive, got {self.default_ttl_ms}")
        if self.max_entries is not None and self.max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {self.max_entries}")


@dataclass(frozen=True)
class CacheEntry:
    """Stored value and the epoch millisecond at which it stops being served."""

    value: Any
    expires_at_ms: int


def make_cache_key(*parts: Any) -> str:
    """Build a deterministic cache key from request parts.

    Args:
        *parts: Resource name, record id, query parameters, ...

    Returns:
        Parts joined with ':'; dicts and lists are serialized with sorted keys
    """
    rendered = []
    for part in parts:
        if isinstance(part, (dict, list, tuple)):
            rendered.append(json.dumps(part, sort_keys=True, separators=(",", ":"), default=str))
        else:
            rendered.append(str(part))
    return ":".join(rendered)


class MemoryCache:
    """Bounded key/value store with per-entry expiry.

    Usage:
        cache = MemoryCache(CacheConfig(default_ttl_ms=60_000, max_entries=100))
        cache.set("users:42", record)
        cache.get("users:42")
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize the cache.

        Args:
            config: Cache configuration
            clock: Zero-argument callable returning the current epoch time
                in milliseconds
        """
        self.config = config or CacheConfig()
        self._clock = clock or _now_ms
        # dict keeps insertion order, which is the eviction order
        self._entries: dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def _lookup(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return _MISSING
        if self._clock() >= entry.expires_at_ms:
            del self._entries[key]
            metrics.cache_entries.set(len(self._entries))
            logger.debug(f"Cache entry expired: {key}")
            return _MISSING
        return entry.value

    def get(self, key: str, default: Any = None) -> Any:
        """Get a live value.

        Args:
            key: Cache key
            default: Returned when the key is absent or expired

        Returns:
            Cached value or default
        """
        value = self._lookup(key)
        if value is _MISSING:
            self._misses += 1
            metrics.cache_misses_total.inc()
            logger.debug(f"Cache miss: {key}")
            return default

        self._hits += 1
        metrics.cache_hits_total.inc()
        logger.debug(f"Cache hit: {key}")
        return value

    def has(self, key: str) -> bool:
        """Check whether a live value is stored for key."""
        return self._lookup(key) is not _MISSING

    def set(self, key: str, value: Any, ttl_ms: Optional[int] = None) -> None:
        """Store a value.

        Args:
            key: Cache key
            value: Value to store
            ttl_ms: Time-to-live in milliseconds (defaults to config.default_ttl_ms)
        """
        ttl = self.config.default_ttl_ms if ttl_ms is None else ttl_ms
        if ttl <= 0:
            raise ValueError(f"ttl_ms must be positive, got {ttl}")

        max_entries = self.config.max_entries
        if key not in self._entries and max_entries is not None and len(self._entries) >= max_entries:
            oldest_key = next(iter(self._entries))
            del self._entries[oldest_key]
            self._evictions += 1
            metrics.cache_evictions_total.inc()
            logger.debug(f"Cache full ({max_entries} entries), evicted {oldest_key}")

        self._entries[key] = CacheEntry(value=value, expires_at_ms=self._clock() + ttl)
        metrics.cache_entries.set(len(self._entries))

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        if self._entries.pop(key, None) is not None:
            metrics.cache_entries.set(len(self._entries))

    def clear(self) -> None:
        """Remove every entry."""
        count = len(self._entries)
        self._entries.clear()
        metrics.cache_entries.set(0)
        if count:
            logger.info(f"Cleared {count} cache entries")

    def cleanup(self) -> int:
        """Remove every entry whose expiry has passed.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [k for k, entry in self._entries.items() if now >= entry.expires_at_ms]
        for key in expired:
            del self._entries[key]
        if expired:
            metrics.cache_entries.set(len(self._entries))
            logger.debug(f"Swept {len(expired)} expired cache entries")
        return len(expired)

    @property
    def size(self) -> int:
        """Number of stored entries, including expired ones not yet observed."""
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Statistics dictionary
        """
        return {
            "size": len(self._entries),
            "max_entries": self.config.max_entries,
            "default_ttl_ms": self.config.default_ttl_ms,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
        }
