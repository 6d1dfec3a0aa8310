"""Monitoring module for the zdata client.

This module provides:
- In-process counters, gauges and histograms for cache, retry and request behavior
- Prometheus text rendering
"""

from .metrics import (
    Counter,
    Gauge,
    Histogram,
    cache_entries,
    cache_evictions_total,
    cache_hits_total,
    cache_misses_total,
    operation_failures_total,
    render_metrics,
    request_latency_seconds,
    reset_metrics,
    retries_exhausted_total,
    retry_attempts_total,
)

__all__ = [
    "Counter",
    "Gauge",
    "Histogram",
    "cache_hits_total",
    "cache_misses_total",
    "cache_evictions_total",
    "cache_entries",
    "retry_attempts_total",
    "retries_exhausted_total",
    "request_latency_seconds",
    "operation_failures_total",
    "render_metrics",
    "reset_metrics",
]
