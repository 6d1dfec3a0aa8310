"""In-process metrics for the zdata client.

Tracks how the resilience layer behaves at runtime:
- Cache metrics: cache_hits_total, cache_misses_total, cache_evictions_total, cache_entries
- Retry metrics: retry_attempts_total, retries_exhausted_total
- Request metrics: request_latency_seconds, operation_failures_total

render_metrics() returns everything in Prometheus text format so an
application can expose it through whatever server it already runs.
"""

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


# =============================================================================
# Metric Classes (Lightweight implementation without prometheus_client dependency)
# =============================================================================


def _format_labels(label_names: list[str], label_values: tuple) -> str:
    return ",".join(f'{name}="{value}"' for name, value in zip(label_names, label_values))


class Counter:
    """A counter metric that can only increase."""

    def __init__(self, name: str, description: str, labels: Optional[list[str]] = None):
        self.name = name
        self.description = description
        self._label_names = labels or []
        self._values: dict[tuple, float] = {}
        self._lock = threading.Lock()

    def labels(self, **kwargs) -> "CounterWithLabels":
        """Return a counter with specific labels."""
        label_values = tuple(str(kwargs.get(l, "")) for l in self._label_names)
        return CounterWithLabels(self, label_values)

    def inc(self, value: float = 1.0) -> None:
        """Increment the counter."""
        self._inc_labels((), value)

    def _inc_labels(self, label_values: tuple, value: float = 1.0) -> None:
        if value < 0:
            raise ValueError("Counters can only increase")
        with self._lock:
            self._values[label_values] = self._values.get(label_values, 0) + value

    def value(self, **kwargs) -> float:
        """Current value for the given labels (0 if never incremented)."""
        key = tuple(str(kwargs.get(l, "")) for l in self._label_names) if kwargs else ()
        with self._lock:
            return self._values.get(key, 0)

    def get_all(self) -> dict[tuple, float]:
        """Get all values."""
        with self._lock:
            return self._values.copy()

    def reset(self) -> None:
        with self._lock:
            self._values.clear()

    def to_prometheus(self) -> str:
        """Format as Prometheus text."""
        lines = [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} counter"]
        with self._lock:
            for label_values, value in self._values.items():
                if label_values:
                    lines.append(
                        f"{self.name}{{{_format_labels(self._label_names, label_values)}}} {value}"
                    )
                else:
                    lines.append(f"{self.name} {value}")
        return "\n".join(lines)


class CounterWithLabels:
    """Counter with specific label values."""

    def __init__(self, parent: Counter, label_values: tuple):
        self._parent = parent
        self._label_values = label_values

    def inc(self, value: float = 1.0) -> None:
        """Increment the counter."""
        self._parent._inc_labels(self._label_values, value)


class Gauge:
    """A gauge metric that can increase or decrease."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self._value = 0.0
        self._lock = threading.Lock()

    def set(self, value: float) -> None:
        """Set the gauge value."""
        with self._lock:
            self._value = value

    def inc(self, value: float = 1.0) -> None:
        with self._lock:
            self._value += value

    def dec(self, value: float = 1.0) -> None:
        with self._lock:
            self._value -= value

    def value(self) -> float:
        with self._lock:
            return self._value

    def reset(self) -> None:
        self.set(0.0)

    def to_prometheus(self) -> str:
        """Format as Prometheus text."""
        return "\n".join(
            [
                f"# HELP {self.name} {self.description}",
                f"# TYPE {self.name} gauge",
                f"{self.name} {self.value()}",
            ]
        )


class Histogram:
    """A histogram metric for tracking distributions."""

    DEFAULT_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

    def __init__(
        self,
        name: str,
        description: str,
        labels: Optional[list[str]] = None,
        buckets: Optional[tuple] = None,
    ):
        self.name = name
        self.description = description
        self._label_names = labels or []
        self.buckets = buckets or self.DEFAULT_BUCKETS
        self._observations: dict[tuple, list[float]] = {}
        self._lock = threading.Lock()

    def labels(self, **kwargs) -> "HistogramWithLabels":
        """Return a histogram with specific labels."""
        label_values = tuple(str(kwargs.get(l, "")) for l in self._label_names)
        return HistogramWithLabels(self, label_values)

    def observe(self, value: float) -> None:
        """Record an observation."""
        self._observe_labels((), value)

    def _observe_labels(self, label_values: tuple, value: float) -> None:
        with self._lock:
            self._observations.setdefault(label_values, []).append(value)

    def get_all(self) -> dict[tuple, list[float]]:
        """Get all observations."""
        with self._lock:
            return {k: v.copy() for k, v in self._observations.items()}

    def reset(self) -> None:
        with self._lock:
            self._observations.clear()

    def to_prometheus(self) -> str:
        """Format as Prometheus text."""
        lines = [
            f"# HELP {self.name} {self.description}",
            f"# TYPE {self.name} histogram",
        ]
        with self._lock:
            for label_values, observations in self._observations.items():
                total = sum(observations)
                count = len(observations)
                prefix = _format_labels(self._label_names, label_values)
                sep = "," if prefix else ""

                for bucket in self.buckets:
                    bucket_count = sum(1 for o in observations if o <= bucket)
                    lines.append(f'{self.name}_bucket{{{prefix}{sep}le="{bucket}"}} {bucket_count}')

                lines.append(f'{self.name}_bucket{{{prefix}{sep}le="+Inf"}} {count}')
                if prefix:
                    lines.append(f"{self.name}_sum{{{prefix}}} {total}")
                    lines.append(f"{self.name}_count{{{prefix}}} {count}")
                else:
                    lines.append(f"{self.name}_sum {total}")
                    lines.append(f"{self.name}_count {count}")

        return "\n".join(lines)


class HistogramWithLabels:
    """Histogram with specific label values."""

    def __init__(self, parent: Histogram, label_values: tuple):
        self._parent = parent
        self._label_values = label_values

    def observe(self, value: float) -> None:
        """Record an observation."""
        self._parent._observe_labels(self._label_values, value)


# =============================================================================
# Cache Metrics
# =============================================================================

cache_hits_total = Counter(
    name="zdata_cache_hits_total",
    description="Reads served from the response cache",
)

cache_misses_total = Counter(
    name="zdata_cache_misses_total",
    description="Reads that missed the response cache",
)

cache_evictions_total = Counter(
    name="zdata_cache_evictions_total",
    description="Entries evicted because the cache was full",
)

cache_entries = Gauge(
    name="zdata_cache_entries",
    description="Entries currently stored in the response cache",
)


# =============================================================================
# Retry Metrics
# =============================================================================

retry_attempts_total = Counter(
    name="zdata_retry_attempts_total",
    description="Retries scheduled after a retryable failure",
)

retries_exhausted_total = Counter(
    name="zdata_retries_exhausted_total",
    description="Operations that failed on their final attempt",
)


# =============================================================================
# Request Metrics
# =============================================================================

request_latency_seconds = Histogram(
    name="zdata_request_latency_seconds",
    description="Transport request latency in seconds",
    labels=["method"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

operation_failures_total = Counter(
    name="zdata_operation_failures_total",
    description="Failures surfaced to callers by kind",
    labels=["kind"],
)


# =============================================================================
# Metrics Registry
# =============================================================================

_ALL_METRICS = [
    cache_hits_total,
    cache_misses_total,
    cache_evictions_total,
    cache_entries,
    retry_attempts_total,
    retries_exhausted_total,
    request_latency_seconds,
    operation_failures_total,
]


def render_metrics() -> str:
    """Generate all metrics in Prometheus text format."""
    output = []
    for metric in _ALL_METRICS:
        prometheus_text = metric.to_prometheus()
        if prometheus_text.strip():
            output.append(prometheus_text)
    return "\n\n".join(output)


def reset_metrics() -> None:
    """Zero every registered metric."""
    for metric in _ALL_METRICS:
        metric.reset()
    logger.debug("Metrics reset")
