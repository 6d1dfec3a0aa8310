"""Tests for client metrics."""

import pytest

from zdata.monitoring.metrics import (
    Counter,
    Gauge,
    Histogram,
    cache_hits_total,
    operation_failures_total,
    render_metrics,
    request_latency_seconds,
    reset_metrics,
)


class TestCounter:
    """Test Counter metric."""

    def test_counter_increment(self):
        """Test counter increment."""
        counter = Counter("test_counter", "Test counter")
        counter.inc()
        counter.inc(2)
        assert counter.value() == 3

    def test_counter_with_labels(self):
        """Test counter with labels."""
        counter = Counter("test_counter", "Test counter", labels=["kind"])
        counter.labels(kind="TRANSPORT").inc()
        counter.labels(kind="VALIDATION").inc(2)
        values = counter.get_all()
        assert values[("TRANSPORT",)] == 1
        assert values[("VALIDATION",)] == 2
        assert counter.value(kind="VALIDATION") == 2

    def test_counter_cannot_decrease(self):
        counter = Counter("test_counter", "Test counter")
        with pytest.raises(ValueError):
            counter.inc(-1)

    def test_counter_prometheus_format(self):
        counter = Counter("test_counter", "Test counter", labels=["kind"])
        counter.labels(kind="UNKNOWN").inc()
        output = counter.to_prometheus()
        assert "# TYPE test_counter counter" in output
        assert 'test_counter{kind="UNKNOWN"} 1.0' in output


class TestGauge:
    """Test Gauge metric."""

    def test_gauge_set_inc_dec(self):
        gauge = Gauge("test_gauge", "Test gauge")
        gauge.set(5)
        gauge.inc()
        gauge.dec(2)
        assert gauge.value() == 4

    def test_gauge_prometheus_format(self):
        gauge = Gauge("test_gauge", "Test gauge")
        gauge.set(3)
        assert "test_gauge 3" in gauge.to_prometheus()


class TestHistogram:
    """Test Histogram metric."""

    def test_histogram_buckets(self):
        histogram = Histogram("test_latency", "Test latency", buckets=(0.1, 1.0))
        histogram.observe(0.05)
        histogram.observe(0.5)
        histogram.observe(2.0)

        output = histogram.to_prometheus()
        assert 'test_latency_bucket{le="0.1"} 1' in output
        assert 'test_latency_bucket{le="1.0"} 2' in output
        assert 'test_latency_bucket{le="+Inf"} 3' in output
        assert "test_latency_count 3" in output

    def test_histogram_with_labels(self):
        histogram = Histogram("test_latency", "Test latency", labels=["method"])
        histogram.labels(method="GET").observe(0.2)
        assert histogram.get_all() == {("GET",): [0.2]}


class TestRegistry:
    """Test the client's registered metrics."""

    def test_render_includes_client_metrics(self):
        cache_hits_total.inc()
        request_latency_seconds.labels(method="GET").observe(0.01)

        output = render_metrics()
        assert "zdata_cache_hits_total 1.0" in output
        assert 'zdata_request_latency_seconds_count{method="GET"} 1' in output

    def test_reset_metrics(self):
        operation_failures_total.labels(kind="TRANSPORT").inc()
        reset_metrics()
        assert operation_failures_total.value(kind="TRANSPORT") == 0
