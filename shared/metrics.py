"""
Shared metrics configuration for the route client.
"""

import threading
from typing import Any, Dict, Optional

from prometheus_client import REGISTRY, Counter, Histogram, CollectorRegistry


class MetricsCollector:
    """Centralized metrics collector for the route client.

    Metrics are registered on ``registry`` when one is given. Without a
    registry the metrics still count but are not exported, which keeps
    several collectors in one process from clashing.
    """

    def __init__(self, service_name: str = "route_client", registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry
        self._metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up request and cache metrics."""

        # Request metrics
        self._metrics["requests_total"] = Counter(
            "requests_total",
            "Total orchestrated requests",
            ["mode", "outcome"],
            registry=self.registry
        )

        self._metrics["request_duration_seconds"] = Histogram(
            "request_duration_seconds",
            "Orchestrated request duration in seconds",
            ["mode"],
            registry=self.registry
        )

        self._metrics["retries_total"] = Counter(
            "retries_total",
            "Total retries authorized by the retrier",
            registry=self.registry
        )

        self._metrics["not_modified_total"] = Counter(
            "not_modified_total",
            "Total 304 responses served from cache",
            registry=self.registry
        )

        # Cache metrics
        self._metrics["cache_hits_total"] = Counter(
            "cache_hits_total",
            "Total cache hits",
            ["tier"],
            registry=self.registry
        )

        self._metrics["cache_misses_total"] = Counter(
            "cache_misses_total",
            "Total cache misses",
            ["tier"],
            registry=self.registry
        )

        self._metrics["disk_evictions_total"] = Counter(
            "disk_evictions_total",
            "Total disk cache entries evicted",
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def record_request(self, mode: str, outcome: str, duration: float):
        """Record one orchestrated request."""
        self.increment_counter("requests_total", mode=mode, outcome=outcome)
        self.observe_histogram("request_duration_seconds", duration, mode=mode)

    def increment_counter(self, metric_name: str, amount: float = 1, **labels):
        """Increment a counter metric."""
        metric = self._metrics.get(metric_name)
        if metric is None:
            return
        with self._lock:
            if labels:
                metric.labels(**labels).inc(amount)
            else:
                metric.inc(amount)

    def observe_histogram(self, metric_name: str, value: float, **labels):
        """Observe a histogram metric."""
        metric = self._metrics.get(metric_name)
        if metric is None:
            return
        with self._lock:
            if labels:
                metric.labels(**labels).observe(value)
            else:
                metric.observe(value)


_default_collector: Optional[MetricsCollector] = None
_default_collector_lock = threading.Lock()


def get_metrics_collector(service_name: str = "route_client") -> MetricsCollector:
    """Get the process-wide collector exported on the default Prometheus registry.

    The first caller names it; later callers share the same instance so the
    metrics are registered once.
    """
    global _default_collector
    with _default_collector_lock:
        if _default_collector is None:
            _default_collector = MetricsCollector(service_name, REGISTRY)
        return _default_collector
