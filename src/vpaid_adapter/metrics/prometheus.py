"""
Prometheus metrics collector implementation.

Integrates with the prometheus_client library so ad unit metrics can be
scraped alongside the host application's own metrics.
"""

from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram

from .base import MetricsCollector


class PrometheusMetrics(MetricsCollector):
    """
    Prometheus metrics collector.

    Lazily creates one Counter, Histogram or Gauge per metric name. Label
    names are fixed by the first observation of a metric.

    Example:
        >>> from prometheus_client import CollectorRegistry
        >>> metrics = PrometheusMetrics(registry=CollectorRegistry())
        >>> metrics.increment('vpaid.events.dispatched', labels={'event': 'AdLoaded'})
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """
        Initialize Prometheus metrics collector.

        Args:
            registry: Optional CollectorRegistry. If None, uses the default REGISTRY.
        """
        self._registry = registry or REGISTRY
        self._counters: dict[str, Counter] = {}
        self._histograms: dict[str, Histogram] = {}
        self._gauges: dict[str, Gauge] = {}

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    @staticmethod
    def sanitize_metric_name(metric: str) -> str:
        """Convert a dotted metric name to a valid Prometheus name."""
        return metric.replace(".", "_").replace("-", "_")

    def _get_or_create(
        self, cache: dict[str, Any], factory: Any, kind: str, metric: str,
        labels: dict[str, str],
    ) -> Any:
        metric_name = self.sanitize_metric_name(metric)
        if metric_name not in cache:
            cache[metric_name] = factory(
                metric_name,
                f"{kind} for {metric}",
                list(labels.keys()),
                registry=self._registry,
            )
        collector = cache[metric_name]
        return collector.labels(**labels) if labels else collector

    def increment(
        self, metric: str, value: int = 1, labels: dict[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""
        labels = labels or {}
        self._get_or_create(self._counters, Counter, "Counter", metric, labels).inc(value)

    def histogram(
        self, metric: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        """Record a histogram value."""
        labels = labels or {}
        self._get_or_create(
            self._histograms, Histogram, "Histogram", metric, labels
        ).observe(value)

    def gauge(
        self, metric: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        """Set a gauge to an absolute value."""
        labels = labels or {}
        self._get_or_create(self._gauges, Gauge, "Gauge", metric, labels).set(value)


__all__ = ["PrometheusMetrics"]
