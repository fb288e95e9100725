"""
Metrics collection module for the VPAID adapter.

Provides pluggable metrics interfaces for observing ad units in production.
The default collector is a no-op, so ad units carry zero overhead unless a
backend is injected.

Example:
    >>> from vpaid_adapter.metrics import NoOpMetrics, PrometheusMetrics
    >>>
    >>> metrics = NoOpMetrics()
    >>> metrics.increment('vpaid.events.dispatched')  # No-op
    >>>
    >>> metrics = PrometheusMetrics()
    >>> metrics.increment('vpaid.events.dispatched', labels={'event': 'AdLoaded'})
"""

from .base import MetricsCollector, NoOpMetrics
from .constants import AdapterMetrics, MetricLabels
from .prometheus import PrometheusMetrics

__all__ = [
    "MetricsCollector",
    "NoOpMetrics",
    "PrometheusMetrics",
    "AdapterMetrics",
    "MetricLabels",
]
