"""
Abstract base class for metrics collection.

Ad units report dispatched events, absorbed protocol misuse and media
failures through this interface; backends plug in underneath.
"""

from abc import ABC, abstractmethod


class MetricsCollector(ABC):
    """
    Abstract base class for metrics collection.

    Ad units call into the collector synchronously from host callbacks,
    so implementations must not block.
    """

    @abstractmethod
    def increment(
        self, metric: str, value: int = 1, labels: dict[str, str] | None = None
    ) -> None:
        """
        Increment a counter metric.

        Args:
            metric: Metric name (e.g., 'vpaid.events.dispatched')
            value: Amount to increment (default: 1)
            labels: Optional labels (e.g., {'event': 'AdStarted', 'delivered': 'true'})
        """

    @abstractmethod
    def histogram(
        self, metric: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        """
        Record a histogram observation.

        Args:
            metric: Metric name (e.g., 'vpaid.ad.session.seconds')
            value: Observed value
            labels: Optional labels
        """

    @abstractmethod
    def gauge(
        self, metric: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        """
        Set a gauge metric to an absolute value.

        Args:
            metric: Metric name (e.g., 'vpaid.ad.remaining_time.seconds')
            value: Value to set
            labels: Optional labels
        """

    def timing(
        self, metric: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        """Record a duration in seconds (convenience wrapper for histogram)."""
        self.histogram(metric, value, labels)


class NoOpMetrics(MetricsCollector):
    """No-operation metrics collector used when no backend is configured."""

    def increment(
        self, metric: str, value: int = 1, labels: dict[str, str] | None = None
    ) -> None:
        pass

    def histogram(
        self, metric: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        pass

    def gauge(
        self, metric: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        pass


__all__ = ["MetricsCollector", "NoOpMetrics"]
