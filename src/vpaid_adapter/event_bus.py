"""Host callback registry for VPAID events."""

from functools import partial
from typing import Any, Callable

from .events import AdapterLogEvents, AdEvent, event_name
from .log_config import get_context_logger
from .metrics import AdapterMetrics, MetricLabels, MetricsCollector, NoOpMetrics


EventCallback = Callable[..., Any]


class EventBus:
    """Maps event names to at most one host callback each.

    Subscribing again under the same name replaces the previous callback.
    Dispatching an event nobody subscribed to is a silent no-op, never an
    error. Callbacks run synchronously and may call back into the ad unit.

    Example:
        >>> bus = EventBus()
        >>> bus.subscribe(AdEvent.LOADED, lambda: print("loaded"))
        >>> bus.dispatch(AdEvent.LOADED)
        loaded
        True
        >>> bus.dispatch(AdEvent.STARTED)
        False
    """

    def __init__(
        self,
        metrics: MetricsCollector | None = None,
        observer: Callable[[str, bool], Any] | None = None,
    ):
        """
        Args:
            metrics: Collector for dispatch counters
            observer: Called with (event_name, delivered) before each delivery
        """
        self._callbacks: dict[str, EventCallback] = {}
        self.metrics = metrics or NoOpMetrics()
        self.observer = observer
        self.logger = get_context_logger("event_bus")

    def subscribe(
        self,
        event: AdEvent | str,
        callback: EventCallback,
        context: Any = None,
    ) -> None:
        """Bind callback to an event name, replacing any prior binding.

        Args:
            event: Event name or AdEvent member
            callback: Callable invoked on dispatch
            context: Optional receiver bound as the callback's first argument
        """
        if not callable(callback):
            raise TypeError(f"callback for {event_name(event)} is not callable")
        name = event_name(event)
        bound = partial(callback, context) if context is not None else callback
        replaced = name in self._callbacks
        self._callbacks[name] = bound
        self.logger.debug("Subscribed", event_name=name, replaced=replaced)

    def unsubscribe(self, event: AdEvent | str) -> None:
        """Clear the binding for an event name; unknown names are ignored."""
        name = event_name(event)
        self._callbacks.pop(name, None)
        self.logger.debug("Unsubscribed", event_name=name)

    def has_subscriber(self, event: AdEvent | str) -> bool:
        return event_name(event) in self._callbacks

    def subscribed_events(self) -> list[str]:
        return list(self._callbacks)

    def dispatch(self, event: AdEvent | str, *args: Any) -> bool:
        """Invoke the callback bound to event with args.

        Returns:
            True if a subscriber received the event
        """
        name = event_name(event)
        callback = self._callbacks.get(name)
        delivered = callback is not None
        self.metrics.increment(
            AdapterMetrics.EVENTS_DISPATCHED,
            labels={
                MetricLabels.EVENT: name,
                MetricLabels.DELIVERED: "true" if delivered else "false",
            },
        )
        if self.observer is not None:
            self.observer(name, delivered)
        if callback is None:
            self.logger.debug(AdapterLogEvents.DISPATCH_MISS, event_name=name)
            return False
        callback(*args)
        return True

    def clear(self) -> None:
        """Drop every binding."""
        self._callbacks.clear()


__all__ = ["EventBus", "EventCallback"]
