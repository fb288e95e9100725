"""Unit tests for the EventBus callback registry."""

import pytest
from prometheus_client import CollectorRegistry

from vpaid_adapter.event_bus import EventBus
from vpaid_adapter.events import AdEvent
from vpaid_adapter.metrics import PrometheusMetrics


class TestSubscribe:
    """Test binding callbacks to event names."""

    def test_dispatch_invokes_callback_with_args(self, bus):
        """Test that dispatch passes positional arguments through."""
        received = []
        bus.subscribe(AdEvent.CLICK_THRU, lambda *args: received.append(args))

        assert bus.dispatch(AdEvent.CLICK_THRU, "", "0", True) is True
        assert received == [("", "0", True)]

    def test_string_and_enum_names_are_equivalent(self, bus):
        """Test that AdEvent members and wire names address the same slot."""
        calls = []
        bus.subscribe("AdLoaded", lambda: calls.append("loaded"))

        bus.dispatch(AdEvent.LOADED)

        assert calls == ["loaded"]
        assert bus.has_subscriber(AdEvent.LOADED)

    def test_resubscribe_replaces_previous_callback(self, bus):
        """Test that at most one callback is bound per event name."""
        calls = []
        bus.subscribe(AdEvent.STARTED, lambda: calls.append("first"))
        bus.subscribe(AdEvent.STARTED, lambda: calls.append("second"))

        bus.dispatch(AdEvent.STARTED)

        assert calls == ["second"]
        assert bus.subscribed_events() == ["AdStarted"]

    def test_context_is_bound_as_first_argument(self, bus):
        """Test that a subscribe context is passed before dispatch args."""

        class Host:
            def __init__(self):
                self.seen = []

            def on_click(self, url, click_id, player_handles):
                self.seen.append((url, click_id, player_handles))

        host = Host()
        bus.subscribe(AdEvent.CLICK_THRU, Host.on_click, host)

        bus.dispatch(AdEvent.CLICK_THRU, "", "0", True)

        assert host.seen == [("", "0", True)]

    def test_non_callable_rejected(self, bus):
        """Test that subscribing something uncallable fails immediately."""
        with pytest.raises(TypeError):
            bus.subscribe(AdEvent.LOADED, "not a function")  # type: ignore


class TestDispatch:
    """Test dispatch semantics."""

    def test_missing_subscriber_is_silent(self, bus):
        """Test that dispatching an unbound event is a no-op."""
        assert bus.dispatch(AdEvent.VIDEO_COMPLETE) is False
        assert bus.dispatch("SomethingUnknown", 1, 2) is False

    def test_unsubscribe_makes_dispatch_inert(self, bus):
        """Test that unsubscribe clears the binding."""
        calls = []
        bus.subscribe(AdEvent.PAUSED, lambda: calls.append("paused"))
        bus.unsubscribe(AdEvent.PAUSED)

        assert bus.dispatch(AdEvent.PAUSED) is False
        assert calls == []

    def test_unsubscribe_unknown_name(self, bus):
        """Test that unsubscribing an unbound name does not raise."""
        bus.unsubscribe("NeverSubscribed")
        assert bus.subscribed_events() == []

    def test_callback_may_reenter_the_bus(self, bus):
        """Test that a callback can dispatch and unsubscribe during dispatch."""
        order = []

        def on_skipped():
            order.append("skipped")
            bus.unsubscribe(AdEvent.SKIPPED)
            bus.dispatch(AdEvent.STOPPED)

        bus.subscribe(AdEvent.SKIPPED, on_skipped)
        bus.subscribe(AdEvent.STOPPED, lambda: order.append("stopped"))

        bus.dispatch(AdEvent.SKIPPED)
        bus.dispatch(AdEvent.SKIPPED)

        assert order == ["skipped", "stopped"]

    def test_callback_exceptions_propagate(self, bus):
        """Test that errors raised by host callbacks are not swallowed."""

        def broken():
            raise RuntimeError("host failure")

        bus.subscribe(AdEvent.LOADED, broken)

        with pytest.raises(RuntimeError, match="host failure"):
            bus.dispatch(AdEvent.LOADED)

    def test_observer_sees_every_dispatch(self):
        """Test that the observer is told about delivered and missed events."""
        seen = []
        bus = EventBus(observer=lambda name, delivered: seen.append((name, delivered)))
        bus.subscribe(AdEvent.LOADED, lambda: None)

        bus.dispatch(AdEvent.LOADED)
        bus.dispatch(AdEvent.STARTED)

        assert seen == [("AdLoaded", True), ("AdStarted", False)]

    def test_clear(self, bus):
        """Test dropping every binding."""
        bus.subscribe(AdEvent.LOADED, lambda: None)
        bus.subscribe(AdEvent.STARTED, lambda: None)

        bus.clear()

        assert bus.subscribed_events() == []


class TestDispatchMetrics:
    """Test dispatch counters."""

    def test_dispatch_counter_labels(self):
        """Test that delivered and missed dispatches are counted separately."""
        registry = CollectorRegistry()
        bus = EventBus(metrics=PrometheusMetrics(registry=registry))
        bus.subscribe(AdEvent.LOADED, lambda: None)

        bus.dispatch(AdEvent.LOADED)
        bus.dispatch(AdEvent.LOADED)
        bus.dispatch(AdEvent.STARTED)

        assert registry.get_sample_value(
            "vpaid_events_dispatched_total", {"event": "AdLoaded", "delivered": "true"}
        ) == 2.0
        assert registry.get_sample_value(
            "vpaid_events_dispatched_total", {"event": "AdStarted", "delivered": "false"}
        ) == 1.0
