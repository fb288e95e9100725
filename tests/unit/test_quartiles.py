"""Unit tests for quartile progress reporting."""

import math

import pytest
from prometheus_client import CollectorRegistry

from vpaid_adapter.events import AdEvent
from vpaid_adapter.exceptions import VpaidConfigValidationError
from vpaid_adapter.metrics import PrometheusMetrics
from vpaid_adapter.quartiles import QuartileMark, QuartileReporter, QuartileSchedule


EXPECTED_SEQUENCE = [
    "AdVideoStart",
    "AdVideoFirstQuartile",
    "AdVideoMidpoint",
    "AdVideoThirdQuartile",
    "AdVideoComplete",
]


@pytest.fixture
def reporter(bus, recorder) -> QuartileReporter:
    recorder.attach(bus)
    return QuartileReporter(bus)


def progress_steps(step: float) -> list[float]:
    """Percent values from 0 to 100 in increments of step."""
    values = []
    percent = 0.0
    while percent < 100.0:
        values.append(percent)
        percent += step
    values.append(100.0)
    return values


class TestQuartileSchedule:
    """Test schedule construction and validation."""

    def test_default_schedule(self):
        schedule = QuartileSchedule.default()

        assert len(schedule) == 5
        assert [mark.threshold for mark in schedule] == [0, 25, 50, 75, 100]
        assert [event.value for event in schedule.events()] == EXPECTED_SEQUENCE

    def test_tuples_are_normalized(self):
        schedule = QuartileSchedule([(0, "AdVideoStart"), (100, AdEvent.VIDEO_COMPLETE)])

        assert schedule[0] == QuartileMark(0.0, AdEvent.VIDEO_START)
        assert schedule[1].event is AdEvent.VIDEO_COMPLETE

    @pytest.mark.parametrize(
        "marks",
        [
            [(0, "AdVideoStart"), (0, "AdVideoComplete")],
            [(50, "AdVideoMidpoint"), (25, "AdVideoFirstQuartile")],
        ],
    )
    def test_thresholds_must_strictly_increase(self, marks):
        with pytest.raises(VpaidConfigValidationError) as exc_info:
            QuartileSchedule(marks)

        assert exc_info.value.config_key == "quartile_schedule"

    def test_unknown_event_rejected(self):
        with pytest.raises(ValueError):
            QuartileSchedule([(0, "AdVideoBeginning")])


class TestQuartileReporter:
    """Test monotonic quartile reporting."""

    @pytest.mark.parametrize("step", [0.5, 1, 7, 24.9, 33, 50, 99, 100])
    def test_any_step_size_yields_exact_sequence(self, reporter, recorder, step):
        """Test that each quartile fires once, in order, for any step size."""
        for percent in progress_steps(step):
            reporter.on_progress(percent)

        assert recorder.names == EXPECTED_SEQUENCE
        assert reporter.is_complete

    def test_single_jump_fires_all_crossed_marks(self, reporter, recorder):
        fired = reporter.on_progress(100.0)

        assert [event.value for event in fired] == EXPECTED_SEQUENCE
        assert recorder.names == EXPECTED_SEQUENCE

    def test_partial_jump(self, reporter, recorder):
        fired = reporter.on_progress(60.0)

        assert fired == [AdEvent.VIDEO_START, AdEvent.VIDEO_FIRST_QUARTILE, AdEvent.VIDEO_MIDPOINT]
        assert reporter.last_quartile_index == 3

    def test_going_backwards_never_refires(self, reporter, recorder):
        """Test that the cursor never rewinds."""
        reporter.on_progress(30.0)
        reporter.on_progress(10.0)
        reporter.on_progress(0.0)
        reporter.on_progress(30.0)

        assert recorder.names == EXPECTED_SEQUENCE[:2]

    def test_inert_after_complete(self, reporter, recorder):
        reporter.on_progress(100.0)
        recorder.clear()

        assert reporter.on_progress(100.0) == []
        assert reporter.on_progress(150.0) == []
        assert recorder.names == []

    @pytest.mark.parametrize("value", [math.nan, math.inf, None])
    def test_non_finite_progress_ignored(self, reporter, recorder, value):
        assert reporter.on_progress(value) == []
        assert reporter.last_quartile_index == 0
        assert recorder.names == []

    def test_cursor_advances_before_dispatch(self, bus):
        """Test that a reentrant progress report cannot double-fire a mark."""
        reporter = QuartileReporter(bus)
        fired = []

        def on_start():
            fired.append("start")
            reporter.on_progress(0.0)

        bus.subscribe(AdEvent.VIDEO_START, on_start)

        reporter.on_progress(0.0)

        assert fired == ["start"]
        assert reporter.last_quartile_index == 1

    def test_custom_schedule(self, bus, recorder):
        recorder.attach(bus)
        schedule = QuartileSchedule([(10, AdEvent.VIDEO_START), (90, AdEvent.VIDEO_COMPLETE)])
        reporter = QuartileReporter(bus, schedule)

        reporter.on_progress(5.0)
        assert recorder.names == []

        reporter.on_progress(95.0)
        assert recorder.names == ["AdVideoStart", "AdVideoComplete"]

    def test_halt_drops_pending_marks(self, bus):
        """Test that halting from a callback stops the rest of a multi-mark call."""
        reporter = QuartileReporter(bus)
        bus.subscribe(AdEvent.VIDEO_START, reporter.halt)

        assert reporter.on_progress(60.0) == [AdEvent.VIDEO_START]
        assert reporter.on_progress(100.0) == []
        assert reporter.last_quartile_index == 1

    def test_metrics_counted(self, bus):
        registry = CollectorRegistry()
        reporter = QuartileReporter(bus, metrics=PrometheusMetrics(registry=registry))

        reporter.on_progress(30.0)

        assert registry.get_sample_value(
            "vpaid_quartiles_reported_total", {"event": "AdVideoFirstQuartile"}
        ) == 1.0
