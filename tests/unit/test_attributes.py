"""Unit tests for the attribute store."""

import math

import pytest

from vpaid_adapter.attributes import AttributeStore, ViewMode
from vpaid_adapter.config import (
    PERCENT_VOLUME_SCALE,
    UNIT_VOLUME_SCALE,
    AdUnitConfig,
    AttributeDefaults,
)
from vpaid_adapter.events import AdEvent


@pytest.fixture
def store(bus, recorder) -> AttributeStore:
    recorder.attach(bus)
    return AttributeStore(bus, UNIT_VOLUME_SCALE, AttributeDefaults())


class TestDefaults:
    """Test initial attribute values."""

    def test_linear_defaults(self, store):
        """Test values of a fresh linear store."""
        assert store.width == 0
        assert store.height == 0
        assert store.view_mode is ViewMode.NORMAL
        assert store.desired_bitrate == 256
        assert store.duration == 6.0
        assert store.remaining_time == 13.0
        assert store.volume == 1.0
        assert store.linear is True
        assert store.expanded is False
        assert store.skippable_state is False
        assert store.companions == ""
        assert store.icons is False

    def test_non_linear_defaults(self, bus):
        """Test values of a fresh non-linear store."""
        config = AdUnitConfig.non_linear()
        store = AttributeStore(bus, config.volume_scale, config.defaults)

        assert store.duration == 10.0
        assert store.volume == 50.0
        assert store.linear is False
        assert store.icons == ""

    def test_initialize_emits_nothing(self, store, recorder):
        """Test that host-supplied init values are committed silently."""
        store.initialize(640, 480, "fullscreen", 512)

        assert (store.width, store.height) == (640, 480)
        assert store.view_mode is ViewMode.FULLSCREEN
        assert store.desired_bitrate == 512
        assert recorder.names == []

    def test_initialize_keeps_default_bitrate_when_invalid(self, store):
        """Test that a non-positive bitrate hint is ignored."""
        store.initialize(640, 480, "normal", 0)
        assert store.desired_bitrate == 256


class TestResize:
    """Test dimension changes."""

    def test_resize_commits_before_dispatch(self, bus):
        """Test that a size-change callback observes the new values."""
        store = AttributeStore(bus, UNIT_VOLUME_SCALE)
        observed = []
        bus.subscribe(
            AdEvent.SIZE_CHANGE,
            lambda: observed.append((store.width, store.height, store.view_mode)),
        )

        store.resize(800, 600, "thumbnail")

        assert observed == [(800, 600, ViewMode.THUMBNAIL)]

    def test_relayout_runs_between_commit_and_dispatch(self, bus):
        """Test that the renderer re-layout hook precedes AdSizeChange."""
        store = AttributeStore(bus, UNIT_VOLUME_SCALE)
        order = []
        bus.subscribe(AdEvent.SIZE_CHANGE, lambda: order.append("event"))

        store.resize(
            320, 240, "normal", relayout=lambda w, h, vm: order.append(("relayout", w, h, vm))
        )

        assert order == [("relayout", 320, 240, ViewMode.NORMAL), "event"]

    def test_unknown_view_mode_falls_back_to_normal(self, store, recorder):
        """Test lenient handling of unknown view modes."""
        store.resize(100, 100, "picture-in-picture")

        assert store.view_mode is ViewMode.NORMAL
        assert recorder.names == ["AdSizeChange"]


class TestVolume:
    """Test volume on both scales."""

    def test_set_volume_dispatches_change(self, store, recorder):
        assert store.set_volume(0.4) == 0.4
        assert store.volume == 0.4
        assert recorder.names == ["AdVolumeChange"]

    def test_volume_clamped_to_unit_scale(self, store):
        assert store.set_volume(3.0) == 1.0
        assert store.set_volume(-1.0) == 0.0

    def test_percent_scale(self, bus):
        """Test that non-linear volume lives on 0..100."""
        store = AttributeStore(bus, PERCENT_VOLUME_SCALE)

        assert store.set_volume(75) == 75.0
        assert store.set_volume(150) == 100.0
        assert PERCENT_VOLUME_SCALE.normalize(75) == 0.75


class TestExpanded:
    """Test the expand/collapse asymmetry."""

    def test_expand_dispatches(self, store, recorder):
        store.set_expanded(True)

        assert store.expanded is True
        assert recorder.names == ["AdExpanded"]

    def test_collapse_is_silent(self, store, recorder):
        store.set_expanded(True)
        recorder.clear()

        store.set_expanded(False)

        assert store.expanded is False
        assert recorder.names == []


class TestDuration:
    """Test duration idempotence."""

    def test_same_value_does_not_dispatch(self, store, recorder):
        """Test that re-setting the current duration is a no-op."""
        assert store.set_duration(6.0) is False
        assert recorder.count(AdEvent.DURATION_CHANGE) == 0

    def test_new_value_dispatches_once(self, store, recorder):
        """Test that a new value fires exactly one AdDurationChange."""
        assert store.set_duration(30.0) is True
        assert store.set_duration(30.0) is False

        assert store.duration == 30.0
        assert recorder.count(AdEvent.DURATION_CHANGE) == 1

    def test_unknown_duration(self, store, recorder):
        """Test that None marks the duration as unknown."""
        assert store.set_duration(None) is True
        assert store.duration is None
        assert store.set_duration(None) is False
        assert recorder.count(AdEvent.DURATION_CHANGE) == 1

    @pytest.mark.parametrize("value", [math.nan, math.inf, -1.0])
    def test_invalid_values_rejected(self, store, recorder, value):
        assert store.set_duration(value) is False
        assert store.duration == 6.0
        assert recorder.names == []


class TestLinearAndRemaining:
    """Test linear flag and remaining time."""

    def test_linear_change_only_on_change(self, store, recorder):
        assert store.set_linear(True) is False
        assert store.set_linear(False) is True
        assert recorder.names == ["AdLinearChange"]

    def test_remaining_time_clamped_for_reporting(self, store):
        store.set_remaining_time(-2.5)

        assert store.remaining_time == 0.0
        assert store.raw_remaining_time == -2.5

    def test_remaining_time_notify(self, store, recorder):
        store.set_remaining_time(4.0)
        store.set_remaining_time(3.75, notify=True)

        assert store.remaining_time == 3.75
        assert recorder.names == ["AdRemainingTimeChange"]

    def test_skippable_state_is_silent(self, store, recorder):
        store.set_skippable_state(True)

        assert store.skippable_state is True
        assert recorder.names == []


def test_snapshot(bus):
    """Test the diagnostic snapshot."""
    store = AttributeStore(bus, UNIT_VOLUME_SCALE)
    store.initialize(640, 480, "normal", 256)

    snapshot = store.snapshot()

    assert snapshot["width"] == 640
    assert snapshot["view_mode"] == "normal"
    assert snapshot["duration"] == 6.0
