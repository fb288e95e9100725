"""Pytest configuration and shared fixtures for VPAID adapter tests."""

import json
import sys
from pathlib import Path
from typing import Any

import pytest


sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vpaid_adapter.config import AdUnitConfig
from vpaid_adapter.event_bus import EventBus
from vpaid_adapter.events import AdEvent
from vpaid_adapter.linear_ad_unit import LinearAdUnit
from vpaid_adapter.non_linear_ad_unit import NonLinearAdUnit
from vpaid_adapter.renderer import HeadlessRenderer
from vpaid_adapter.scheduler import SimulatedScheduler


# ==================== Helpers ====================


class EventRecorder:
    """Subscribes to every AdEvent and records dispatches in order."""

    def __init__(self):
        self.events: list[tuple[str, tuple[Any, ...]]] = []

    def attach(self, target: Any) -> "EventRecorder":
        """Subscribe to all AdEvent names on an ad unit or EventBus."""
        for event in AdEvent:
            target.subscribe(event, self._make_callback(event.value))
        return self

    def _make_callback(self, name: str):
        def callback(*args: Any) -> None:
            self.events.append((name, args))

        return callback

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def count(self, name: str | AdEvent) -> int:
        name = name.value if isinstance(name, AdEvent) else name
        return self.names.count(name)

    def only(self, *names: str | AdEvent) -> list[str]:
        """Recorded names restricted to the given events, in order."""
        wanted = {n.value if isinstance(n, AdEvent) else n for n in names}
        return [name for name in self.names if name in wanted]

    def clear(self) -> None:
        self.events.clear()

    def stop_on(self, ad: Any, event: AdEvent) -> None:
        """Record event, then call stop_ad from inside its callback."""
        record = self._make_callback(event.value)

        def callback(*args: Any) -> None:
            record(*args)
            ad.stop_ad()

        ad.subscribe(event, callback)


def creative_data(
    videos: list[dict[str, str]] | None = None,
    ads: list[dict[str, str]] | None = None,
    overlays: list[str] | None = None,
) -> dict[str, str]:
    """Build the creative data mapping the host passes to init_ad."""
    params: dict[str, Any] = {}
    if videos is not None:
        params["videos"] = videos
    if ads is not None:
        params["ads"] = ads
    if overlays is not None:
        params["overlays"] = overlays
    return {"AdParameters": json.dumps(params)}


MP4_VIDEO = {"url": "a.mp4", "mimetype": "video/mp4"}
SAMPLE_AD = {
    "thumbnailUrl": "https://cdn.example.com/thumb.jpg",
    "title": "Ten things you did not know",
    "sourceName": "Example News",
}


# ==================== Fixtures ====================


@pytest.fixture
def scheduler() -> SimulatedScheduler:
    """Virtual clock starting at zero."""
    return SimulatedScheduler()


@pytest.fixture
def renderer(scheduler) -> HeadlessRenderer:
    """Headless renderer with a 20 second media element."""
    return HeadlessRenderer(scheduler, media_duration=20.0)


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def linear_ad(renderer, scheduler, recorder) -> LinearAdUnit:
    """Linear ad unit subscribed to every event by the recorder."""
    ad = LinearAdUnit(renderer, config=AdUnitConfig.linear(), scheduler=scheduler)
    recorder.attach(ad)
    return ad


@pytest.fixture
def non_linear_ad(renderer, scheduler, recorder) -> NonLinearAdUnit:
    """Non-linear ad unit subscribed to every event by the recorder."""
    ad = NonLinearAdUnit(renderer, config=AdUnitConfig.non_linear(), scheduler=scheduler)
    recorder.attach(ad)
    return ad


@pytest.fixture
def video_creative() -> dict[str, str]:
    return creative_data(videos=[MP4_VIDEO], ads=[SAMPLE_AD], overlays=["overlay.png"])
