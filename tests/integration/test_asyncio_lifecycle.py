"""Integration tests running ad units on the asyncio event loop."""

import asyncio

import pytest

from conftest import MP4_VIDEO, SAMPLE_AD, EventRecorder, creative_data
from vpaid_adapter import AdEvent, AdState, AsyncioScheduler, HeadlessRenderer, create_ad_unit


QUARTILES = [
    "AdVideoStart",
    "AdVideoFirstQuartile",
    "AdVideoMidpoint",
    "AdVideoThirdQuartile",
    "AdVideoComplete",
]


def build(variant: str, media_duration: float = 20.0):
    scheduler = AsyncioScheduler()
    renderer = HeadlessRenderer(scheduler, media_duration=media_duration)
    ad = create_ad_unit(variant, renderer, scheduler=scheduler)
    recorder = EventRecorder()
    recorder.attach(ad)
    ad.init_ad(640, 480, "normal", 256, creative_data(videos=[MP4_VIDEO], ads=[SAMPLE_AD]))
    return ad, renderer, recorder


class TestLinearOnEventLoop:
    """End-to-end linear playback with real timers."""

    @pytest.mark.asyncio
    async def test_stop_dispatch_is_deferred(self):
        ad, renderer, recorder = build("linear")
        ad.start_ad()
        await asyncio.sleep(0.4)

        ad.stop_ad()

        assert ad.state is AdState.STOPPED
        assert "AdVideoStart" in recorder.names
        assert recorder.count(AdEvent.STOPPED) == 0
        assert not renderer.is_playing

        await asyncio.sleep(0.15)

        assert recorder.count(AdEvent.STOPPED) == 1

    @pytest.mark.asyncio
    async def test_short_media_plays_to_completion(self):
        ad, _, recorder = build("linear", media_duration=0.5)
        ad.start_ad()

        await asyncio.sleep(1.0)

        assert recorder.only(*QUARTILES) == QUARTILES
        assert recorder.count(AdEvent.STOPPED) == 1
        assert ad.get_ad_duration() == 0.5


class TestNonLinearOnEventLoop:
    """Wall-clock countdown with real timers."""

    @pytest.mark.asyncio
    async def test_remaining_time_counts_down(self):
        ad, _, recorder = build("non_linear")
        ad.start_ad()

        await asyncio.sleep(0.6)

        assert recorder.count(AdEvent.REMAINING_TIME_CHANGE) >= 1
        assert 9.0 < ad.get_ad_remaining_time() < 10.0

        ad.stop_ad()
        await asyncio.sleep(0.1)
        ticks = recorder.count(AdEvent.REMAINING_TIME_CHANGE)
        await asyncio.sleep(0.3)

        assert recorder.count(AdEvent.REMAINING_TIME_CHANGE) == ticks
        assert recorder.names[-1] == "AdStopped"
