"""
Ad Timing Engine

Computes the remaining time of an ad with one of two strategies:

- WallClockTiming: non-linear ads that are not backed by media playback.
  Remaining time is the duration minus the elapsed unpaused scheduler time.
- MediaTiming: linear ads (and non-linear ads converted to linear). The media
  element owns the clock; remaining time is sampled from its time updates.

The switch from wall-clock to media timing is one-way.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from .attributes import AttributeStore
from .log_config import get_context_logger
from .metrics import AdapterMetrics, MetricsCollector, NoOpMetrics
from .scheduler import ScheduledTask, Scheduler


@dataclass
class TimingSnapshot:
    """Wall-clock bookkeeping of a started ad."""

    start_time: float
    paused_accumulated: float = 0.0
    is_paused: bool = False
    pause_start_time: float | None = None


def _known_duration(duration: float | None) -> bool:
    return duration is not None and math.isfinite(duration) and duration > 0


class TimingStrategy(ABC):
    """Source of the remaining time of an ad."""

    name: str = "abstract"

    @abstractmethod
    def start(self) -> None:
        """Begin timing."""

    @abstractmethod
    def pause(self) -> None:
        """Freeze timing."""

    @abstractmethod
    def resume(self) -> None:
        """Unfreeze timing."""

    @abstractmethod
    def remaining(self) -> float | None:
        """Current remaining time in seconds, None if not computable."""


class WallClockTiming(TimingStrategy):
    """Remaining = duration - (now - start_time - paused_accumulated).

    While paused, remaining() keeps returning the value computed at the
    moment of the pause.
    """

    name = "wall_clock"

    def __init__(self, scheduler: Scheduler, duration_source: Callable[[], float | None]):
        self.scheduler = scheduler
        self.duration_source = duration_source
        self.snapshot: TimingSnapshot | None = None
        self._frozen_remaining: float | None = None

    @property
    def started(self) -> bool:
        return self.snapshot is not None

    @property
    def is_paused(self) -> bool:
        return self.snapshot is not None and self.snapshot.is_paused

    def start(self) -> None:
        self.snapshot = TimingSnapshot(start_time=self.scheduler.now())
        self._frozen_remaining = None

    def elapsed(self) -> float:
        if self.snapshot is None:
            return 0.0
        now = self.scheduler.now()
        if self.snapshot.is_paused and self.snapshot.pause_start_time is not None:
            now = self.snapshot.pause_start_time
        return now - self.snapshot.start_time - self.snapshot.paused_accumulated

    def remaining(self) -> float | None:
        if self.snapshot is None:
            return None
        if self.snapshot.is_paused and self._frozen_remaining is not None:
            return self._frozen_remaining
        duration = self.duration_source()
        if duration is None:
            return None
        return duration - self.elapsed()

    def pause(self) -> None:
        if self.snapshot is None or self.snapshot.is_paused:
            return
        self._frozen_remaining = self.remaining()
        self.snapshot.is_paused = True
        self.snapshot.pause_start_time = self.scheduler.now()

    def resume(self) -> None:
        if self.snapshot is None or not self.snapshot.is_paused:
            return
        if self.snapshot.pause_start_time is not None:
            self.snapshot.paused_accumulated += (
                self.scheduler.now() - self.snapshot.pause_start_time
            )
        self.snapshot.is_paused = False
        self.snapshot.pause_start_time = None
        self._frozen_remaining = None


class MediaTiming(TimingStrategy):
    """Remaining = media duration - media current time, per time update."""

    name = "media"

    def __init__(self):
        self.current_time = 0.0
        self.media_duration: float | None = None

    def start(self) -> None:
        pass

    def pause(self) -> None:
        pass

    def resume(self) -> None:
        pass

    def sample(self, current_time: float, duration: float | None) -> float | None:
        """Record a time update.

        Returns:
            Percent played, or None while the media duration is unknown
        """
        self.current_time = float(current_time)
        if not _known_duration(duration):
            return None
        self.media_duration = float(duration)
        return self.current_time * 100.0 / self.media_duration

    def remaining(self) -> float | None:
        if self.media_duration is None:
            return None
        return self.media_duration - self.current_time


class TimingEngine:
    """Selects the timing strategy of an ad and runs its periodic ticker.

    Results are committed to the AttributeStore: remaining time on every
    computation, duration when the media reports a different known value.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        attributes: AttributeStore,
        media_driven: bool,
        tick_interval: float = 0.25,
        metrics: MetricsCollector | None = None,
    ):
        self.scheduler = scheduler
        self.attributes = attributes
        self.metrics = metrics or NoOpMetrics()
        self.tick_interval = tick_interval
        self.wall_clock = WallClockTiming(scheduler, lambda: attributes.duration)
        self.media = MediaTiming()
        self.strategy: TimingStrategy = self.media if media_driven else self.wall_clock
        self._ticker: ScheduledTask | None = None
        self.logger = get_context_logger("timing_engine")

    @property
    def media_driven(self) -> bool:
        return self.strategy is self.media

    @property
    def ticking(self) -> bool:
        return self._ticker is not None and self._ticker.active

    # ===== Lifecycle =====

    def start(self) -> None:
        self.strategy.start()
        if not self.media_driven:
            self._commit(self.wall_clock.remaining())
            self.start_ticker()

    def pause(self) -> None:
        self.stop_ticker()
        self.strategy.pause()

    def resume(self) -> None:
        self.strategy.resume()
        if not self.media_driven:
            self.start_ticker()

    def stop(self) -> None:
        self.stop_ticker()
        if not self.media_driven:
            self.wall_clock.pause()

    def switch_to_media(self) -> bool:
        """Hand the clock over to the media element (one-way).

        Returns:
            False if the engine was already media-driven
        """
        if self.media_driven:
            return False
        self.stop_ticker()
        self.wall_clock.pause()
        self.strategy = self.media
        self.logger.info("Timing switched to media clock")
        return True

    # ===== Ticker =====

    def start_ticker(self) -> None:
        if self.media_driven or self.ticking:
            return
        self._ticker = self.scheduler.call_every(
            self.tick_interval, self._tick, name="remaining_time_ticker"
        )

    def stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _tick(self) -> None:
        remaining = self.wall_clock.remaining()
        if remaining is None:
            return
        self.metrics.gauge(AdapterMetrics.REMAINING_TIME, max(remaining, 0.0))
        self.attributes.set_remaining_time(remaining, notify=True)

    # ===== Sampling =====

    def _commit(self, remaining: float | None) -> None:
        if remaining is not None:
            self.attributes.set_remaining_time(remaining)

    def remaining_time(self) -> float:
        """Remaining time for the host, clamped at zero."""
        if not self.media_driven:
            self._commit(self.wall_clock.remaining())
        return self.attributes.remaining_time

    def sync_media(self, current_time: float, duration: float | None) -> None:
        """Commit remaining time from a media position read on demand.

        Unlike on_time_update this never changes the stored duration.
        """
        if not self.media_driven:
            return
        self.media.sample(current_time, duration)
        self._commit(self.media.remaining())

    def on_metadata(self, duration: float | None) -> bool:
        """Apply a media duration report.

        Returns:
            True if the stored duration changed (AdDurationChange dispatched)
        """
        if not self.media_driven or not _known_duration(duration):
            return False
        return self.attributes.set_duration(duration)

    def on_time_update(self, current_time: float, duration: float | None) -> float | None:
        """Apply a media time update.

        Returns:
            Percent played, or None when it cannot be computed
        """
        if not self.media_driven:
            return None
        percent = self.media.sample(current_time, duration)
        if percent is None:
            return None
        self.on_metadata(duration)
        self._commit(self.media.remaining())
        return percent


__all__ = [
    "TimingSnapshot",
    "TimingStrategy",
    "WallClockTiming",
    "MediaTiming",
    "TimingEngine",
]
