"""
Renderer Collaborator

The ad unit never draws anything itself. It instructs a Renderer to mount
presentational content, drive the media element and go full screen, and it
receives media notifications back through the MediaListener protocol.

HeadlessRenderer is a complete in-memory implementation driven by a
Scheduler; it simulates a media element (metadata, periodic time updates,
end of media) and records every instruction it receives.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol

from .creative import AdCard, CreativeParameters
from .log_config import get_context_logger
from .scheduler import ScheduledTask, Scheduler


class MediaListener(Protocol):
    """Receiver of media element notifications (implemented by ad units)."""

    def on_media_metadata(self, duration: float) -> None: ...

    def on_media_time_update(self, current_time: float, duration: float) -> None: ...

    def on_media_ended(self) -> None: ...


@dataclass(frozen=True)
class AdContent:
    """What the renderer should present when the ad starts."""

    card: AdCard = field(default_factory=AdCard)
    overlays: tuple[str, ...] = ()
    linear: bool = True

    @classmethod
    def from_creative(cls, params: CreativeParameters, linear: bool) -> "AdContent":
        return cls(card=params.primary_ad, overlays=tuple(params.overlays), linear=linear)


class Renderer(ABC):
    """
    Abstract presentation surface for an ad unit.

    Required: content mounting and the media element controls. Optional
    hooks default to doing nothing.
    """

    @abstractmethod
    def mount(self, content: AdContent) -> None:
        """Present the ad's content in the slot."""

    @abstractmethod
    def unmount(self) -> None:
        """Remove everything the ad mounted."""

    @abstractmethod
    def can_play_type(self, mimetype: str) -> bool:
        """Whether the media element can play this mimetype."""

    @abstractmethod
    def set_media_source(self, url: str) -> None:
        """Load a media file into the media element."""

    @abstractmethod
    def play(self) -> None:
        """Start or resume media playback."""

    @abstractmethod
    def pause(self) -> None:
        """Pause media playback."""

    @abstractmethod
    def get_media_time(self) -> tuple[float, float]:
        """Return (current_time, duration); duration is NaN until known.

        Read by the ad unit when it pauses or stops, between time updates.
        """

    def attach_surfaces(self, slot: Any = None, video_slot: Any = None) -> None:
        """Capture the host-provided slot and video slot."""

    def set_media_listener(self, listener: MediaListener | None) -> None:
        """Register the receiver of media notifications."""

    def set_volume(self, volume: float) -> None:
        """Apply a normalised (0..1) volume to the media element."""

    def resize(self, width: int, height: int, view_mode: str) -> None:
        """Re-layout for new dimensions."""

    def show_media(self, visible: bool) -> None:
        """Show or hide the media element."""

    def request_fullscreen(self) -> None:
        """Ask the platform to present the ad full screen."""


class HeadlessRenderer(Renderer):
    """
    In-memory renderer with a simulated media element.

    Media time advances with the scheduler's clock while playing. Metadata is
    announced asynchronously after a source is set, time updates fire every
    `time_update_interval` seconds and end of media is announced once the
    position reaches the duration.

    Examples:
        >>> scheduler = SimulatedScheduler()
        >>> renderer = HeadlessRenderer(scheduler, media_duration=20.0)
        >>> renderer.set_media_source("a.mp4")
        >>> renderer.play()
        >>> scheduler.advance(5.0)
        >>> renderer.get_media_time()
        (5.0, 20.0)
    """

    def __init__(
        self,
        scheduler: Scheduler,
        media_duration: float = 30.0,
        playable_mimetypes: Iterable[str] = ("video/mp4", "video/webm"),
        time_update_interval: float = 0.25,
    ):
        self.scheduler = scheduler
        self.media_duration = media_duration
        self.playable_mimetypes = set(playable_mimetypes)
        self.time_update_interval = time_update_interval

        self.listener: MediaListener | None = None
        self.slot: Any = None
        self.video_slot: Any = None
        self.mounted: AdContent | None = None
        self.media_source: str | None = None
        self.media_visible = True
        self.volume = 1.0
        self.size: tuple[int, int, str] | None = None
        self.fullscreen_requests = 0
        self.is_playing = False
        self.ended = False
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

        self._metadata_loaded = False
        self._position = 0.0
        self._play_started_at: float | None = None
        self._ticker: ScheduledTask | None = None
        self._metadata_task: ScheduledTask | None = None

        self.logger = get_context_logger("headless_renderer")

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    # ===== Surfaces and content =====

    def attach_surfaces(self, slot: Any = None, video_slot: Any = None) -> None:
        self._record("attach_surfaces", slot, video_slot)
        self.slot = slot
        self.video_slot = video_slot

    def set_media_listener(self, listener: MediaListener | None) -> None:
        self.listener = listener

    def mount(self, content: AdContent) -> None:
        self._record("mount", content)
        self.mounted = content

    def unmount(self) -> None:
        self._record("unmount")
        self.mounted = None

    def resize(self, width: int, height: int, view_mode: str) -> None:
        self._record("resize", width, height, view_mode)
        self.size = (width, height, str(view_mode))

    def show_media(self, visible: bool) -> None:
        self._record("show_media", visible)
        self.media_visible = visible

    def request_fullscreen(self) -> None:
        self._record("request_fullscreen")
        self.fullscreen_requests += 1

    def set_volume(self, volume: float) -> None:
        self._record("set_volume", volume)
        self.volume = volume

    # ===== Media element =====

    def can_play_type(self, mimetype: str) -> bool:
        return mimetype in self.playable_mimetypes

    def set_media_source(self, url: str) -> None:
        self._record("set_media_source", url)
        self._stop_ticker()
        self.media_source = url
        self.is_playing = False
        self.ended = False
        self._position = 0.0
        self._play_started_at = None
        self._metadata_loaded = False
        if self._metadata_task is not None:
            self._metadata_task.cancel()
        self._metadata_task = self.scheduler.call_later(
            0.0, self._load_metadata, name="media_metadata"
        )

    def play(self) -> None:
        self._record("play")
        if self.media_source is None:
            self.logger.warning("play() without a media source")
            return
        if self.is_playing or self.ended:
            return
        self.is_playing = True
        self._play_started_at = self.scheduler.now()
        self._ticker = self.scheduler.call_every(
            self.time_update_interval, self._time_update, name="media_timeupdate"
        )

    def pause(self) -> None:
        self._record("pause")
        if not self.is_playing:
            return
        self._position = self._current_position()
        self.is_playing = False
        self._play_started_at = None
        self._stop_ticker()

    def get_media_time(self) -> tuple[float, float]:
        duration = self.media_duration if self._metadata_loaded else math.nan
        return self._current_position(), duration

    # ===== Simulation internals =====

    def _current_position(self) -> float:
        position = self._position
        if self.is_playing and self._play_started_at is not None:
            position += self.scheduler.now() - self._play_started_at
        return min(position, self.media_duration)

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _load_metadata(self) -> None:
        if self._metadata_loaded or self.media_source is None:
            return
        self._metadata_loaded = True
        if self.listener is not None:
            self.listener.on_media_metadata(self.media_duration)

    def _time_update(self) -> None:
        self._load_metadata()
        current, duration = self.get_media_time()
        if self.listener is not None:
            self.listener.on_media_time_update(current, duration)
        if current >= self.media_duration and self.is_playing:
            self._position = self.media_duration
            self.is_playing = False
            self._play_started_at = None
            self.ended = True
            self._stop_ticker()
            if self.listener is not None:
                self.listener.on_media_ended()


__all__ = ["MediaListener", "AdContent", "Renderer", "HeadlessRenderer"]
