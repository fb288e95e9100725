"""
Base VPAID Ad Unit

Abstract base class implementing the host protocol shared by the linear and
non-linear ad units. Implements the Template Method pattern: the lifecycle
state machine, event ordering and teardown live here, while subclasses
supply media preparation, playback start and variant-specific reactions.
"""

import functools
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping

from .attributes import AttributeStore, ViewMode
from .config import AdUnitConfig, AdVariant
from .creative import CreativeParameters, parse_creative_data
from .event_bus import EventBus, EventCallback
from .events import AdapterLogEvents, AdEvent
from .exceptions import (
    CreativeParseError,
    MediaSourceUnavailable,
    ProtocolMisuseError,
    VpaidConfigError,
    VpaidConfigValidationError,
)
from .log_config import get_context_logger, set_ad_context, update_ad_state
from .metrics import AdapterMetrics, MetricLabels, MetricsCollector, NoOpMetrics
from .quartiles import QuartileReporter
from .renderer import AdContent, Renderer
from .scheduler import AsyncioScheduler, ScheduledTask, Scheduler
from .session import AdSession, AdState
from .timing import TimingEngine


NON_TERMINAL_STATES = (AdState.UNSTARTED, AdState.LOADED, AdState.PLAYING, AdState.PAUSED)


def requires_state(*states: AdState) -> Callable:
    """Gate a host operation on the current lifecycle state.

    Calls made in any other state are absorbed: a ProtocolMisuseError is
    logged and counted, and the operation returns None without side effects.
    """

    def decorator(method: Callable) -> Callable:
        @functools.wraps(method)
        def wrapper(self: "BaseAdUnit", *args: Any, **kwargs: Any) -> Any:
            if self.state not in states:
                self._absorb_misuse(method.__name__, allowed=states)
                return None
            return method(self, *args, **kwargs)

        return wrapper

    return decorator


class BaseAdUnit(ABC):
    """
    Abstract base class for VPAID ad units (linear and non-linear).

    Architecture:
        - Template Method: init_ad() and start_ad() delegate to
          _prepare_media() and _begin_playback()
        - Shared Methods: pause/resume/stop/resize/skip/expand work for both
          variants
        - Collaborators: EventBus, AttributeStore, TimingEngine and
          QuartileReporter, all owned by this instance
        - State Management: AdSession records transitions and dispatches

    Usage:
        >>> scheduler = SimulatedScheduler()
        >>> ad = LinearAdUnit(HeadlessRenderer(scheduler), scheduler=scheduler)
        >>> ad.subscribe("AdLoaded", on_loaded)
        >>> ad.init_ad(640, 480, "normal", 256, {"AdParameters": "{}"})
    """

    variant: AdVariant = AdVariant.LINEAR

    def __init__(
        self,
        renderer: Renderer | None = None,
        config: AdUnitConfig | None = None,
        scheduler: Scheduler | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize base ad unit.

        Args:
            renderer: Presentation collaborator (may also be supplied at init_ad
                through the `renderer` environment variable)
            config: AdUnitConfig (uses the variant preset if None)
            scheduler: Clock and timer source (AsyncioScheduler if None)
            metrics: Metrics collector (NoOpMetrics if None)

        Raises:
            VpaidConfigValidationError: If config is for another variant
        """
        self.config = config or AdUnitConfig.for_variant(self.variant)
        if self.config.variant != self.variant:
            raise VpaidConfigValidationError(
                f"{self.__class__.__name__} requires a {self.variant.value} config",
                config_key="variant",
                config_value=self.config.variant.value,
            )
        self.renderer = renderer
        self.scheduler = scheduler or AsyncioScheduler()
        self.metrics = metrics or NoOpMetrics()

        self.session = AdSession(variant=self.variant.value)
        self.bus = EventBus(metrics=self.metrics, observer=self._record_dispatch)
        self.attributes = AttributeStore(
            self.bus, self.config.volume_scale, self.config.defaults
        )
        self.timing = TimingEngine(
            self.scheduler,
            self.attributes,
            media_driven=self.attributes.linear,
            tick_interval=self.config.remaining_time_interval_sec,
            metrics=self.metrics,
        )
        self.quartiles = QuartileReporter(
            self.bus, self.config.quartile_schedule, metrics=self.metrics
        )

        self.creative: CreativeParameters | None = None
        self.media_available = False
        self._stop_task: ScheduledTask | None = None

        self.logger = get_context_logger("ad_unit")
        self.logger.debug(
            AdapterLogEvents.AD_CREATED,
            ad_unit=self.__class__.__name__,
            session_id=self.session.session_id,
            scheduler_mode=self.scheduler.get_mode(),
        )

    # ===== Abstract Methods =====

    @abstractmethod
    def _prepare_media(self) -> None:
        """Set up the media surface during init_ad, before AdLoaded."""

    @abstractmethod
    def _begin_playback(self) -> None:
        """Start media playback or wall-clock timing during start_ad."""

    # ===== Hooks =====

    def _can_pause(self) -> bool:
        return True

    def _after_click_through(self) -> None:
        """Adapter-local reaction to a click, run after AdClickThru."""

    # ===== State =====

    @property
    def state(self) -> AdState:
        return self.session.state

    def _transition(self, to_state: AdState, operation: str) -> None:
        self.session.transition(to_state, operation, self.scheduler.now())
        self.metrics.increment(
            AdapterMetrics.STATE_TRANSITIONS,
            labels={MetricLabels.VARIANT: self.variant.value, MetricLabels.TO_STATE: to_state.value},
        )
        update_ad_state(ad_state=to_state.value)

    def _record_dispatch(self, event: str, delivered: bool) -> None:
        self.session.record_event(event, delivered, self.scheduler.now())

    def _absorb_misuse(self, operation: str, allowed: tuple[AdState, ...] = ()) -> None:
        error = ProtocolMisuseError(
            f"{operation} is not valid in state {self.state.value}",
            operation=operation,
            state=self.state.value,
        )
        self.logger.warning(
            AdapterLogEvents.PROTOCOL_MISUSE,
            error=str(error),
            allowed=[s.value for s in allowed],
        )
        self.metrics.increment(
            AdapterMetrics.PROTOCOL_MISUSE,
            labels={MetricLabels.OPERATION: operation, MetricLabels.STATE: self.state.value},
        )

    # ===== Media source selection =====

    def _select_media_source(self) -> None:
        """Set the first playable video as the renderer's media source.

        Raises:
            MediaSourceUnavailable: If the renderer can play none of them
        """
        videos = self.creative.videos if self.creative else []
        for video in videos:
            if self.renderer.can_play_type(video.mimetype):
                self.renderer.set_media_source(video.url)
                self.media_available = True
                self.logger.info(
                    AdapterLogEvents.MEDIA_SOURCE_SELECTED,
                    url=video.url,
                    mimetype=video.mimetype,
                )
                return
        raise MediaSourceUnavailable(
            "No playable media source", mimetypes=[v.mimetype for v in videos]
        )

    def _load_media_source(self) -> bool:
        """Select a media source, degrading to AdError when none is playable.

        Returns:
            True if a source was set
        """
        try:
            self._select_media_source()
        except MediaSourceUnavailable as e:
            self.media_available = False
            self.logger.warning(AdapterLogEvents.MEDIA_SOURCE_UNAVAILABLE, error=str(e))
            self.metrics.increment(
                AdapterMetrics.MEDIA_SOURCE_UNAVAILABLE,
                labels={MetricLabels.VARIANT: self.variant.value},
            )
            self.bus.dispatch(AdEvent.ERROR)
            return False
        return True

    # ===== Host protocol: lifecycle =====

    def handshake_version(self, host_version: str = "") -> str:
        """Return the supported protocol version."""
        self.logger.debug("Handshake", host_version=host_version)
        return self.config.handshake_version

    @requires_state(AdState.UNSTARTED)
    def init_ad(
        self,
        width: int,
        height: int,
        view_mode: ViewMode | str,
        desired_bitrate: int,
        creative_data: Mapping[str, Any] | None,
        environment_vars: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Initialize the ad with host dimensions and creative data.

        Args:
            width: Slot width in pixels
            height: Slot height in pixels
            view_mode: normal, fullscreen or thumbnail
            desired_bitrate: Bitrate hint in kbps
            creative_data: Mapping holding the `AdParameters` JSON string
            environment_vars: Host environment; `slot` and `videoSlot` are
                handed to the renderer, `renderer` overrides the constructor one

        Raises:
            CreativeParseError: If AdParameters is missing or invalid
            VpaidConfigError: If no renderer is available
        """
        environment = environment_vars or {}
        try:
            creative = parse_creative_data(creative_data)
        except CreativeParseError:
            self.metrics.increment(
                AdapterMetrics.CREATIVE_PARSE_FAILED,
                labels={MetricLabels.VARIANT: self.variant.value},
            )
            raise

        renderer = environment.get("renderer") or self.renderer
        if renderer is None:
            raise VpaidConfigError(
                "No renderer available for the ad unit",
                context={"ad_unit": self.__class__.__name__},
            )
        self.renderer = renderer
        self.creative = creative

        self.renderer.attach_surfaces(environment.get("slot"), environment.get("videoSlot"))
        self.renderer.set_media_listener(self)
        self.attributes.initialize(width, height, view_mode, desired_bitrate)

        set_ad_context(
            ad_session_id=self.session.session_id,
            ad_variant=self.variant.value,
            ad_state=self.state.value,
        )

        self._prepare_media()
        if self.state.terminal:
            # An AdError subscriber stopped the ad
            return
        self._transition(AdState.LOADED, "init_ad")
        self.logger.info(
            AdapterLogEvents.AD_LOADED,
            width=self.attributes.width,
            height=self.attributes.height,
            view_mode=self.attributes.view_mode.value,
            media_available=self.media_available,
        )
        self.bus.dispatch(AdEvent.LOADED)

    @requires_state(AdState.LOADED)
    def start_ad(self) -> None:
        """Mount the creative, begin playback and report the impression."""
        self.renderer.mount(AdContent.from_creative(self.creative, linear=self.attributes.linear))
        self._transition(AdState.PLAYING, "start_ad")
        self._begin_playback()
        self.logger.info(AdapterLogEvents.AD_STARTED, media_available=self.media_available)
        self.bus.dispatch(AdEvent.STARTED)
        if self.state.terminal:
            return
        self.bus.dispatch(AdEvent.IMPRESSION)

    @requires_state(AdState.PLAYING)
    def pause_ad(self) -> None:
        if not self._can_pause():
            self.logger.debug("Pause ignored", reason="ad_not_linear")
            return
        self.timing.pause()
        if self.media_available:
            self._sync_media_time()
            self.renderer.pause()
        self._transition(AdState.PAUSED, "pause_ad")
        self.logger.info(AdapterLogEvents.AD_PAUSED)
        self.bus.dispatch(AdEvent.PAUSED)

    @requires_state(AdState.PAUSED)
    def resume_ad(self) -> None:
        self.timing.resume()
        if self.media_available:
            self.renderer.play()
        self._transition(AdState.PLAYING, "resume_ad")
        self.logger.info(AdapterLogEvents.AD_RESUMED)
        self.bus.dispatch(AdEvent.PLAYING)

    @requires_state(*NON_TERMINAL_STATES)
    def stop_ad(self) -> None:
        """Tear down timers and content; AdStopped follows after stop_delay_sec.

        The deferred dispatch cannot be cancelled once scheduled.
        """
        self.timing.stop()
        self.quartiles.halt()
        if self.renderer is not None:
            if self.media_available:
                self._sync_media_time()
                self.renderer.pause()
            self.renderer.unmount()
            self.renderer.set_media_listener(None)
        self._transition(AdState.STOPPED, "stop_ad")
        self.metrics.timing(
            AdapterMetrics.SESSION_DURATION,
            self.session.time_in_session(),
            labels={MetricLabels.VARIANT: self.variant.value},
        )
        self._stop_task = self.scheduler.call_later(
            self.config.stop_delay_sec, self._dispatch_stopped, name="ad_stopped"
        )

    def _sync_media_time(self) -> None:
        """Commit remaining time from the renderer's current media position."""
        if self.timing.media_driven:
            self.timing.sync_media(*self.renderer.get_media_time())

    def _dispatch_stopped(self) -> None:
        self.logger.info(
            AdapterLogEvents.AD_STOPPED,
            events_dispatched=len(self.session.events),
        )
        self.bus.dispatch(AdEvent.STOPPED)

    @requires_state(AdState.LOADED, AdState.PLAYING, AdState.PAUSED)
    def resize_ad(self, width: int, height: int, view_mode: ViewMode | str) -> None:
        self.attributes.resize(width, height, view_mode, relayout=self._relayout)

    def _relayout(self, width: int, height: int, view_mode: ViewMode) -> None:
        self.renderer.resize(width, height, view_mode.value)

    def skip_ad(self) -> None:
        """Dispatch AdSkipped when the ad is skippable; otherwise do nothing."""
        if not self.attributes.skippable_state:
            self.logger.debug("Skip ignored", reason="not_skippable")
            return
        self.logger.info(AdapterLogEvents.AD_SKIPPED)
        self.bus.dispatch(AdEvent.SKIPPED)

    def expand_ad(self) -> None:
        if self.renderer is not None:
            self.renderer.request_fullscreen()
        self.attributes.set_expanded(True)

    def collapse_ad(self) -> None:
        self.attributes.set_expanded(False)

    def set_ad_volume(self, value: float) -> None:
        """Store the volume on the variant's scale and forward it normalised."""
        if self.renderer is not None:
            self.renderer.set_volume(self.config.volume_scale.normalize(value))
        self.attributes.set_volume(value)

    @requires_state(AdState.PLAYING, AdState.PAUSED)
    def click(self) -> None:
        """User click on the primary creative surface."""
        self.bus.dispatch(AdEvent.CLICK_THRU, "", "0", True)
        if self.state.terminal:
            return
        self._after_click_through()

    # ===== Host protocol: callbacks =====

    def subscribe(self, event: AdEvent | str, callback: EventCallback, context: Any = None) -> None:
        self.bus.subscribe(event, callback, context)

    def unsubscribe(self, event: AdEvent | str) -> None:
        self.bus.unsubscribe(event)

    # ===== Host protocol: getters =====

    def get_ad_width(self) -> int:
        return self.attributes.width

    def get_ad_height(self) -> int:
        return self.attributes.height

    def get_ad_view_mode(self) -> str:
        return self.attributes.view_mode.value

    def get_ad_desired_bitrate(self) -> int:
        return self.attributes.desired_bitrate

    def get_ad_duration(self) -> float | None:
        return self.attributes.duration

    def get_ad_remaining_time(self) -> float:
        return self.timing.remaining_time()

    def get_ad_volume(self) -> float:
        return self.attributes.volume

    def get_ad_linear(self) -> bool:
        return self.attributes.linear

    def get_ad_expanded(self) -> bool:
        return self.attributes.expanded

    def get_ad_skippable_state(self) -> bool:
        return self.attributes.skippable_state

    def get_ad_companions(self) -> str:
        return self.attributes.companions

    def get_ad_icons(self) -> str | bool:
        return self.attributes.icons

    def set_ad_skippable_state(self, value: bool) -> None:
        self.attributes.set_skippable_state(value)

    # ===== MediaListener =====

    def on_media_metadata(self, duration: float) -> None:
        if self.state.terminal:
            return
        self.timing.on_metadata(duration)

    def on_media_time_update(self, current_time: float, duration: float) -> None:
        if not self.state.started:
            return
        percent = self.timing.on_time_update(current_time, duration)
        if percent is not None:
            self.quartiles.on_progress(percent)

    def on_media_ended(self) -> None:
        if self.state.terminal:
            return
        self.logger.debug("Media ended")
        self.stop_ad()

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} session={self.session.session_id} "
            f"state={self.state.value}>"
        )


__all__ = ["BaseAdUnit", "requires_state", "NON_TERMINAL_STATES"]
