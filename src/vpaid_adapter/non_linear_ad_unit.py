"""
Non-Linear VPAID Ad Unit

Overlay ad shown beside or over the host content. Remaining time runs on the
wall clock with a periodic AdRemainingTimeChange ticker until the user
converts the ad to linear playback, after which the media element owns the
clock. The volume attribute uses a 0..100 scale.
"""

from .base_ad_unit import BaseAdUnit, requires_state
from .config import AdVariant
from .events import AdapterLogEvents, AdEvent
from .session import AdState


class NonLinearAdUnit(BaseAdUnit):
    """
    Non-linear ad unit with optional one-way conversion to linear video.

    While non-linear:
        - pause_ad() is a no-op (the overlay cannot be paused)
        - click() extends the duration by click_duration_extension_sec
        - the media surface stays hidden

    After switch_to_linear():
        - AdLinearChange is dispatched once
        - the overlay is unmounted and the first playable video starts
        - AdDurationChange fires once the media duration is known and differs
        - quartile events follow the media's progress
    """

    variant = AdVariant.NON_LINEAR

    def _prepare_media(self) -> None:
        self.renderer.show_media(False)

    def _begin_playback(self) -> None:
        self.timing.start()

    def _can_pause(self) -> bool:
        return self.attributes.linear

    def _after_click_through(self) -> None:
        if self.attributes.linear:
            return
        extension = self.config.click_duration_extension_sec
        self.attributes.set_duration((self.attributes.duration or 0.0) + extension)
        if self.state.terminal:
            return
        self.timing.remaining_time()
        self.bus.dispatch(AdEvent.REMAINING_TIME_CHANGE)

    @requires_state(AdState.PLAYING)
    def switch_to_linear(self) -> None:
        """Convert the overlay into linear video playback (one-way)."""
        if self.attributes.linear:
            self.logger.debug("Linear switch ignored", reason="already_linear")
            return
        self.attributes.set_linear(True)
        if self.state.terminal:
            # Stopped by an AdLinearChange subscriber
            return
        self.renderer.unmount()
        self.timing.switch_to_media()
        if self._load_media_source():
            self.renderer.show_media(True)
            self.renderer.play()
        self.logger.info(
            AdapterLogEvents.LINEAR_SWITCH,
            media_available=self.media_available,
            duration=self.attributes.duration,
        )


__all__ = ["NonLinearAdUnit"]
