"""
Linear VPAID Ad Unit

Video ad occupying the main player. Timing and quartile progress are driven
by the media element's time updates; the volume attribute uses a 0..1 scale.
"""

from .base_ad_unit import BaseAdUnit
from .config import AdVariant


class LinearAdUnit(BaseAdUnit):
    """
    Linear ad unit playing the first playable video of the creative.

    If no video is playable, init_ad dispatches AdError before AdLoaded and
    the ad continues without media: start_ad still reports AdStarted and
    AdImpression, but no progress events follow.

    Examples:
        >>> scheduler = SimulatedScheduler()
        >>> renderer = HeadlessRenderer(scheduler, media_duration=20.0)
        >>> ad = LinearAdUnit(renderer, scheduler=scheduler)
        >>> ad.init_ad(640, 480, "normal", 256, creative_data)
        >>> ad.start_ad()
        >>> scheduler.advance(20.0)  # quartiles fire, media ends, ad stops
    """

    variant = AdVariant.LINEAR

    def _prepare_media(self) -> None:
        self._load_media_source()

    def _begin_playback(self) -> None:
        self.timing.start()
        if self.media_available:
            self.renderer.play()

    def toggle_mute(self) -> None:
        """Flip the volume between silent and full, dispatching AdVolumeChange."""
        scale = self.config.volume_scale
        target = scale.maximum if self.attributes.volume == scale.minimum else scale.minimum
        if self.renderer is not None:
            self.renderer.set_volume(scale.normalize(target))
        self.attributes.set_volume(target)
        self.logger.debug("Mute toggled", muted=target == scale.minimum)


__all__ = ["LinearAdUnit"]
