"""
Ad Attribute Store

Holds the mutable property bag of an ad unit and emits the matching change
event through the EventBus every time a host-visible attribute is committed.
"""

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable

from .config import AttributeDefaults, VolumeScale
from .event_bus import EventBus
from .events import AdEvent
from .log_config import get_context_logger


class ViewMode(str, Enum):
    """Presentation mode requested by the host."""

    NORMAL = "normal"
    FULLSCREEN = "fullscreen"
    THUMBNAIL = "thumbnail"


@dataclass
class AdAttributes:
    """Attribute values of one ad unit.

    Attributes:
        width: Ad width in pixels
        height: Ad height in pixels
        view_mode: Host presentation mode
        desired_bitrate: Bitrate hint in kbps
        duration: Total duration in seconds, None when unknown
        remaining_time: Last computed remaining time in seconds (may be negative)
        volume: Volume on the variant's scale
        linear: Whether the ad occupies the main player
        expanded: Whether the ad is expanded
        skippable_state: Whether skip_ad() is honoured
        companions: Opaque companion data
        icons: Opaque icon data
    """

    width: int = 0
    height: int = 0
    view_mode: ViewMode = ViewMode.NORMAL
    desired_bitrate: int = 256
    duration: float | None = None
    remaining_time: float = 0.0
    volume: float = 0.0
    linear: bool = False
    expanded: bool = False
    skippable_state: bool = False
    companions: str = ""
    icons: str | bool = ""

    @classmethod
    def from_defaults(cls, defaults: AttributeDefaults) -> "AdAttributes":
        return cls(
            view_mode=ViewMode(defaults.view_mode),
            desired_bitrate=defaults.desired_bitrate,
            duration=defaults.duration,
            remaining_time=defaults.remaining_time,
            volume=defaults.volume,
            linear=defaults.linear,
            skippable_state=defaults.skippable_state,
            companions=defaults.companions,
            icons=defaults.icons,
        )


class AttributeStore:
    """Typed access to AdAttributes with change notification.

    Values are committed before the corresponding event is dispatched, so a
    host callback reading a getter always observes the new value.
    """

    def __init__(
        self,
        bus: EventBus,
        volume_scale: VolumeScale,
        defaults: AttributeDefaults | None = None,
    ):
        self.bus = bus
        self.volume_scale = volume_scale
        self._attrs = AdAttributes.from_defaults(defaults or AttributeDefaults())
        self.logger = get_context_logger("attribute_store")

    # ===== Read accessors =====

    @property
    def width(self) -> int:
        return self._attrs.width

    @property
    def height(self) -> int:
        return self._attrs.height

    @property
    def view_mode(self) -> ViewMode:
        return self._attrs.view_mode

    @property
    def desired_bitrate(self) -> int:
        return self._attrs.desired_bitrate

    @property
    def duration(self) -> float | None:
        return self._attrs.duration

    @property
    def remaining_time(self) -> float:
        """Remaining time clamped for reporting."""
        return max(self._attrs.remaining_time, 0.0)

    @property
    def raw_remaining_time(self) -> float:
        return self._attrs.remaining_time

    @property
    def volume(self) -> float:
        return self._attrs.volume

    @property
    def linear(self) -> bool:
        return self._attrs.linear

    @property
    def expanded(self) -> bool:
        return self._attrs.expanded

    @property
    def skippable_state(self) -> bool:
        return self._attrs.skippable_state

    @property
    def companions(self) -> str:
        return self._attrs.companions

    @property
    def icons(self) -> str | bool:
        return self._attrs.icons

    # ===== Setters =====

    def coerce_view_mode(self, view_mode: ViewMode | str) -> ViewMode:
        try:
            return ViewMode(view_mode)
        except ValueError:
            self.logger.warning("Unknown view mode, using normal", view_mode=view_mode)
            return ViewMode.NORMAL

    def initialize(
        self, width: int, height: int, view_mode: ViewMode | str, desired_bitrate: int
    ) -> None:
        """Populate host-supplied attributes at init (no change events)."""
        self._attrs.width = max(int(width), 0)
        self._attrs.height = max(int(height), 0)
        self._attrs.view_mode = self.coerce_view_mode(view_mode)
        if desired_bitrate and int(desired_bitrate) > 0:
            self._attrs.desired_bitrate = int(desired_bitrate)
        else:
            self.logger.warning(
                "Ignoring non-positive desired bitrate",
                desired_bitrate=desired_bitrate,
                kept=self._attrs.desired_bitrate,
            )

    def resize(
        self,
        width: int,
        height: int,
        view_mode: ViewMode | str,
        relayout: Callable[[int, int, ViewMode], Any] | None = None,
    ) -> None:
        """Commit new dimensions, re-layout, then dispatch AdSizeChange.

        Args:
            width: New width
            height: New height
            view_mode: New view mode
            relayout: Optional hook run between commit and dispatch
        """
        self._attrs.width = max(int(width), 0)
        self._attrs.height = max(int(height), 0)
        self._attrs.view_mode = self.coerce_view_mode(view_mode)
        if relayout is not None:
            relayout(self._attrs.width, self._attrs.height, self._attrs.view_mode)
        self.bus.dispatch(AdEvent.SIZE_CHANGE)

    def set_volume(self, value: float) -> float:
        """Commit a volume on the variant's scale and dispatch AdVolumeChange.

        Returns:
            The stored (clamped) value
        """
        clamped = self.volume_scale.clamp(value)
        if clamped != value:
            self.logger.warning(
                "Volume outside scale, clamping",
                requested=value,
                stored=clamped,
                scale_max=self.volume_scale.maximum,
            )
        self._attrs.volume = clamped
        self.bus.dispatch(AdEvent.VOLUME_CHANGE)
        return clamped

    def set_expanded(self, value: bool) -> None:
        self._attrs.expanded = bool(value)
        # Collapsing is not announced to the host
        if value:
            self.bus.dispatch(AdEvent.EXPANDED)

    def set_duration(self, value: float | None) -> bool:
        """Commit a new duration, dispatching AdDurationChange on change only.

        Returns:
            True if the stored duration changed
        """
        if value is not None:
            value = float(value)
            if not math.isfinite(value) or value < 0:
                self.logger.warning("Ignoring invalid duration", duration=value)
                return False
        if value == self._attrs.duration:
            return False
        previous = self._attrs.duration
        self._attrs.duration = value
        self.logger.debug("Duration changed", previous=previous, duration=value)
        self.bus.dispatch(AdEvent.DURATION_CHANGE)
        return True

    def set_linear(self, value: bool) -> bool:
        """Commit the linear flag, dispatching AdLinearChange on change only."""
        value = bool(value)
        if value == self._attrs.linear:
            return False
        self._attrs.linear = value
        self.bus.dispatch(AdEvent.LINEAR_CHANGE)
        return True

    def set_remaining_time(self, value: float, notify: bool = False) -> None:
        self._attrs.remaining_time = float(value)
        if notify:
            self.bus.dispatch(AdEvent.REMAINING_TIME_CHANGE)

    def set_skippable_state(self, value: bool) -> None:
        self._attrs.skippable_state = bool(value)

    def snapshot(self) -> dict[str, Any]:
        """Attribute values as a plain dictionary."""
        data = asdict(self._attrs)
        data["view_mode"] = self._attrs.view_mode.value
        return data


__all__ = ["ViewMode", "AdAttributes", "AttributeStore"]
