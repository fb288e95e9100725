"""
VPAID Adapter Configuration Module

Provides configuration classes for ad units. The linear and non-linear
variants differ in their default attributes and in the volume scale they
expose to the host, so each variant gets its own preset.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any

from .exceptions import VpaidConfigValidationError
from .quartiles import QuartileSchedule


class AdVariant(str, Enum):
    """Ad unit variant enumeration."""

    LINEAR = "linear"  # Plays video in the main player slot
    NON_LINEAR = "non_linear"  # Overlay, optionally converted to linear


@dataclass(frozen=True)
class VolumeScale:
    """Range of the volume attribute as seen by the host.

    Renderers always receive a normalised 0..1 volume; only the host-facing
    attribute uses this scale.
    """

    minimum: float = 0.0
    maximum: float = 1.0

    def clamp(self, value: float) -> float:
        return min(max(float(value), self.minimum), self.maximum)

    def normalize(self, value: float) -> float:
        """Map a value on this scale to 0..1."""
        span = self.maximum - self.minimum
        if span <= 0:
            return 0.0
        return (self.clamp(value) - self.minimum) / span


UNIT_VOLUME_SCALE = VolumeScale(0.0, 1.0)
PERCENT_VOLUME_SCALE = VolumeScale(0.0, 100.0)


@dataclass
class AttributeDefaults:
    """Initial attribute values of a freshly constructed ad unit."""

    duration: float | None = 6.0
    remaining_time: float = 13.0
    volume: float = 1.0
    linear: bool = True
    icons: str | bool = False
    companions: str = ""
    desired_bitrate: int = 256
    view_mode: str = "normal"
    skippable_state: bool = False


@dataclass
class AdUnitConfig:
    """
    Configuration for a VPAID ad unit.

    Attributes:
        variant: Linear or non-linear ad unit
        handshake_version: Protocol version returned by handshake_version()
        stop_delay_sec: Delay before AdStopped is dispatched after stop_ad()
        remaining_time_interval_sec: Period of the AdRemainingTimeChange ticker
        click_duration_extension_sec: Seconds added to the duration per click
            on a non-linear ad
        volume_scale: Host-facing volume range
        defaults: Initial attribute values
        quartile_schedule: Progress thresholds and their events

    Examples:
        >>> config = AdUnitConfig.linear()
        >>> config.volume_scale.maximum
        1.0

        >>> config = AdUnitConfig.non_linear(stop_delay_sec=0.1)
        >>> config.defaults.volume
        50.0
    """

    variant: AdVariant = AdVariant.LINEAR
    handshake_version: str = "2.0"
    stop_delay_sec: float = 0.075
    remaining_time_interval_sec: float = 0.25
    click_duration_extension_sec: float = 10.0
    volume_scale: VolumeScale = UNIT_VOLUME_SCALE
    defaults: AttributeDefaults = field(default_factory=AttributeDefaults)
    quartile_schedule: QuartileSchedule = field(default_factory=QuartileSchedule.default)

    def __post_init__(self) -> None:
        self.variant = AdVariant(self.variant)
        if self.stop_delay_sec < 0:
            raise VpaidConfigValidationError(
                "stop_delay_sec must not be negative",
                config_key="stop_delay_sec",
                config_value=str(self.stop_delay_sec),
            )
        if self.remaining_time_interval_sec <= 0:
            raise VpaidConfigValidationError(
                "remaining_time_interval_sec must be positive",
                config_key="remaining_time_interval_sec",
                config_value=str(self.remaining_time_interval_sec),
            )

    @classmethod
    def linear(cls, **overrides: Any) -> "AdUnitConfig":
        """Preset for linear video ads (volume on a 0..1 scale)."""
        base = cls(
            variant=AdVariant.LINEAR,
            volume_scale=UNIT_VOLUME_SCALE,
            defaults=AttributeDefaults(),
        )
        return base.with_overrides(overrides)

    @classmethod
    def non_linear(cls, **overrides: Any) -> "AdUnitConfig":
        """Preset for non-linear overlay ads (volume on a 0..100 scale)."""
        base = cls(
            variant=AdVariant.NON_LINEAR,
            volume_scale=PERCENT_VOLUME_SCALE,
            defaults=AttributeDefaults(
                duration=10.0,
                remaining_time=10.0,
                volume=50.0,
                linear=False,
                icons="",
            ),
        )
        return base.with_overrides(overrides)

    @classmethod
    def for_variant(cls, variant: AdVariant | str, **overrides: Any) -> "AdUnitConfig":
        if AdVariant(variant) == AdVariant.NON_LINEAR:
            return cls.non_linear(**overrides)
        return cls.linear(**overrides)

    def with_overrides(self, overrides: dict[str, Any]) -> "AdUnitConfig":
        """Return a copy with top-level fields and nested `defaults` replaced.

        Raises:
            VpaidConfigValidationError: For unknown keys
        """
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        default_keys = {f.name for f in fields(AttributeDefaults)}
        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in known:
                raise VpaidConfigValidationError(
                    "Unknown ad unit setting", config_key=key, config_value=str(value)
                )
            if key == "defaults" and isinstance(value, dict):
                unknown = set(value) - default_keys
                if unknown:
                    raise VpaidConfigValidationError(
                        "Unknown attribute default",
                        config_key=f"defaults.{sorted(unknown)[0]}",
                    )
                value = replace(self.defaults, **value)
            elif key == "volume_scale" and isinstance(value, (list, tuple)):
                value = VolumeScale(*value)
            elif key == "quartile_schedule" and not isinstance(value, QuartileSchedule):
                value = QuartileSchedule(value)
            changes[key] = value
        return replace(self, **changes)


__all__ = [
    "AdVariant",
    "VolumeScale",
    "UNIT_VOLUME_SCALE",
    "PERCENT_VOLUME_SCALE",
    "AttributeDefaults",
    "AdUnitConfig",
]
