"""VPAID event name constants."""

from enum import Enum


class AdEvent(str, Enum):
    """Events dispatched to the host through the EventBus."""

    # Lifecycle
    LOADED = "AdLoaded"
    STARTED = "AdStarted"
    IMPRESSION = "AdImpression"
    PAUSED = "AdPaused"
    PLAYING = "AdPlaying"
    STOPPED = "AdStopped"
    SKIPPED = "AdSkipped"

    # Progress
    VIDEO_START = "AdVideoStart"
    VIDEO_FIRST_QUARTILE = "AdVideoFirstQuartile"
    VIDEO_MIDPOINT = "AdVideoMidpoint"
    VIDEO_THIRD_QUARTILE = "AdVideoThirdQuartile"
    VIDEO_COMPLETE = "AdVideoComplete"

    # Attribute changes
    SIZE_CHANGE = "AdSizeChange"
    EXPANDED = "AdExpanded"
    VOLUME_CHANGE = "AdVolumeChange"
    DURATION_CHANGE = "AdDurationChange"
    REMAINING_TIME_CHANGE = "AdRemainingTimeChange"
    LINEAR_CHANGE = "AdLinearChange"

    # User interaction / failures
    CLICK_THRU = "AdClickThru"
    ERROR = "AdError"


class AdapterLogEvents(str, Enum):
    """Event type constants for structured logging."""

    # Lifecycle events
    AD_CREATED = "vpaid.ad.created"
    AD_LOADED = "vpaid.ad.loaded"
    AD_STARTED = "vpaid.ad.started"
    AD_PAUSED = "vpaid.ad.paused"
    AD_RESUMED = "vpaid.ad.resumed"
    AD_STOPPED = "vpaid.ad.stopped"
    AD_SKIPPED = "vpaid.ad.skipped"

    # Creative events
    CREATIVE_PARSED = "vpaid.creative.parsed"
    CREATIVE_PARSE_FAILED = "vpaid.creative.parse_failed"
    MEDIA_SOURCE_SELECTED = "vpaid.media.source_selected"
    MEDIA_SOURCE_UNAVAILABLE = "vpaid.media.source_unavailable"

    # Protocol events
    PROTOCOL_MISUSE = "vpaid.protocol.misuse"
    DISPATCH_MISS = "vpaid.dispatch.miss"
    LINEAR_SWITCH = "vpaid.ad.linear_switch"

    # Quartile events
    QUARTILE_REACHED = "vpaid.quartile.reached"


def event_name(event: "AdEvent | str") -> str:
    """Return the wire name of an event given as enum member or string."""
    if isinstance(event, AdEvent):
        return event.value
    return str(event)


__all__ = ["AdEvent", "AdapterLogEvents", "event_name"]
