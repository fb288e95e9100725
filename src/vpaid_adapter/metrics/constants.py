"""
Metric name constants for VPAID ad units.

Keeps metric names consistent between ad units and dashboards.
"""


class AdapterMetrics:
    """Metric name constants for ad unit operations."""

    # Event bus
    EVENTS_DISPATCHED = "vpaid.events.dispatched"

    # Lifecycle
    STATE_TRANSITIONS = "vpaid.ad.state.transitions"
    PROTOCOL_MISUSE = "vpaid.protocol.misuse"
    SESSION_DURATION = "vpaid.ad.session.seconds"

    # Creative / media
    CREATIVE_PARSE_FAILED = "vpaid.creative.parse.failed"
    MEDIA_SOURCE_UNAVAILABLE = "vpaid.media.source.unavailable"

    # Progress
    QUARTILES_REPORTED = "vpaid.quartiles.reported"
    REMAINING_TIME = "vpaid.ad.remaining_time.seconds"


class MetricLabels:
    """Standard label names for metrics."""

    EVENT = "event"  # AdLoaded, AdStarted, ...
    DELIVERED = "delivered"  # "true" when a subscriber received the event
    OPERATION = "operation"  # init_ad, start_ad, ...
    STATE = "state"  # unstarted, loaded, playing, ...
    TO_STATE = "to_state"
    VARIANT = "variant"  # linear, non_linear


__all__ = ["AdapterMetrics", "MetricLabels"]
