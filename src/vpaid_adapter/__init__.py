"""
VPAID Adapter Package

A pluggable VPAID-style ad unit adapter: the lifecycle state machine and
event-dispatch protocol between a video player host and an ad creative.

This package provides:
- LinearAdUnit / NonLinearAdUnit: Host-facing ad units
- EventBus: Host callback registry
- AttributeStore, TimingEngine, QuartileReporter: Ad unit collaborators
- Renderer / HeadlessRenderer: Presentation collaborator interface
- Scheduler: Real (asyncio) and simulated clocks
- Settings: YAML + environment configuration

Usage:
    from vpaid_adapter import create_ad_unit, HeadlessRenderer, SimulatedScheduler

    scheduler = SimulatedScheduler()
    ad = create_ad_unit("linear", HeadlessRenderer(scheduler), scheduler=scheduler)
    ad.subscribe("AdLoaded", on_loaded)
    ad.init_ad(640, 480, "normal", 256, {"AdParameters": creative_json})
    ad.start_ad()
    scheduler.advance(30.0)
"""

from .ad_unit_factory import AdUnitFactory, create_ad_unit
from .attributes import AdAttributes, AttributeStore, ViewMode
from .base_ad_unit import BaseAdUnit
from .config import (
    PERCENT_VOLUME_SCALE,
    UNIT_VOLUME_SCALE,
    AdUnitConfig,
    AdVariant,
    AttributeDefaults,
    VolumeScale,
)
from .creative import AdCard, CreativeParameters, MediaCandidate, parse_creative_data
from .event_bus import EventBus
from .events import AdapterLogEvents, AdEvent
from .exceptions import (
    CreativeParseError,
    MediaSourceUnavailable,
    ProtocolMisuseError,
    VpaidConfigError,
    VpaidConfigValidationError,
    VpaidException,
)
from .linear_ad_unit import LinearAdUnit
from .log_config import configure_logging, get_context_logger
from .non_linear_ad_unit import NonLinearAdUnit
from .quartiles import QuartileMark, QuartileReporter, QuartileSchedule
from .renderer import AdContent, HeadlessRenderer, MediaListener, Renderer
from .scheduler import (
    AsyncioScheduler,
    ScheduledTask,
    Scheduler,
    SimulatedScheduler,
    create_scheduler,
)
from .session import AdSession, AdState
from .settings import Settings, get_settings, reload_settings
from .timing import MediaTiming, TimingEngine, WallClockTiming

__version__ = "1.0.0"
__author__ = "CTV Middleware Team"
__email__ = "dev@ctv-middleware.com"

__all__ = [
    # Ad units
    "BaseAdUnit",
    "LinearAdUnit",
    "NonLinearAdUnit",
    "AdUnitFactory",
    "create_ad_unit",
    # Events
    "AdEvent",
    "AdapterLogEvents",
    "EventBus",
    # Attributes and progress
    "AdAttributes",
    "AttributeStore",
    "ViewMode",
    "TimingEngine",
    "WallClockTiming",
    "MediaTiming",
    "QuartileMark",
    "QuartileSchedule",
    "QuartileReporter",
    # Session
    "AdSession",
    "AdState",
    # Creative
    "AdCard",
    "MediaCandidate",
    "CreativeParameters",
    "parse_creative_data",
    # Renderer
    "Renderer",
    "HeadlessRenderer",
    "MediaListener",
    "AdContent",
    # Schedulers
    "Scheduler",
    "ScheduledTask",
    "AsyncioScheduler",
    "SimulatedScheduler",
    "create_scheduler",
    # Configuration
    "AdVariant",
    "AdUnitConfig",
    "AttributeDefaults",
    "VolumeScale",
    "UNIT_VOLUME_SCALE",
    "PERCENT_VOLUME_SCALE",
    "Settings",
    "get_settings",
    "reload_settings",
    # Logging
    "configure_logging",
    "get_context_logger",
    # Exceptions
    "VpaidException",
    "CreativeParseError",
    "ProtocolMisuseError",
    "MediaSourceUnavailable",
    "VpaidConfigError",
    "VpaidConfigValidationError",
]
