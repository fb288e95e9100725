"""Logging configuration package."""

from .main import (
    AdUnitContext,
    clear_ad_context,
    configure_logging,
    get_context_logger,
    set_ad_context,
    update_ad_state,
)


__all__ = [
    "get_context_logger",
    "configure_logging",
    "AdUnitContext",
    "set_ad_context",
    "update_ad_state",
    "clear_ad_context",
]
