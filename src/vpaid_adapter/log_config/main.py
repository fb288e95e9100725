"""Logging configuration and utilities."""

import logging
import structlog
from typing import Any


_AD_CONTEXT_KEYS = ("ad_session_id", "ad_variant", "ad_state")


def get_context_logger(name: str) -> structlog.BoundLogger:
    """Get a context-aware logger.
    
    Args:
        name: Logger name
        
    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure the structlog processor chain.

    Args:
        level: Minimum log level name (e.g. "DEBUG", "INFO")
        json_output: Render JSON lines instead of console output
    """
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
    )


class AdUnitContext:
    """Context manager for ad unit logging context."""
    
    def __init__(self, **context: Any):
        """Initialize with context variables.
        
        Args:
            **context: Context key-value pairs
        """
        self.context = context
    
    def __enter__(self):
        """Enter context."""
        structlog.contextvars.bind_contextvars(**self.context)
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context."""
        structlog.contextvars.unbind_contextvars(*self.context.keys())


def set_ad_context(**kwargs: Any) -> None:
    """Set ad unit context in logging.
    
    Args:
        **kwargs: Context key-value pairs
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def update_ad_state(**kwargs: Any) -> None:
    """Update ad state fields in logging context.
    
    Args:
        **kwargs: State fields to update
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_ad_context() -> None:
    """Remove the ad unit keys from the logging context."""
    structlog.contextvars.unbind_contextvars(*_AD_CONTEXT_KEYS)


__all__ = [
    "get_context_logger",
    "configure_logging",
    "AdUnitContext",
    "set_ad_context",
    "update_ad_state",
    "clear_ad_context",
]
