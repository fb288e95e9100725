"""VPAID adapter custom exception hierarchy.

Provides specific exception types for the failure modes of an ad unit:
creative ingestion, protocol misuse by the host, missing media sources and
configuration problems. Only CreativeParseError ever crosses the host
boundary; the others are recovered inside the ad unit.

Exception Hierarchy:
    VpaidException (base)
    ├── CreativeParseError
    ├── ProtocolMisuseError
    ├── MediaSourceUnavailable
    └── VpaidConfigError
        └── VpaidConfigValidationError
"""

from typing import Optional


class VpaidException(Exception):
    """Base exception for all VPAID adapter errors.

    All adapter-specific exceptions inherit from this class to allow
    catching all adapter errors with a single except clause.
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        """Initialize VPAID exception.

        Args:
            message: Error message
            context: Optional context dictionary for debugging
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation with context."""
        if self.context:
            context_str = "; ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class CreativeParseError(VpaidException):
    """Raised when creative parameters cannot be ingested at init.

    This covers a missing AdParameters entry, malformed JSON and JSON that
    does not match the creative parameter schema. Fatal for init_ad.

    Attributes:
        raw_preview: First 200 characters of the offending payload
        parser_error: The underlying parser/validation error
    """

    def __init__(
        self,
        message: str,
        raw_preview: Optional[str] = None,
        parser_error: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if raw_preview:
            context["raw_preview"] = raw_preview[:200]
        if parser_error is not None:
            context["parser_error"] = type(parser_error).__name__
        super().__init__(message, context)
        self.raw_preview = raw_preview
        self.parser_error = parser_error


class ProtocolMisuseError(VpaidException):
    """Operation invoked in a state where it is not valid.

    Never raised to the host: the ad unit builds one, logs it and treats
    the call as a no-op.

    Attributes:
        operation: Name of the host operation
        state: Ad state at the time of the call
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        state: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        if operation:
            context["operation"] = operation
        if state:
            context["state"] = state
        super().__init__(message, context)
        self.operation = operation
        self.state = state


class MediaSourceUnavailable(VpaidException):
    """No playable media source among the creative's video candidates.

    Recovered by dispatching AdError and continuing without playback.

    Attributes:
        mimetypes: Mimetypes that were offered to the renderer
    """

    def __init__(
        self,
        message: str,
        mimetypes: Optional[list[str]] = None,
        context: Optional[dict] = None,
    ):
        if context is None:
            context = {}
        context["mimetypes"] = ",".join(mimetypes or []) or "none"
        super().__init__(message, context)
        self.mimetypes = mimetypes or []


# Configuration Errors

class VpaidConfigError(VpaidException):
    """Base exception for adapter configuration errors."""

    pass


class VpaidConfigValidationError(VpaidConfigError):
    """Raised when configuration validation fails.

    Attributes:
        config_key: Configuration key that failed validation
        config_value: The invalid configuration value
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        """Initialize config validation error.

        Args:
            message: Error message
            config_key: The config key
            config_value: The config value (may be redacted)
            context: Additional context
        """
        if context is None:
            context = {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = str(config_value)[:100]
        super().__init__(message, context)
        self.config_key = config_key
        self.config_value = config_value


__all__ = [
    "VpaidException",
    "CreativeParseError",
    "ProtocolMisuseError",
    "MediaSourceUnavailable",
    "VpaidConfigError",
    "VpaidConfigValidationError",
]
