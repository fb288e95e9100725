"""Creative parameter parsing.

The host hands the creative's AdParameters to init_ad as a JSON string. This
is the only place creative content enters the adapter.
"""

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .events import AdapterLogEvents
from .exceptions import CreativeParseError
from .log_config import get_context_logger


logger = get_context_logger("creative")


class AdCard(BaseModel):
    """Presentational data for one recommended item."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    thumbnail_url: str = Field(default="", alias="thumbnailUrl")
    title: str = ""
    source_name: str = Field(default="", alias="sourceName")


class MediaCandidate(BaseModel):
    """A video file the renderer may be able to play."""

    model_config = ConfigDict(extra="ignore")

    url: str
    mimetype: str


class CreativeParameters(BaseModel):
    """Parsed AdParameters payload.

    Example:
        >>> params = CreativeParameters.model_validate_json(
        ...     '{"videos": [{"url": "a.mp4", "mimetype": "video/mp4"}]}'
        ... )
        >>> params.videos[0].url
        'a.mp4'
    """

    model_config = ConfigDict(extra="ignore")

    ads: list[AdCard] = Field(default_factory=list)
    videos: list[MediaCandidate] = Field(default_factory=list)
    overlays: list[str] = Field(default_factory=list)

    @property
    def primary_ad(self) -> AdCard:
        """First ad card, or an empty card when the creative has none."""
        return self.ads[0] if self.ads else AdCard()


def parse_creative_data(creative_data: Mapping[str, Any] | None) -> CreativeParameters:
    """Parse the `AdParameters` entry of the host's creative data.

    Args:
        creative_data: Mapping passed to init_ad

    Returns:
        CreativeParameters

    Raises:
        CreativeParseError: When AdParameters is missing, is not valid JSON
            or does not match the schema
    """
    if not isinstance(creative_data, Mapping) or "AdParameters" not in creative_data:
        logger.error(AdapterLogEvents.CREATIVE_PARSE_FAILED, reason="missing_ad_parameters")
        raise CreativeParseError("Creative data has no AdParameters entry")

    raw = creative_data["AdParameters"]
    if not isinstance(raw, (str, bytes, bytearray)):
        logger.error(
            AdapterLogEvents.CREATIVE_PARSE_FAILED,
            reason="not_a_string",
            value_type=type(raw).__name__,
        )
        raise CreativeParseError(
            "AdParameters must be a JSON string",
            context={"value_type": type(raw).__name__},
        )

    try:
        params = CreativeParameters.model_validate_json(raw)
    except ValidationError as e:
        preview = raw if isinstance(raw, str) else raw.decode("utf-8", errors="replace")
        logger.error(
            AdapterLogEvents.CREATIVE_PARSE_FAILED,
            reason="invalid_payload",
            error_count=e.error_count(),
        )
        raise CreativeParseError(
            "Invalid AdParameters payload", raw_preview=preview, parser_error=e
        ) from e

    logger.debug(
        AdapterLogEvents.CREATIVE_PARSED,
        ads=len(params.ads),
        videos=len(params.videos),
        overlays=len(params.overlays),
    )
    return params


__all__ = ["AdCard", "MediaCandidate", "CreativeParameters", "parse_creative_data"]
