"""
Settings Management Module

Provides pydantic-based configuration management with:
- YAML configuration file loading
- Environment-specific overrides (config.{environment}.yaml)
- Environment variable overrides (VPAID_*, nested with "__")
- Resolution of per-variant AdUnitConfig objects
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import AdUnitConfig, AdVariant
from .exceptions import VpaidConfigValidationError


class AttributeDefaultsOverrides(BaseModel):
    """Optional overrides for initial attribute values."""

    model_config = ConfigDict(extra="forbid")

    duration: float | None = None
    remaining_time: float | None = None
    volume: float | None = None
    linear: bool | None = None
    icons: str | bool | None = None
    companions: str | None = None
    desired_bitrate: int | None = None
    view_mode: str | None = None
    skippable_state: bool | None = None


class AdUnitOverrides(BaseModel):
    """Optional overrides for AdUnitConfig fields."""

    model_config = ConfigDict(extra="forbid")

    handshake_version: str | None = None
    stop_delay_sec: float | None = None
    remaining_time_interval_sec: float | None = None
    click_duration_extension_sec: float | None = None
    volume_scale: tuple[float, float] | None = None
    defaults: AttributeDefaultsOverrides | None = None
    quartile_schedule: list[tuple[float, str]] | None = None


class Settings(BaseSettings):
    """
    Main adapter settings with multi-environment support.

    Configuration hierarchy (lowest to highest precedence):
    1. settings/config.yaml (base)
    2. settings/config.{environment}.yaml (environment-specific)
    3. Environment variables (VPAID_*)

    Examples:
        Load settings:
        >>> settings = get_settings()
        >>> settings.scheduler_mode
        'real'

        Resolve the configuration of a non-linear ad unit:
        >>> config = settings.ad_unit_config("non_linear")
        >>> config.stop_delay_sec
        0.075
    """

    model_config = SettingsConfigDict(
        env_prefix="VPAID_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False
    scheduler_mode: str = "real"

    ad_unit: AdUnitOverrides = Field(default_factory=AdUnitOverrides)
    variants: dict[AdVariant, AdUnitOverrides] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # YAML values arrive as init kwargs; environment variables win over them
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def load_from_yaml(cls, config_path: Path | None = None) -> "Settings":
        """
        Load settings from YAML configuration file.

        Args:
            config_path: Path to config file (default: $VPAID_CONFIG_PATH or
                settings/config.yaml in the project root)

        Returns:
            Settings instance

        Raises:
            VpaidConfigValidationError: If the merged configuration is invalid
        """
        if config_path is None:
            env_path = os.getenv("VPAID_CONFIG_PATH")
            if env_path:
                config_path = Path(env_path)
            else:
                project_root = Path(__file__).resolve().parents[2]
                config_path = project_root / "settings" / "config.yaml"

        config_data: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}

            env = os.getenv("VPAID_ENVIRONMENT", config_data.get("environment", "development"))
            env_config_path = config_path.parent / f"config.{env}.yaml"
            if env_config_path.exists():
                with open(env_config_path) as f:
                    env_config = yaml.safe_load(f) or {}
                config_data = cls._deep_merge(config_data, env_config)

        try:
            return cls(**config_data)
        except ValidationError as e:
            first = e.errors()[0]
            raise VpaidConfigValidationError(
                "Invalid adapter settings",
                config_key=".".join(str(part) for part in first.get("loc", ())),
                context={"source": str(config_path), "errors": e.error_count()},
            ) from e

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = Settings._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def ad_unit_config(self, variant: AdVariant | str) -> AdUnitConfig:
        """Resolve the AdUnitConfig for a variant.

        Variant-specific overrides win over the shared `ad_unit` section.
        """
        variant = AdVariant(variant)
        merged = self.ad_unit.model_dump(exclude_none=True)
        variant_overrides = self.variants.get(variant)
        if variant_overrides is not None:
            merged = self._deep_merge(merged, variant_overrides.model_dump(exclude_none=True))
        return AdUnitConfig.for_variant(variant, **merged)


@lru_cache
def get_settings(config_path: Path | None = None) -> Settings:
    """
    Get cached settings instance.

    Args:
        config_path: Optional path to config file

    Returns:
        Settings instance
    """
    return Settings.load_from_yaml(config_path)


def reload_settings() -> Settings:
    """Reload settings by clearing cache."""
    get_settings.cache_clear()
    return get_settings()


__all__ = [
    "Settings",
    "AdUnitOverrides",
    "AttributeDefaultsOverrides",
    "get_settings",
    "reload_settings",
]
