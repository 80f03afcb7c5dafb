"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from datetime import timedelta, timezone, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from .errors import ConfigError
from .models import UserSettings


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class AnalyticsConfig(BaseModel):
    commission_per_unit: float = Field(default=0.0, ge=0.0)
    max_drawdown_goal: float = Field(default=0.0, ge=0.0)  # 0 = no goal set
    # Exact (upper-cased) symbol -> contract multiplier, e.g. {"ES": 50}
    instrument_multipliers: dict[str, float] = Field(default_factory=dict)

    @field_validator("instrument_multipliers")
    @classmethod
    def _upper_symbols(cls, value: dict[str, float]) -> dict[str, float]:
        return {symbol.upper(): mult for symbol, mult in value.items()}


class TimeConfig(BaseModel):
    # Calendar-day grouping and the date range gate
    reference_timezone: str = "America/New_York"
    # Journal wall clock for time-of-day filters
    display_utc_offset_hours: float = Field(default=8.0, ge=-14.0, le=14.0)

    @field_validator("reference_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value!r}") from exc
        return value

    @property
    def reference_tz(self) -> tzinfo:
        return ZoneInfo(self.reference_timezone)

    @property
    def display_tz(self) -> tzinfo:
        return timezone(timedelta(hours=self.display_utc_offset_hours))


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level library settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    time: TimeConfig = Field(default_factory=TimeConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "TRADE_ANALYTICS_", "env_nested_delimiter": "__"}

    def user_settings(self) -> UserSettings:
        """Per-user pricing parameters derived from config."""
        return UserSettings(commission_per_unit=self.analytics.commission_per_unit)


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: The file is not valid TOML or a value fails validation.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                try:
                    data = tomli.load(f)
                except tomli.TOMLDecodeError as exc:
                    raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    if overrides:
        data.update(overrides)

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc
