"""
Scheduling and analytics tunables.

Loads configuration from config/routine_anchor.yaml (or the path in
ROUTINE_ANCHOR_CONFIG). Falls back to built-in defaults if the file is
missing; a file that exists but does not validate raises SettingsError.

Example file:

    segments:
      - {label: Morning, start_hour: 6, end_hour: 9, peak_start_hour: 7, peak_end_hour: 8}
      - {label: Afternoon, start_hour: 14, end_hour: 17}
    suggestions:
      advance_minutes: 60
    reports:
      weekly_window_days: 7
      first_weekday: 0
    insights:
      max_blocks_per_day: 10
"""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from routine_anchor import paths

logger = logging.getLogger(__name__)


class SettingsError(Exception):
    """Raised when a settings file exists but cannot be used."""


class SegmentSettings(BaseModel):
    """A named part of the day used for slot suggestions."""

    label: str = Field(min_length=1)
    start_hour: int = Field(ge=0, le=23)
    end_hour: int = Field(ge=1, le=24)
    peak_start_hour: int | None = Field(default=None, ge=0, le=23)
    peak_end_hour: int | None = Field(default=None, ge=0, le=23)

    @model_validator(mode="after")
    def _check_ranges(self) -> "SegmentSettings":
        if self.end_hour <= self.start_hour:
            raise ValueError(f"segment {self.label!r}: end_hour must be after start_hour")
        if (self.peak_start_hour is None) != (self.peak_end_hour is None):
            raise ValueError(f"segment {self.label!r}: peak range needs both ends")
        if self.peak_start_hour is not None and self.peak_end_hour < self.peak_start_hour:
            raise ValueError(f"segment {self.label!r}: peak_end_hour before peak_start_hour")
        return self


def _default_segments() -> list[SegmentSettings]:
    return [
        SegmentSettings(label="Morning", start_hour=6, end_hour=9, peak_start_hour=7, peak_end_hour=8),
        SegmentSettings(label="Late Morning", start_hour=9, end_hour=12, peak_start_hour=9, peak_end_hour=11),
        SegmentSettings(label="Lunch", start_hour=12, end_hour=14),
        SegmentSettings(label="Afternoon", start_hour=14, end_hour=17, peak_start_hour=14, peak_end_hour=16),
        SegmentSettings(label="Evening", start_hour=17, end_hour=20, peak_start_hour=18, peak_end_hour=19),
        SegmentSettings(label="Night", start_hour=20, end_hour=22),
    ]


class SuggestionSettings(BaseModel):
    advance_minutes: int = Field(default=60, ge=1)
    """How far the scan cursor moves after emitting a suggestion."""
    default_duration_minutes: int = Field(default=60, ge=1, le=24 * 60)


class ReportSettings(BaseModel):
    weekly_window_days: int = Field(default=7, ge=1)
    monthly_window_days: int = Field(default=30, ge=1)
    first_weekday: int = Field(default=0, ge=0, le=6)
    """Weekday the trend's "this week" starts on (0 = Monday, 6 = Sunday)."""
    trend_threshold: float = Field(default=0.05, ge=0.0, le=1.0)
    min_blocks_per_hour: int = Field(default=3, ge=1)
    top_hours: int = Field(default=3, ge=1)
    productive_day_min_blocks: int = Field(default=3, ge=1)
    productive_day_min_rate: float = Field(default=0.8, ge=0.0, le=1.0)
    top_productive_days: int = Field(default=5, ge=1)


class InsightSettings(BaseModel):
    max_blocks_per_day: float = Field(default=10, gt=0)
    long_block_minutes: int = Field(default=120, ge=1)
    weak_category_rate: float = Field(default=0.5, ge=0.0, le=1.0)
    strong_completion_rate: float = Field(default=0.8, ge=0.0, le=1.0)


class Settings(BaseModel):
    segments: list[SegmentSettings] = Field(default_factory=_default_segments)
    suggestions: SuggestionSettings = Field(default_factory=SuggestionSettings)
    reports: ReportSettings = Field(default_factory=ReportSettings)
    insights: InsightSettings = Field(default_factory=InsightSettings)


def _read_yaml(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.debug("No settings file at %s, using defaults", path)
        return {}
    except (OSError, yaml.YAMLError) as exc:
        logger.error("Failed to read settings file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def load_settings(path: Path | None = None) -> Settings:
    """
    Load and validate settings.

    Args:
        path: Explicit settings file. Defaults to paths.settings_path().

    Raises:
        SettingsError: the file parsed but failed validation.
    """
    if path is None:
        path = paths.settings_path()

    data = _read_yaml(Path(path))
    try:
        settings = Settings.model_validate(data)
    except ValidationError as exc:
        raise SettingsError(f"Invalid settings in {path}: {exc}") from exc

    logger.debug("Loaded settings from %s (%d segments)", path, len(settings.segments))
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return load_settings()
