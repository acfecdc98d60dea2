"""Pydantic models for resolved settings and batch manifests."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from siteimg.config.defaults import get_defaults
from siteimg.errors.exceptions import ConfigError
from siteimg.types import ImageFormat, ImagePreset

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    public_dir: str
    out_dir: str
    url_prefix: str
    default_format: ImageFormat
    default_quality: int = Field(ge=1, le=100)
    fallback_width: int = Field(gt=0)
    fallback_height: int = Field(gt=0)
    hero_width: int = Field(gt=0)
    hero_height: int = Field(gt=0)
    hero_quality: int = Field(ge=1, le=100)
    card_width: int = Field(gt=0)
    card_height: int = Field(gt=0)
    card_quality: int = Field(ge=1, le=100)
    densities: list[float]
    dedupe_in_flight: bool
    max_workers: int = Field(gt=0)
    log_level: str

    @field_validator("densities")
    @classmethod
    def _positive_densities(cls, value: list[float]) -> list[float]:
        if not value or any(d <= 0 for d in value):
            raise ValueError("densities must be a non-empty list of positive numbers")
        return sorted(set(value))

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    def hero_preset(self) -> ImagePreset:
        return ImagePreset(
            name="hero",
            width=self.hero_width,
            height=self.hero_height,
            format=self.default_format,
            quality=self.hero_quality,
        )

    def card_preset(self) -> ImagePreset:
        return ImagePreset(
            name="card",
            width=self.card_width,
            height=self.card_height,
            format=self.default_format,
            quality=self.card_quality,
        )


class ManifestEntry(BaseModel):
    src: str
    width: int | None = None
    height: int | None = None
    format: ImageFormat | None = None
    quality: int | None = None
    preset: str | None = None


class Manifest(BaseModel):
    images: list[ManifestEntry] = Field(default_factory=list)


def build_settings(config: dict[str, Any] | None = None) -> Settings:
    """Validate a merged config mapping into Settings.

    Keys missing from ``config`` take their package defaults.
    """
    merged = get_defaults()
    if config:
        merged.update(config)
    try:
        return Settings(**merged)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(p) for p in first["loc"]) if first["loc"] else None
        raise ConfigError(f"Invalid configuration: {first['msg']}", key=key) from e
