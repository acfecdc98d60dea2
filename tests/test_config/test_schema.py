"""Tests for Settings validation."""

import pytest

from siteimg.config.schema import build_settings
from siteimg.errors.exceptions import ConfigError
from siteimg.types import ImageFormat


class TestBuildSettings:
    def test_defaults(self):
        settings = build_settings()
        assert settings.default_format == ImageFormat.WEBP
        assert settings.densities == [1.0, 2.0]
        assert settings.dedupe_in_flight is True

    def test_overrides_merge_over_defaults(self):
        settings = build_settings({"card_width": 320, "default_format": "avif"})
        assert settings.card_width == 320
        assert settings.default_format == ImageFormat.AVIF
        assert settings.hero_width == 1200

    def test_string_densities_from_env(self):
        settings = build_settings({"densities": ["2", "1", "1.5"]})
        assert settings.densities == [1.0, 1.5, 2.0]

    def test_invalid_quality(self):
        with pytest.raises(ConfigError) as exc_info:
            build_settings({"default_quality": 0})
        assert exc_info.value.key == "default_quality"

    def test_invalid_format(self):
        with pytest.raises(ConfigError):
            build_settings({"default_format": "gif"})

    def test_non_positive_density(self):
        with pytest.raises(ConfigError, match="densities"):
            build_settings({"densities": [1, 0]})

    def test_log_level_normalized(self):
        assert build_settings({"log_level": "info"}).log_level == "INFO"

    def test_unknown_log_level(self):
        with pytest.raises(ConfigError) as exc_info:
            build_settings({"log_level": "chatty"})
        assert exc_info.value.key == "log_level"


class TestPresets:
    def test_hero_preset(self):
        preset = build_settings().hero_preset()
        assert (preset.width, preset.height, preset.quality) == (1200, 630, 80)
        assert preset.format == ImageFormat.WEBP

    def test_card_preset_uses_default_format(self):
        preset = build_settings({"default_format": "avif"}).card_preset()
        assert (preset.width, preset.height, preset.quality) == (400, 225, 75)
        assert preset.format == ImageFormat.AVIF
