"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Directories
DEFAULT_PUBLIC_DIR = "public"
DEFAULT_OUT_DIR = "dist/_siteimg"
DEFAULT_URL_PREFIX = "/_siteimg"

# Encoding
DEFAULT_FORMAT = "webp"
DEFAULT_QUALITY = 80

# Open Graph size, used when a request gives no dimensions
DEFAULT_FALLBACK_WIDTH = 1200
DEFAULT_FALLBACK_HEIGHT = 630

# Presets
DEFAULT_HERO_WIDTH = 1200
DEFAULT_HERO_HEIGHT = 630
DEFAULT_HERO_QUALITY = 80
DEFAULT_CARD_WIDTH = 400
DEFAULT_CARD_HEIGHT = 225  # 16:9
DEFAULT_CARD_QUALITY = 75

# Pixel densities emitted in the srcset
DEFAULT_DENSITIES = [1, 2]

# Concurrency
DEFAULT_DEDUPE_IN_FLIGHT = True
DEFAULT_MAX_WORKERS = 4

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "public_dir": DEFAULT_PUBLIC_DIR,
        "out_dir": DEFAULT_OUT_DIR,
        "url_prefix": DEFAULT_URL_PREFIX,
        "default_format": DEFAULT_FORMAT,
        "default_quality": DEFAULT_QUALITY,
        "fallback_width": DEFAULT_FALLBACK_WIDTH,
        "fallback_height": DEFAULT_FALLBACK_HEIGHT,
        "hero_width": DEFAULT_HERO_WIDTH,
        "hero_height": DEFAULT_HERO_HEIGHT,
        "hero_quality": DEFAULT_HERO_QUALITY,
        "card_width": DEFAULT_CARD_WIDTH,
        "card_height": DEFAULT_CARD_HEIGHT,
        "card_quality": DEFAULT_CARD_QUALITY,
        "densities": list(DEFAULT_DENSITIES),
        "dedupe_in_flight": DEFAULT_DEDUPE_IN_FLIGHT,
        "max_workers": DEFAULT_MAX_WORKERS,
        "log_level": DEFAULT_LOG_LEVEL,
    }
