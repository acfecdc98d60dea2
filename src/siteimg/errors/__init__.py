"""Error handling — exceptions raised by transcoders and configuration."""

from siteimg.errors.exceptions import (
    ConfigError,
    SiteImgError,
    SourceNotFoundError,
    TranscodeError,
)

__all__ = [
    "SiteImgError",
    "TranscodeError",
    "SourceNotFoundError",
    "ConfigError",
]
