"""Custom exception hierarchy for siteimg."""

from __future__ import annotations

from typing import Any


class SiteImgError(Exception):
    """Base exception for all siteimg errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class TranscodeError(SiteImgError):
    """The transcoding capability could not produce an image.

    Raised by transcoders and absorbed by the optimizer, which degrades the
    result instead of failing the build.
    """

    def __init__(
        self,
        message: str = "",
        source: str = "",
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.original = original


class SourceNotFoundError(TranscodeError):
    """The source image does not exist on disk."""


class ConfigError(SiteImgError):
    """Invalid configuration value or file."""

    def __init__(self, message: str = "", key: str | None = None) -> None:
        super().__init__(message)
        self.key = key
