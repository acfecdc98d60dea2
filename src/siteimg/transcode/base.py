"""Transcoder capability interface."""

from __future__ import annotations

from typing import Protocol

from siteimg.types import TranscodeRequest, TranscodeResult


class Transcoder(Protocol):
    """Re-encodes an image to a target size, format and quality.

    Implementations signal failure by raising. The optimizer treats any
    exception as a transcoding failure.
    """

    async def __call__(self, request: TranscodeRequest) -> TranscodeResult: ...
