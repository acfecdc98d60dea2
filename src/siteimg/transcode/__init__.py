"""Transcoder protocol and the Pillow implementation."""

from siteimg.transcode.base import Transcoder
from siteimg.transcode.pillow import PillowTranscoder

__all__ = ["PillowTranscoder", "Transcoder"]
