"""Pillow-backed transcoder writing optimized renditions to an output directory."""

from __future__ import annotations

import asyncio
import hashlib
import logging
from pathlib import Path

from PIL import Image, ImageOps

from siteimg.errors.exceptions import SourceNotFoundError, TranscodeError
from siteimg.sources import RemoteUrl, resolve_source
from siteimg.types import (
    ImageFormat,
    ImageMetadata,
    SrcSet,
    SrcSetEntry,
    TranscodeRequest,
    TranscodeResult,
)

logger = logging.getLogger(__name__)

_PIL_FORMATS: dict[ImageFormat, str] = {
    ImageFormat.AVIF: "AVIF",
    ImageFormat.WEBP: "WEBP",
    ImageFormat.PNG: "PNG",
    ImageFormat.JPG: "JPEG",
    ImageFormat.JPEG: "JPEG",
}

_EXTENSIONS: dict[ImageFormat, str] = {
    ImageFormat.AVIF: "avif",
    ImageFormat.WEBP: "webp",
    ImageFormat.PNG: "png",
    ImageFormat.JPG: "jpg",
    ImageFormat.JPEG: "jpg",
}


class PillowTranscoder:
    """Resize and re-encode local images with Pillow.

    Site-absolute paths (``/img/a.png``) are resolved inside ``public_dir``;
    other paths are taken relative to the working directory. One file is
    written per pixel density, never upscaling past the source for densities
    above the first.
    """

    def __init__(
        self,
        public_dir: str | Path = "public",
        out_dir: str | Path = "dist/_siteimg",
        url_prefix: str = "/_siteimg",
        densities: list[float] | tuple[float, ...] = (1, 2),
    ) -> None:
        self._public_dir = Path(public_dir)
        self._out_dir = Path(out_dir)
        self._url_prefix = url_prefix.rstrip("/")
        self._densities = sorted(set(densities)) or [1]

    @property
    def out_dir(self) -> Path:
        return self._out_dir

    async def __call__(self, request: TranscodeRequest) -> TranscodeResult:
        # Pillow work is blocking; keep it off the event loop.
        return await asyncio.to_thread(self._transcode, request)

    def resolve_path(self, src: str | ImageMetadata) -> Path:
        source = resolve_source(src)
        if isinstance(source, RemoteUrl):
            raise TranscodeError(
                f"Remote images cannot be transcoded: {source.url}", source=source.url
            )
        raw = source.identifier
        if raw.startswith("/"):
            return self._public_dir / raw.lstrip("/")
        return Path(raw)

    def _transcode(self, request: TranscodeRequest) -> TranscodeResult:
        path = self.resolve_path(request.src)
        source_id = request.src if isinstance(request.src, str) else request.src.src
        if not path.is_file():
            raise SourceNotFoundError(f"Image not found: {path}", source=source_id)

        try:
            with Image.open(path) as img:
                img.load()
                width, height = _target_size(img.size, request.width, request.height)
                entries: list[SrcSetEntry] = []
                for i, density in enumerate(self._densities):
                    dw, dh = round(width * density), round(height * density)
                    if i > 0 and (dw > img.width or dh > img.height):
                        logger.debug(
                            "Skipping %gx rendition of %s: source is only %dx%d",
                            density, source_id, img.width, img.height,
                        )
                        continue
                    url = self._write(img, path, dw, dh, request)
                    entries.append(SrcSetEntry(url=url, descriptor=f"{density:g}x"))
        # KeyError: no encoder for the format in this Pillow build
        except (OSError, ValueError, KeyError, Image.DecompressionBombError) as e:
            raise TranscodeError(
                f"Failed to transcode {source_id}: {e}", source=source_id, original=e
            ) from e

        logger.debug("Transcoded %s to %dx%d (%d renditions)", source_id, width, height, len(entries))
        return TranscodeResult(
            src=entries[0].url,
            width=width,
            height=height,
            srcset=SrcSet(values=entries),
        )

    def _write(
        self,
        img: Image.Image,
        path: Path,
        width: int,
        height: int,
        request: TranscodeRequest,
    ) -> str:
        pil_format = _PIL_FORMATS[request.format]
        rendition = ImageOps.fit(img, (width, height), Image.Resampling.LANCZOS)
        if pil_format == "JPEG":
            if rendition.mode != "RGB":
                rendition = rendition.convert("RGB")
        elif rendition.mode not in ("RGB", "RGBA"):
            rendition = rendition.convert("RGBA")

        filename = (
            f"{path.stem}-{width}x{height}-{_digest(path, request)}."
            f"{_EXTENSIONS[request.format]}"
        )
        self._out_dir.mkdir(parents=True, exist_ok=True)
        rendition.save(self._out_dir / filename, format=pil_format, quality=request.quality)
        return f"{self._url_prefix}/{filename}"


def _target_size(
    intrinsic: tuple[int, int],
    width: int | None,
    height: int | None,
) -> tuple[int, int]:
    """Resolve the output box, deriving a missing side from the aspect ratio."""
    iw, ih = intrinsic
    if width and height:
        return width, height
    if width:
        return width, max(1, round(width * ih / iw))
    if height:
        return max(1, round(height * iw / ih)), height
    return iw, ih


def _digest(path: Path, request: TranscodeRequest) -> str:
    stat = path.stat()
    key = f"{path.resolve()}|{stat.st_mtime_ns}|{stat.st_size}|{request.format}|{request.quality}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:8]
