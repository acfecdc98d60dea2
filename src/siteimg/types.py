"""Shared Pydantic models for siteimg."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

# ── Enums ──


class ImageFormat(StrEnum):
    AVIF = "avif"
    WEBP = "webp"
    PNG = "png"
    JPG = "jpg"
    JPEG = "jpeg"


class ResultKind(StrEnum):
    OPTIMIZED = "optimized"
    PASS_THROUGH = "pass_through"
    DEGRADED = "degraded"


# ── Request models ──


class ImageMetadata(BaseModel):
    """Handle for an imported asset whose intrinsic size is already known."""

    src: str
    width: int
    height: int
    format: ImageFormat | None = None

    model_config = {"frozen": True}


class OptimizeRequest(BaseModel):
    """One request for an optimized rendition of an image.

    Zero and ``None`` both mean "unset" for the numeric fields.
    """

    src: str | ImageMetadata
    width: int | None = None
    height: int | None = None
    format: ImageFormat | None = None
    quality: int | None = Field(default=None, ge=0, le=100)

    @property
    def source_id(self) -> str:
        return self.src if isinstance(self.src, str) else self.src.src


class ImagePreset(BaseModel):
    """Default sizing for an image slot (hero, card)."""

    name: str
    width: int
    height: int
    format: ImageFormat = ImageFormat.WEBP
    quality: int = 80


class ImageOverrides(BaseModel):
    width: int | None = None
    height: int | None = None
    format: ImageFormat | None = None
    quality: int | None = None


# ── Result models ──


class SrcSetEntry(BaseModel):
    url: str
    descriptor: str


class SrcSet(BaseModel):
    values: list[SrcSetEntry] = Field(default_factory=list)

    @property
    def attribute(self) -> str:
        return ", ".join(f"{v.url} {v.descriptor}" for v in self.values)

    def __len__(self) -> int:
        return len(self.values)


class TranscodeRequest(BaseModel):
    src: str | ImageMetadata
    width: int | None = None
    height: int | None = None
    format: ImageFormat = ImageFormat.WEBP
    quality: int = 80


class TranscodeResult(BaseModel):
    src: str
    width: int
    height: int
    srcset: SrcSet = Field(default_factory=SrcSet)


class OptimizedImage(BaseModel):
    """Outcome of an optimization request.

    ``kind`` tells callers whether the image was actually re-encoded, echoed
    back untouched, or replaced by a fallback after a transcoding failure.
    """

    kind: ResultKind
    src: str
    width: int
    height: int
    srcset: SrcSet = Field(default_factory=SrcSet)
    request: OptimizeRequest
    error: str | None = None

    @property
    def is_optimized(self) -> bool:
        return self.kind == ResultKind.OPTIMIZED

    @property
    def attributes(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}
