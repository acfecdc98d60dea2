"""Build-time image optimization with per-build memoization.

``ImageOptimizer`` sits between page rendering and a transcoder. Each
distinct effective request is transcoded at most once per build; remote
URLs, under-specified public paths and transcoder failures all resolve to a
usable result instead of an exception, so one bad image never fails a build.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any

from siteimg.cache.keys import generate_cache_key
from siteimg.cache.memory import MemoryCache
from siteimg.cache.stats import CacheStats
from siteimg.config.defaults import (
    DEFAULT_CARD_HEIGHT,
    DEFAULT_CARD_QUALITY,
    DEFAULT_CARD_WIDTH,
    DEFAULT_FALLBACK_HEIGHT,
    DEFAULT_FALLBACK_WIDTH,
    DEFAULT_HERO_HEIGHT,
    DEFAULT_HERO_QUALITY,
    DEFAULT_HERO_WIDTH,
    DEFAULT_QUALITY,
)
from siteimg.config.schema import Settings
from siteimg.sources import AssetHandle, ImageSource, LocalPath, RemoteUrl, resolve_source
from siteimg.transcode.base import Transcoder
from siteimg.types import (
    ImageFormat,
    ImageMetadata,
    ImageOverrides,
    ImagePreset,
    OptimizedImage,
    OptimizeRequest,
    ResultKind,
    TranscodeRequest,
    TranscodeResult,
)

logger = logging.getLogger(__name__)

HERO_PRESET = ImagePreset(
    name="hero",
    width=DEFAULT_HERO_WIDTH,
    height=DEFAULT_HERO_HEIGHT,
    quality=DEFAULT_HERO_QUALITY,
)
CARD_PRESET = ImagePreset(
    name="card",
    width=DEFAULT_CARD_WIDTH,
    height=DEFAULT_CARD_HEIGHT,
    quality=DEFAULT_CARD_QUALITY,
)


class ImageOptimizer:
    """Per-build image optimization cache.

    Create one per build run and hand it to whatever renders pages. Use it as
    an async context manager, or call ``discard()`` when the build ends.
    """

    def __init__(
        self,
        transcoder: Transcoder,
        default_format: ImageFormat = ImageFormat.WEBP,
        default_quality: int = DEFAULT_QUALITY,
        fallback_width: int = DEFAULT_FALLBACK_WIDTH,
        fallback_height: int = DEFAULT_FALLBACK_HEIGHT,
        hero_preset: ImagePreset = HERO_PRESET,
        card_preset: ImagePreset = CARD_PRESET,
        dedupe_in_flight: bool = True,
    ) -> None:
        self._transcoder = transcoder
        self._default_format = default_format
        self._default_quality = default_quality
        self._fallback_width = fallback_width
        self._fallback_height = fallback_height
        self._hero_preset = hero_preset
        self._card_preset = card_preset
        self._dedupe_in_flight = dedupe_in_flight
        self._cache = MemoryCache()
        self._pending: dict[str, asyncio.Future[OptimizedImage]] = {}
        self._stats = CacheStats()
        self._generation = 0

    @classmethod
    def init(cls, transcoder: Transcoder, settings: Settings | None = None) -> ImageOptimizer:
        """Create an empty cache for a new build run."""
        if settings is None:
            return cls(transcoder)
        return cls(
            transcoder,
            default_format=settings.default_format,
            default_quality=settings.default_quality,
            fallback_width=settings.fallback_width,
            fallback_height=settings.fallback_height,
            hero_preset=settings.hero_preset(),
            card_preset=settings.card_preset(),
            dedupe_in_flight=settings.dedupe_in_flight,
        )

    def discard(self) -> None:
        """Drop every cached result at the end of a build.

        Transcodes still running finish for their own callers but are never
        stored, so nothing from the discarded build reaches the next one.
        """
        logger.debug("Discarding image cache with %d entries", len(self._cache))
        self._cache.clear()
        self._pending.clear()
        self._stats = CacheStats()
        self._generation += 1

    async def __aenter__(self) -> ImageOptimizer:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.discard()

    def __len__(self) -> int:
        return len(self._cache)

    def cached(self, request: OptimizeRequest) -> OptimizedImage | None:
        return self._cache.get(generate_cache_key(request))

    def stats(self) -> CacheStats:
        return self._stats.model_copy(update={"entries": len(self._cache)})

    async def optimize(
        self,
        request: OptimizeRequest | str | ImageMetadata,
        **params: Any,
    ) -> OptimizedImage:
        """Return an optimized rendition, computing it at most once per key.

        ``request`` is either a full ``OptimizeRequest`` or a bare source, in
        which case ``params`` supply width, height, format and quality.
        Never raises for image problems; check ``result.kind`` instead.
        """
        if isinstance(request, OptimizeRequest):
            if params:
                raise TypeError(
                    f"optimize() got keyword parameters {sorted(params)} "
                    "together with an OptimizeRequest"
                )
        else:
            request = OptimizeRequest(src=request, **params)

        key = generate_cache_key(request)
        cached = self._cache.get(key)
        if cached is not None:
            self._stats.hits += 1
            return cached

        pending = self._pending.get(key)
        if pending is not None:
            self._stats.hits += 1
            logger.debug("Joining in-flight optimization for %s", key)
            return await asyncio.shield(pending)

        self._stats.misses += 1
        generation = self._generation
        source = resolve_source(request.src)

        if isinstance(source, RemoteUrl):
            return self._store(key, self._pass_through(request))

        if isinstance(source, LocalPath) and not (request.width and request.height):
            logger.warning(
                "Image optimization: width and height are required for public/ folder images: %s",
                source.path,
            )
            return self._store(key, self._pass_through(request))

        self._stats.transcode_calls += 1
        if not self._dedupe_in_flight:
            return await self._transcode_and_store(key, request, source, generation)

        task = asyncio.ensure_future(
            self._transcode_and_store(key, request, source, generation)
        )
        self._pending[key] = task
        task.add_done_callback(functools.partial(self._release, key))
        return await asyncio.shield(task)

    async def hero_image(
        self,
        src: str | ImageMetadata | None,
        overrides: ImageOverrides | dict[str, Any] | None = None,
    ) -> OptimizedImage | None:
        """Optimize a hero image, 1200x630 unless overridden."""
        return await self._with_preset(self._hero_preset, src, overrides)

    async def card_image(
        self,
        src: str | ImageMetadata | None,
        overrides: ImageOverrides | dict[str, Any] | None = None,
    ) -> OptimizedImage | None:
        """Optimize a post card thumbnail, 400x225 unless overridden."""
        return await self._with_preset(self._card_preset, src, overrides)

    async def _with_preset(
        self,
        preset: ImagePreset,
        src: str | ImageMetadata | None,
        overrides: ImageOverrides | dict[str, Any] | None,
    ) -> OptimizedImage | None:
        if not src:
            return None
        if overrides is None:
            overrides = ImageOverrides()
        elif isinstance(overrides, dict):
            overrides = ImageOverrides(**overrides)
        return await self.optimize(
            OptimizeRequest(
                src=src,
                width=overrides.width or preset.width,
                height=overrides.height or preset.height,
                format=overrides.format or preset.format,
                quality=overrides.quality or preset.quality,
            )
        )

    async def _transcode_and_store(
        self,
        key: str,
        request: OptimizeRequest,
        source: ImageSource,
        generation: int,
    ) -> OptimizedImage:
        try:
            raw = await self._transcoder(
                TranscodeRequest(
                    src=request.src,
                    width=request.width or None,
                    height=request.height or None,
                    format=request.format or self._default_format,
                    quality=request.quality or self._default_quality,
                )
            )
            transcoded = TranscodeResult.model_validate(raw)
            result = OptimizedImage(
                kind=ResultKind.OPTIMIZED,
                src=transcoded.src,
                width=transcoded.width,
                height=transcoded.height,
                srcset=transcoded.srcset,
                request=request,
            )
        except Exception as e:  # failures and malformed results both degrade
            logger.error("Error optimizing image %s: %s", source.identifier, e)
            result = self._degraded(request, source, e)

        if generation != self._generation:
            logger.debug("Dropping result for %s from a discarded build", key)
            return result
        return self._store(key, result)

    def _store(self, key: str, result: OptimizedImage) -> OptimizedImage:
        stored = self._cache.set(key, result)
        if stored is result:
            self._stats.record(result.kind)
        return stored

    def _release(self, key: str, task: asyncio.Future[OptimizedImage]) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]

    def _pass_through(self, request: OptimizeRequest) -> OptimizedImage:
        return OptimizedImage(
            kind=ResultKind.PASS_THROUGH,
            src=request.source_id,
            width=request.width or self._fallback_width,
            height=request.height or self._fallback_height,
            request=request,
        )

    def _degraded(
        self,
        request: OptimizeRequest,
        source: ImageSource,
        error: Exception,
    ) -> OptimizedImage:
        if isinstance(source, AssetHandle):
            width = request.width or source.metadata.width
            height = request.height or source.metadata.height
        else:
            width = request.width or self._fallback_width
            height = request.height or self._fallback_height
        return OptimizedImage(
            kind=ResultKind.DEGRADED,
            src=source.identifier,
            width=width,
            height=height,
            request=request,
            error=str(error) or type(error).__name__,
        )


async def get_optimized_hero_image(
    optimizer: ImageOptimizer,
    src: str | ImageMetadata | None,
    overrides: ImageOverrides | dict[str, Any] | None = None,
) -> OptimizedImage | None:
    return await optimizer.hero_image(src, overrides)


async def get_optimized_card_image(
    optimizer: ImageOptimizer,
    src: str | ImageMetadata | None,
    overrides: ImageOverrides | dict[str, Any] | None = None,
) -> OptimizedImage | None:
    return await optimizer.card_image(src, overrides)
