"""Readable cache keys, one per effective request."""

from __future__ import annotations

from siteimg.types import OptimizeRequest

PLACEHOLDER = "auto"


def generate_cache_key(request: OptimizeRequest) -> str:
    """Build the cache key for a request.

    Unset parameters (``None`` or zero) are written as ``auto`` so that
    equivalent requests collide regardless of how the defaults were given.
    """
    components = [
        request.source_id,
        _part(request.width),
        _part(request.height),
        _part(request.format.value if request.format else None),
        _part(request.quality),
    ]
    return "-".join(components)


def _part(value: int | str | None) -> str:
    return str(value) if value else PLACEHOLDER
