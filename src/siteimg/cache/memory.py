"""Build-lifetime in-memory image cache."""

from __future__ import annotations

from collections.abc import Iterator

from siteimg.types import OptimizedImage


class MemoryCache:
    """Write-once mapping from cache key to optimized image.

    There is no eviction: the number of entries is bounded by the number of
    distinct image requests in one build.
    """

    def __init__(self) -> None:
        self._store: dict[str, OptimizedImage] = {}

    def get(self, key: str) -> OptimizedImage | None:
        return self._store.get(key)

    def set(self, key: str, result: OptimizedImage) -> OptimizedImage:
        """Insert ``result`` unless the key is already populated.

        Returns whichever result ends up stored under ``key``.
        """
        return self._store.setdefault(key, result)

    def clear(self) -> None:
        self._store.clear()

    def keys(self) -> Iterator[str]:
        return iter(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)
