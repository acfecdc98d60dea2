"""Cache statistics model."""

from __future__ import annotations

from pydantic import BaseModel

from siteimg.types import ResultKind


class CacheStats(BaseModel):
    """Aggregate counters for one build's image cache."""

    entries: int = 0
    hits: int = 0
    misses: int = 0
    transcode_calls: int = 0
    optimized: int = 0
    pass_through: int = 0
    degraded: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def record(self, kind: ResultKind) -> None:
        if kind == ResultKind.OPTIMIZED:
            self.optimized += 1
        elif kind == ResultKind.PASS_THROUGH:
            self.pass_through += 1
        else:
            self.degraded += 1
