"""Bounded async dispatcher for optimizing a build's images."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from siteimg.types import OptimizeRequest

if TYPE_CHECKING:
    from siteimg.optimizer import ImageOptimizer
    from siteimg.types import OptimizedImage

logger = logging.getLogger(__name__)


class BuildPool:
    """Runs many optimization requests through one optimizer concurrently.

    A semaphore bounds how many transcodes run at once. Results come back in
    input order.
    """

    def __init__(self, max_workers: int = 4) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int:
        return self._max_workers

    async def optimize_all(
        self,
        optimizer: ImageOptimizer,
        requests: list[OptimizeRequest],
    ) -> list[OptimizedImage]:
        semaphore = asyncio.Semaphore(self._max_workers)

        async def worker(request: OptimizeRequest) -> OptimizedImage:
            async with semaphore:
                return await optimizer.optimize(request)

        logger.info("Optimizing %d images with %d workers", len(requests), self._max_workers)
        return list(await asyncio.gather(*(worker(r) for r in requests)))
