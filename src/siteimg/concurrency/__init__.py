"""Bounded batch optimization."""

from siteimg.concurrency.pool import BuildPool

__all__ = ["BuildPool"]
