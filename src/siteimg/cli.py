"""Click CLI for siteimg — optimize site images through a build cache."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from siteimg.cache.stats import CacheStats
from siteimg.config.hierarchy import load_config_hierarchy
from siteimg.config.schema import Settings, build_settings
from siteimg.errors.exceptions import ConfigError
from siteimg.sources import is_valid_image_path
from siteimg.types import ImageFormat, OptimizedImage, OptimizeRequest

if TYPE_CHECKING:
    from siteimg.optimizer import ImageOptimizer

console = Console()
error_console = Console(stderr=True)

_FORMAT_CHOICE = click.Choice([f.value for f in ImageFormat])


def _log_level(verbosity: int, base_level: str = "WARNING") -> int:
    """Resolve the root level: ``log_level`` from config, lowered by -v flags."""
    level = logging.getLevelNamesMapping()[base_level]
    if verbosity == 1:
        level = min(level, logging.INFO)
    elif verbosity >= 2:
        level = logging.DEBUG
    return level


def _setup_logging(verbosity: int, base_level: str = "WARNING") -> None:
    """Configure logging based on config and verbosity level."""
    logging.basicConfig(
        level=_log_level(verbosity, base_level),
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _load_settings(**overrides: object) -> Settings:
    try:
        return build_settings(load_config_hierarchy(**overrides))
    except ConfigError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(2)


def _make_optimizer(settings: Settings) -> ImageOptimizer:
    from siteimg.optimizer import ImageOptimizer
    from siteimg.transcode.pillow import PillowTranscoder

    transcoder = PillowTranscoder(
        public_dir=settings.public_dir,
        out_dir=settings.out_dir,
        url_prefix=settings.url_prefix,
        densities=settings.densities,
    )
    return ImageOptimizer.init(transcoder, settings)


@click.group()
@click.version_option(package_name="siteimg")
def cli() -> None:
    """siteimg — build-time image optimization cache for static sites."""


@cli.command()
@click.argument("src")
@click.option("--width", type=int, default=None, help="Target width in pixels.")
@click.option("--height", type=int, default=None, help="Target height in pixels.")
@click.option("--format", "fmt", type=_FORMAT_CHOICE, default=None, help="Output format.")
@click.option("--quality", type=click.IntRange(1, 100), default=None, help="Encoder quality.")
@click.option(
    "--preset", type=click.Choice(["hero", "card"]), default=None, help="Use a slot preset."
)
@click.option("--public-dir", type=click.Path(), default=None, help="Public folder root.")
@click.option("--out-dir", type=click.Path(), default=None, help="Where renditions are written.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def optimize(
    src: str,
    width: int | None,
    height: int | None,
    fmt: str | None,
    quality: int | None,
    preset: str | None,
    public_dir: str | None,
    out_dir: str | None,
    verbose: int,
) -> None:
    """Optimize a single image."""
    settings = _load_settings(public_dir=public_dir, out_dir=out_dir)
    _setup_logging(verbose, settings.log_level)
    optimizer = _make_optimizer(settings)
    overrides = {"width": width, "height": height, "format": fmt, "quality": quality}

    async def _run() -> OptimizedImage | None:
        async with optimizer:
            if preset == "hero":
                return await optimizer.hero_image(src, overrides)
            if preset == "card":
                return await optimizer.card_image(src, overrides)
            return await optimizer.optimize(src, **overrides)

    result = asyncio.run(_run())
    if result is None:
        error_console.print("[red]Error:[/red] no image source given")
        sys.exit(1)
    console.print(_results_table([result], title="Optimized Image"))


@cli.command()
@click.argument("manifest", type=click.Path(exists=True))
@click.option("--workers", type=int, default=None, help="Concurrent transcodes.")
@click.option("--public-dir", type=click.Path(), default=None, help="Public folder root.")
@click.option("--out-dir", type=click.Path(), default=None, help="Where renditions are written.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def batch(
    manifest: str,
    workers: int | None,
    public_dir: str | None,
    out_dir: str | None,
    verbose: int,
) -> None:
    """Optimize every image listed in a YAML manifest through one cache."""
    from siteimg.concurrency.pool import BuildPool
    from siteimg.config.loader import load_manifest

    settings = _load_settings(public_dir=public_dir, out_dir=out_dir, max_workers=workers)
    _setup_logging(verbose, settings.log_level)

    try:
        entries = load_manifest(manifest).images
    except (ValueError, FileNotFoundError) as e:
        error_console.print(f"[red]Invalid manifest:[/red] {e}")
        sys.exit(1)

    presets = {"hero": settings.hero_preset(), "card": settings.card_preset()}
    requests: list[OptimizeRequest] = []
    for entry in entries:
        preset = presets.get(entry.preset) if entry.preset else None
        if entry.preset and preset is None:
            error_console.print(f"[red]Unknown preset:[/red] {entry.preset}")
            sys.exit(1)
        requests.append(
            OptimizeRequest(
                src=entry.src,
                width=entry.width or (preset.width if preset else None),
                height=entry.height or (preset.height if preset else None),
                format=entry.format or (preset.format if preset else None),
                quality=entry.quality or (preset.quality if preset else None),
            )
        )

    optimizer = _make_optimizer(settings)
    pool = BuildPool(max_workers=settings.max_workers)

    async def _run() -> tuple[list[OptimizedImage], CacheStats]:
        async with optimizer:
            results = await pool.optimize_all(optimizer, requests)
            return results, optimizer.stats()

    results, stats = asyncio.run(_run())
    console.print(_results_table(results, title="Optimized Images"))

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Entries", str(stats.entries))
    table.add_row("Hits", str(stats.hits))
    table.add_row("Misses", str(stats.misses))
    table.add_row("Hit rate", f"{stats.hit_rate:.1%}")
    table.add_row("Transcodes", str(stats.transcode_calls))
    table.add_row("Optimized", str(stats.optimized))
    table.add_row("Pass-through", str(stats.pass_through))
    table.add_row("Degraded", str(stats.degraded))
    console.print(table)


@cli.command()
@click.argument("paths", nargs=-1, required=True)
def validate(paths: tuple[str, ...]) -> None:
    """Check that image paths are URLs, site-absolute or explicitly relative."""
    invalid = 0
    for path in paths:
        if is_valid_image_path(path):
            console.print(f"[green]valid[/green]   {path}")
        else:
            invalid += 1
            console.print(f"[red]invalid[/red] {path}")
    if invalid:
        sys.exit(1)


def _results_table(results: list[OptimizedImage], title: str) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("Kind", style="cyan")
    table.add_column("Source")
    table.add_column("Size")
    table.add_column("Srcset")

    styles = {"optimized": "green", "pass_through": "yellow", "degraded": "red"}
    for result in results:
        kind = result.kind.value
        table.add_row(
            f"[{styles[kind]}]{kind}[/{styles[kind]}]",
            result.src,
            f"{result.width}x{result.height}",
            result.srcset.attribute or "-",
        )
    return table


def main() -> None:
    """Entry point for the CLI."""
    cli()
