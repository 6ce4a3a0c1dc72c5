"""The 'webvideo cache' command group."""

from __future__ import annotations

from pathlib import Path

import click

from webvideo.cache.store import FileCacheStore
from webvideo.cli.exit_codes import ExitCode
from webvideo.cli.output import error_exit
from webvideo.config.loader import get_cache_dir
from webvideo.core.exceptions import CacheIOError

cache_dir_option = click.option(
    "--cache-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Cache directory (default: $WEBVIDEO_CACHE_DIR or ~/.cache/webvideo).",
)


def _format_size(size_bytes: int) -> str:
    size = float(size_bytes)
    for unit in ("B", "KiB", "MiB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GiB"


@click.group("cache")
def cache_group() -> None:
    """Inspect and clear the encoded output cache."""


@cache_group.command("list")
@cache_dir_option
def cache_list(cache_dir: Path | None) -> None:
    """List cached outputs."""
    store = FileCacheStore(cache_dir or get_cache_dir())
    try:
        keys = store.entries()
    except CacheIOError as e:
        error_exit(str(e), ExitCode.OPERATION_FAILED)

    if not keys:
        click.echo(f"Cache is empty ({store.directory})")
        return

    total = 0
    for key in keys:
        path = store.path_for(key)
        size = path.stat().st_size if path.exists() else 0
        total += size
        click.echo(f"{key.file_name}  {_format_size(size)}")
    click.echo(f"{len(keys)} entries, {_format_size(total)} in {store.directory}")


@cache_group.command("clear")
@cache_dir_option
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
def cache_clear(cache_dir: Path | None, yes: bool) -> None:
    """Delete every cached output."""
    store = FileCacheStore(cache_dir or get_cache_dir())
    prompt = f"Delete all cached outputs in {store.directory}?"
    if not yes and not click.confirm(prompt):
        click.echo("Aborted.")
        return

    try:
        removed = store.clear()
    except CacheIOError as e:
        error_exit(str(e), ExitCode.OPERATION_FAILED)
    click.echo(f"Removed {removed} cached outputs")
