"""The 'webvideo build' command: encode outputs and emit a manifest."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from webvideo.cache.store import FileCacheStore
from webvideo.cli.exit_codes import ExitCode
from webvideo.cli.options import (
    config_option,
    ffprobe_option,
    probe_input_audio,
    query_option,
    require_input,
    resolve_or_exit,
)
from webvideo.cli.output import error_exit
from webvideo.config.loader import get_cache_dir
from webvideo.core.exceptions import EncoderError, MediaProbeError, NameFormatError
from webvideo.encoder.ffmpeg import FFmpegEncoder
from webvideo.encoder.ffprobe import FFprobeMediaProbe
from webvideo.pipeline import BuildResult, TranscodeBuild

logger = logging.getLogger(__name__)


def _write_artifacts(result: BuildResult, out_dir: Path) -> list[Path]:
    written: list[Path] = []
    for artifact in result.artifacts:
        destination = out_dir / result.output_file(artifact)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(artifact.data)
        written.append(destination)
    return written


@click.command("build")
@click.argument("input_file", type=click.Path(path_type=Path))
@click.option(
    "--out",
    "-o",
    "out_dir",
    type=click.Path(path_type=Path, file_okay=False),
    required=True,
    help="Directory the encoded files are written to.",
)
@query_option
@config_option
@click.option(
    "--cache-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help=(
        "Cache directory (default: $WEBVIDEO_CACHE_DIR or ~/.cache/webvideo). "
        "Each build deletes entries it did not use, so give every asset or "
        "project its own directory."
    ),
)
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(min=1),
    default=None,
    help="Number of outputs encoded in parallel.",
)
@click.option(
    "--manifest",
    "manifest_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Write the manifest module to this file instead of stdout.",
)
@click.option(
    "--ffmpeg",
    "ffmpeg_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to ffmpeg (default: found on PATH).",
)
@ffprobe_option
def build_command(
    input_file: Path,
    out_dir: Path,
    query: str | None,
    config_path: Path | None,
    cache_dir: Path | None,
    workers: int | None,
    manifest_path: Path | None,
    ffmpeg_path: Path | None,
    ffprobe_path: Path | None,
) -> None:
    """Encode INPUT_FILE into every configured output.

    Outputs are written under --out and the manifest module is printed.
    """
    require_input(input_file)

    try:
        encoder = FFmpegEncoder(ffmpeg_path)
        probe = FFprobeMediaProbe(ffprobe_path)
    except (EncoderError, MediaProbeError) as e:
        error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE)

    input_has_audio = probe_input_audio(probe, input_file)
    resolved = resolve_or_exit(query, config_path, input_has_audio=input_has_audio)

    build = TranscodeBuild(
        input_file,
        resolved,
        encoder=encoder,
        cache_store=FileCacheStore(cache_dir or get_cache_dir()),
        probe=probe,
        max_workers=workers,
    )
    try:
        result = build.run()
    except KeyboardInterrupt:
        error_exit("Build interrupted", ExitCode.INTERRUPTED)
    except EncoderError as e:
        if e.diagnostics:
            logger.error("ffmpeg output:\n%s", e.diagnostics)
        error_exit(str(e), ExitCode.OPERATION_FAILED)
    except (MediaProbeError, NameFormatError, OSError) as e:
        error_exit(str(e), ExitCode.OPERATION_FAILED)

    try:
        written = _write_artifacts(result, out_dir)
    except OSError as e:
        error_exit(f"Failed to write outputs: {e}", ExitCode.OPERATION_FAILED)

    for path, artifact in zip(written, result.artifacts):
        source = "cached" if artifact.from_cache else "encoded"
        click.echo(f"[{source}] {path}", err=True)

    module = result.manifest_module()
    if manifest_path is not None:
        manifest_path.write_text(module + "\n", encoding="utf-8")
    else:
        click.echo(module)
