"""The 'webvideo resolve' command: show outputs without encoding."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from webvideo.cache.keys import CacheKey, derive_cache_key
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
from webvideo.config.models import EffectiveTranscodeConfig, GlobalOptions
from webvideo.core.exceptions import MediaProbeError
from webvideo.encoder.ffprobe import FFprobeMediaProbe


def _format_quality(value: float | None) -> str:
    return "-" if value is None else f"{value:g}"


def _output_to_dict(config: EffectiveTranscodeConfig, key: CacheKey) -> dict[str, Any]:
    return {
        "container": config.container.value,
        "videoCodec": config.video_codec.value,
        "videoQuality": config.video_quality,
        "audioCodec": config.audio_codec.value,
        "audioQuality": config.audio_quality,
        "mimeType": config.mime_type,
        "cacheKey": key.file_name,
    }


def _options_to_dict(options: GlobalOptions) -> dict[str, Any]:
    return {
        "fileNameTemplate": options.file_name_template,
        "outputPath": options.output_path,
        "publicPath": options.effective_public_path,
        "mute": options.mute,
        "size": options.size,
        "cache": options.cache,
        "esModule": options.es_module,
    }


def _format_human(
    options: GlobalOptions,
    outputs: list[tuple[EffectiveTranscodeConfig, CacheKey]],
) -> str:
    lines = [
        f"Template:    {options.file_name_template}",
        f"Output path: {options.output_path}",
        f"Public path: {options.effective_public_path}",
        f"Cache:       {'on' if options.cache else 'off'}",
        "",
        f"Outputs ({len(outputs)}):",
    ]
    for index, (config, key) in enumerate(outputs, start=1):
        video = f"{config.video_codec.value}@{_format_quality(config.video_quality)}"
        audio = f"{config.audio_codec.value}@{_format_quality(config.audio_quality)}"
        lines.append(
            f"  {index}. {config.container.value}  video={video}  audio={audio}"
        )
        lines.append(f"     type: {config.mime_type}")
        lines.append(f"     key:  {key.file_name}")
    return "\n".join(lines)


@click.command("resolve")
@click.argument("input_file", type=click.Path(path_type=Path))
@query_option
@config_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["human", "json"], case_sensitive=False),
    default="human",
    help="Output format.",
)
@click.option(
    "--probe/--no-probe",
    default=False,
    help=(
        "Probe INPUT_FILE for an audio stream with ffprobe, as 'build' does. "
        "Without it the input is assumed to have audio, so cache keys for a "
        "silent input differ from the ones 'build' uses."
    ),
)
@ffprobe_option
def resolve_command(
    input_file: Path,
    query: str | None,
    config_path: Path | None,
    output_format: str,
    probe: bool,
    ffprobe_path: Path | None,
) -> None:
    """Resolve the outputs for INPUT_FILE and print them with cache keys."""
    json_output = output_format.casefold() == "json"
    require_input(input_file, json_output)

    input_has_audio = True
    if probe:
        try:
            media_probe = FFprobeMediaProbe(ffprobe_path)
        except MediaProbeError as e:
            error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE, json_output)
        input_has_audio = probe_input_audio(media_probe, input_file, json_output)

    resolved = resolve_or_exit(
        query, config_path, input_has_audio=input_has_audio, json_output=json_output
    )
    content = input_file.read_bytes()
    outputs = [
        (config, derive_cache_key(content, config)) for config in resolved.configs
    ]

    if json_output:
        click.echo(
            json.dumps(
                {
                    "options": _options_to_dict(resolved.options),
                    "outputs": [_output_to_dict(c, k) for c, k in outputs],
                },
                indent=2,
            )
        )
    else:
        click.echo(_format_human(resolved.options, outputs))
