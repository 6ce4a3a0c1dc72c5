"""Shared option handling for commands that resolve outputs."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from webvideo.cli.exit_codes import ExitCode
from webvideo.cli.output import config_error_exit, error_exit
from webvideo.config.loader import load_static_config
from webvideo.config.models import DEFAULT_OPTIONS
from webvideo.config.resolver import ResolvedBuild, resolve_build
from webvideo.core.exceptions import ConfigurationError, MediaProbeError
from webvideo.encoder.ffprobe import FFprobeMediaProbe
from webvideo.options.parser import parse_override_string

logger = logging.getLogger(__name__)

query_option = click.option(
    "--query",
    "-q",
    default=None,
    help='Override string, e.g. "?outputFiles=webm/vp9@30,mp4&mute".',
)
config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Static build configuration (YAML).",
)
ffprobe_option = click.option(
    "--ffprobe",
    "ffprobe_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to ffprobe (default: found on PATH).",
)


def resolve_or_exit(
    query: str | None,
    config_path: Path | None,
    *,
    input_has_audio: bool = True,
    json_output: bool = False,
) -> ResolvedBuild:
    """Load every option layer and resolve outputs, exiting on failure.

    Args:
        query: Override string from --query, if given.
        config_path: Static configuration file from --config, if given.
        input_has_audio: False when the input has no audio stream.
        json_output: Format errors as JSON.

    Returns:
        The resolved build.
    """
    static = None
    if config_path is not None:
        try:
            static = load_static_config(config_path)
        except FileNotFoundError as e:
            error_exit(str(e), ExitCode.TARGET_NOT_FOUND, json_output)
        except ConfigurationError as e:
            config_error_exit(e, json_output)
        logger.debug("Loaded static config from %s", config_path)

    overrides = None
    if query:
        parsed = parse_override_string(query)
        try:
            parsed.raise_for_errors()
        except ConfigurationError as e:
            config_error_exit(e, json_output)
        overrides = parsed.layer

    try:
        return resolve_build(
            DEFAULT_OPTIONS, static, overrides, input_has_audio=input_has_audio
        )
    except ConfigurationError as e:
        config_error_exit(e, json_output)


def require_input(path: Path, json_output: bool = False) -> None:
    """Exit with TARGET_NOT_FOUND unless path is an existing file."""
    if not path.is_file():
        error_exit(
            f"Input file not found: {path}", ExitCode.TARGET_NOT_FOUND, json_output
        )


def probe_input_audio(
    probe: FFprobeMediaProbe, input_file: Path, json_output: bool = False
) -> bool:
    """Return whether INPUT_FILE has an audio stream, exiting on probe failure."""
    try:
        has_audio = probe.probe_file(input_file).has_audio
    except MediaProbeError as e:
        error_exit(str(e), ExitCode.OPERATION_FAILED, json_output)
    if not has_audio:
        logger.info("%s has no audio stream, outputs will be muted", input_file.name)
    return has_audio
