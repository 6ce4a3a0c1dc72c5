"""Command line interface for webvideo."""

from __future__ import annotations

from pathlib import Path

import click

from webvideo.logging import configure_logging


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="webvideo")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    show_default=True,
    help="Minimum level of log records to emit.",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Append logs to this rotating file instead of stderr.",
)
@click.option("--log-json", is_flag=True, help="Emit logs as JSON lines.")
def main(log_level: str, log_file: Path | None, log_json: bool) -> None:
    """Resolve, encode, and cache web video outputs for one input file."""
    configure_logging(log_level, log_file, log_json)


# Commands import the pipeline; register them after main exists
def _register_commands() -> None:
    from webvideo.cli.build import build_command
    from webvideo.cli.cache import cache_group
    from webvideo.cli.resolve import resolve_command

    for command in (build_command, cache_group, resolve_command):
        main.add_command(command)


_register_commands()
