"""Error reporting shared by the CLI commands."""

from __future__ import annotations

import json
import sys
from typing import NoReturn

import click

from webvideo.cli.exit_codes import ExitCode
from webvideo.core.exceptions import ConfigurationError
from webvideo.options.errors import OverrideSyntaxError


def error_exit(message: str, code: ExitCode, json_output: bool = False) -> NoReturn:
    """Print an error to stderr and exit with code.

    With json_output the error is a JSON object
    {"status": "failed", "error": {"code": <name>, "message": ...}} so
    scripts can tell failure kinds apart without parsing text.
    """
    if json_output:
        payload = {"status": "failed", "error": {"code": code.name, "message": message}}
        click.echo(json.dumps(payload), err=True)
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))


def config_error_exit(error: ConfigurationError, json_output: bool = False) -> NoReturn:
    """Exit with CONFIG_ERROR, pointing at the bad token when there is one."""
    if isinstance(error, OverrideSyntaxError) and not json_output:
        message = error.format_error()
    else:
        message = str(error)
    error_exit(message, ExitCode.CONFIG_ERROR, json_output)
