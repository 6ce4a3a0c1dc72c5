"""Logging configuration for webvideo."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from webvideo.logging.context import OutputContextFilter
from webvideo.logging.handlers import JSONFormatter

# Map of lowercase level names to logging module constants.
LEVEL_MAP: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 3


def configure_logging(
    level: str = "warning",
    file: Path | None = None,
    json_format: bool = False,
    *,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> None:
    """Configure root logging for the command line tool.

    Logs go to a rotating file when file is given, else to stderr. If the
    file cannot be opened, stderr is used instead.

    Args:
        level: One of "debug", "info", "warning", "error".
        file: Optional log file path.
        json_format: Emit JSON lines instead of text.
        max_bytes: Size at which the log file rotates.
        backup_count: Number of rotated files to keep.
    """
    log_level = LEVEL_MAP.get(level.casefold(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        # output_tag is "[3f9c:ab12.webm] " when set, empty string otherwise
        formatter = logging.Formatter(
            "%(asctime)s - %(output_tag)s%(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    context_filter = OutputContextFilter()

    handler: logging.Handler | None = None
    if file is not None:
        try:
            file_path = file.expanduser()
            file_path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                file_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            # Log file unavailable - fall back to stderr
            sys.stderr.write(f"Warning: Could not open log file {file}: {e}\n")

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)

    handler.setLevel(log_level)
    handler.setFormatter(formatter)
    handler.addFilter(context_filter)
    root_logger.addHandler(handler)
