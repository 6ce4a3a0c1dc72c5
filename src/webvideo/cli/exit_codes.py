"""Process exit codes shared by every webvideo command.

Codes are grouped by tens: 1x for bad options or configuration, 2x for
missing files, 3x for missing external tools, 4x for failures while
working.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit status of a webvideo command."""

    SUCCESS = 0
    INTERRUPTED = 2

    # Override string, static config, or resolution rejected
    CONFIG_ERROR = 11

    # Input or config file missing
    TARGET_NOT_FOUND = 20

    # ffmpeg or ffprobe not found
    TOOL_NOT_AVAILABLE = 30

    # Encoding, probing, or writing outputs failed
    OPERATION_FAILED = 40
