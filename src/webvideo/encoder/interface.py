"""Encoder and MediaProbe interfaces.

The build pipeline depends only on these protocols; the ffmpeg and ffprobe
adapters in this package are the default implementations.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from webvideo.config.models import EffectiveTranscodeConfig


@dataclass(frozen=True)
class ProbeResult:
    """Stream metadata reported for encoded bytes."""

    width: int | None
    """Width of the first video stream, if any."""

    height: int | None
    """Height of the first video stream, if any."""

    video_codec: str | None = None
    """Codec name of the first video stream, as the tool reports it."""

    audio_codec: str | None = None
    """Codec name of the first audio stream, or None if there is none."""

    @property
    def has_audio(self) -> bool:
        return self.audio_codec is not None


class Encoder(Protocol):
    """Protocol for encoder implementations."""

    def encode(self, input_path: Path, config: EffectiveTranscodeConfig) -> bytes:
        """Encode the input according to config.

        Args:
            input_path: Path to the source media file.
            config: Resolved output config.

        Returns:
            The encoded output bytes.

        Raises:
            EncoderError: If encoding fails.
        """
        ...


class MediaProbe(Protocol):
    """Protocol for inspecting encoded media."""

    def probe(self, data: bytes) -> ProbeResult:
        """Report stream metadata for encoded bytes.

        Raises:
            MediaProbeError: If the bytes cannot be inspected.
        """
        ...


def find_tool(name: str, explicit: Path | None = None) -> Path | None:
    """Locate an external tool.

    Args:
        name: Executable name (e.g. "ffmpeg").
        explicit: Configured path, used as-is when given.

    Returns:
        Path to the tool, or None if it is not on PATH.
    """
    if explicit is not None:
        return explicit
    found = shutil.which(name)
    return Path(found) if found else None
