"""FFmpeg-based implementation of the Encoder protocol.

This module provides functions for constructing FFmpeg command-line arguments
from an EffectiveTranscodeConfig and an encoder that runs the command and
collects the output from stdout.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg invocation
from pathlib import Path

from webvideo.config.models import EffectiveTranscodeConfig, FrameSize
from webvideo.core.codecs import AUDIO_CODECS, CONTAINERS, VIDEO_CODECS
from webvideo.core.exceptions import EncoderError
from webvideo.encoder.interface import find_tool

logger = logging.getLogger(__name__)

DEFAULT_ENCODE_TIMEOUT = 3600

# Keep at most this much stderr in EncoderError diagnostics
MAX_DIAGNOSTIC_CHARS = 4000


def build_scale_filter(size: FrameSize) -> str:
    """Build a scale filter; an unset side keeps the aspect ratio.

    -2 keeps the computed side even, which most encoders require.
    """
    width = size.width if size.width is not None else -2
    height = size.height if size.height is not None else -2
    return f"scale={width}:{height}"


def build_video_args(config: EffectiveTranscodeConfig) -> list[str]:
    """Build FFmpeg video encoder arguments."""
    info = VIDEO_CODECS[config.video_codec]
    args = ["-c:v", info.encoder, *info.encoder_options]
    if config.video_quality is not None:
        args.extend(["-crf", f"{config.video_quality:g}"])

    frame_size = config.frame_size
    if frame_size is not None:
        args.extend(["-vf", build_scale_filter(frame_size)])
    return args


def build_audio_args(config: EffectiveTranscodeConfig) -> list[str]:
    """Build FFmpeg audio arguments; muted outputs drop the audio stream."""
    if config.is_muted:
        return ["-an"]

    info = AUDIO_CODECS[config.audio_codec]
    args = ["-c:a", info.encoder]
    if config.audio_quality is not None:
        args.extend([f"-{info.quality_flag}", f"{config.audio_quality:g}"])
    return args


def build_ffmpeg_command(
    ffmpeg: Path | str,
    input_path: Path,
    config: EffectiveTranscodeConfig,
) -> list[str]:
    """Build the complete FFmpeg command for one output.

    The output is written to stdout so the caller can cache the bytes
    without a temporary file.

    Args:
        ffmpeg: Path to the ffmpeg executable.
        input_path: Path to the source media file.
        config: Resolved output config.

    Returns:
        FFmpeg argv.
    """
    container_info = CONTAINERS[config.container]

    cmd = [
        str(ffmpeg),
        "-hide_banner",
        "-nostdin",
        "-loglevel",
        "error",
        "-i",
        str(input_path),
    ]
    cmd.extend(build_video_args(config))
    cmd.extend(build_audio_args(config))
    cmd.extend(["-f", config.container.value])
    cmd.extend(container_info.muxer_options)
    cmd.append("pipe:1")
    return cmd


class FFmpegEncoder:
    """ffmpeg-based implementation of the Encoder protocol."""

    def __init__(
        self,
        ffmpeg_path: Path | None = None,
        timeout: float = DEFAULT_ENCODE_TIMEOUT,
    ) -> None:
        """Initialize the encoder.

        Args:
            ffmpeg_path: Optional explicit path to ffmpeg. If not provided,
                ffmpeg is looked up on PATH.
            timeout: Seconds before an encode is abandoned.

        Raises:
            EncoderError: If ffmpeg is not available.
        """
        self._ffmpeg_path = find_tool("ffmpeg", ffmpeg_path)
        self._timeout = timeout

        if self._ffmpeg_path is None:
            raise EncoderError(
                "ffmpeg is not installed or not in PATH. "
                "Install ffmpeg or pass an explicit path."
            )

    def encode(self, input_path: Path, config: EffectiveTranscodeConfig) -> bytes:
        """Encode input_path and return the output bytes.

        Raises:
            EncoderError: If ffmpeg fails, times out, or produces nothing.
        """
        cmd = build_ffmpeg_command(self._ffmpeg_path, input_path, config)
        logger.debug("Running: %s", " ".join(cmd))

        try:
            result = subprocess.run(  # nosec B603 - argv built from fixed tables
                cmd,
                capture_output=True,
                check=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise EncoderError(
                f"ffmpeg timed out for {input_path} after {e.timeout}s"
            ) from e
        except subprocess.CalledProcessError as e:
            diagnostics = _decode_stderr(e.stderr)
            raise EncoderError(
                f"ffmpeg failed for {input_path} with exit code {e.returncode}",
                diagnostics=diagnostics,
            ) from e
        except OSError as e:
            raise EncoderError(f"Could not run ffmpeg: {e}") from e

        if not result.stdout:
            raise EncoderError(
                f"ffmpeg produced no output for {input_path}",
                diagnostics=_decode_stderr(result.stderr),
            )
        return result.stdout


def _decode_stderr(stderr: bytes | None) -> str:
    if not stderr:
        return ""
    text = stderr.decode("utf-8", errors="replace")
    return text[-MAX_DIAGNOSTIC_CHARS:]
