"""FFprobe-based implementation of the MediaProbe protocol."""

from __future__ import annotations

import json
import logging
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path
from typing import Any

from webvideo.core.exceptions import MediaProbeError
from webvideo.encoder.interface import ProbeResult, find_tool

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 60

_BASE_ARGS = ("-v", "error", "-print_format", "json", "-show_streams")


def parse_probe_output(data: dict[str, Any]) -> ProbeResult:
    """Pick the first video and audio stream out of ffprobe JSON.

    Raises:
        MediaProbeError: If the output has no "streams" list.
    """
    streams = data.get("streams")
    if not isinstance(streams, list):
        raise MediaProbeError(
            "Missing 'streams' in ffprobe output. "
            "Data may be corrupted or not a valid media file."
        )

    video: dict[str, Any] | None = None
    audio: dict[str, Any] | None = None
    for stream in streams:
        codec_type = stream.get("codec_type")
        if codec_type == "video" and video is None:
            video = stream
        elif codec_type == "audio" and audio is None:
            audio = stream

    width = height = None
    if video is not None:
        width = _as_int(video.get("width"))
        height = _as_int(video.get("height"))

    return ProbeResult(
        width=width,
        height=height,
        video_codec=video.get("codec_name") if video else None,
        audio_codec=audio.get("codec_name") if audio else None,
    )


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class FFprobeMediaProbe:
    """ffprobe-based implementation of the MediaProbe protocol."""

    def __init__(
        self,
        ffprobe_path: Path | None = None,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        """Initialize the probe.

        Args:
            ffprobe_path: Optional explicit path to ffprobe. If not provided,
                ffprobe is looked up on PATH.
            timeout: Seconds before a probe is abandoned.

        Raises:
            MediaProbeError: If ffprobe is not available.
        """
        self._ffprobe_path = find_tool("ffprobe", ffprobe_path)
        self._timeout = timeout

        if self._ffprobe_path is None:
            raise MediaProbeError(
                "ffprobe is not installed or not in PATH. "
                "Install ffmpeg or pass an explicit path."
            )

    def probe(self, data: bytes) -> ProbeResult:
        """Inspect encoded bytes piped to ffprobe's stdin."""
        output = self._run(["-i", "pipe:0"], stdin=data, label="<bytes>")
        return parse_probe_output(output)

    def probe_file(self, path: Path) -> ProbeResult:
        """Inspect a media file on disk.

        Raises:
            MediaProbeError: If the file does not exist or cannot be probed.
        """
        if not path.exists():
            raise MediaProbeError(f"File not found: {path}")
        output = self._run([str(path)], stdin=None, label=str(path))
        return parse_probe_output(output)

    def _run(self, target: list[str], stdin: bytes | None, label: str) -> dict:
        cmd = [str(self._ffprobe_path), *_BASE_ARGS, *target]
        try:
            result = subprocess.run(  # nosec B603 - ffprobe path is resolved
                cmd,
                input=stdin,
                capture_output=True,
                check=True,
                timeout=self._timeout,
            )
            return json.loads(result.stdout.decode("utf-8", errors="replace"))
        except subprocess.TimeoutExpired as e:
            raise MediaProbeError(
                f"ffprobe timed out for {label} after {e.timeout}s"
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
            raise MediaProbeError(f"ffprobe failed for {label}: {stderr or e}") from e
        except json.JSONDecodeError as e:
            raise MediaProbeError(f"Invalid ffprobe output for {label}: {e}") from e
        except OSError as e:
            raise MediaProbeError(f"Could not run ffprobe: {e}") from e
