"""Encoder and media probe collaborators."""

from webvideo.encoder.ffmpeg import FFmpegEncoder, build_ffmpeg_command
from webvideo.encoder.ffprobe import FFprobeMediaProbe, parse_probe_output
from webvideo.encoder.interface import Encoder, MediaProbe, ProbeResult, find_tool

__all__ = [
    "Encoder",
    "FFmpegEncoder",
    "FFprobeMediaProbe",
    "MediaProbe",
    "ProbeResult",
    "build_ffmpeg_command",
    "find_tool",
    "parse_probe_output",
]
