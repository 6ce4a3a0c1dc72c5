"""Container and codec registry.

This module is the single source of truth for codec knowledge in webvideo:
- The closed sets of containers, video codecs, and audio codecs
- Encoder identifiers, MIME tokens, and quality ranges per codec
- Container compatibility matrices and container defaults
- Validation of (container, video codec, audio codec) combinations

Every registry is an immutable mapping keyed by enum member, and
_check_registry_coverage() runs at import time so a variant added to an
enum without a registry entry fails loudly instead of missing silently.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from webvideo.core.exceptions import IncompatibleCodecError, UnknownContainerError

# =============================================================================
# Variant Sets
# =============================================================================


class Container(Enum):
    """Output container formats."""

    MP4 = "mp4"
    WEBM = "webm"


class VideoCodec(Enum):
    """Video codecs that can be requested for an output."""

    AV1 = "av1"
    H264 = "h.264"
    H265 = "h.265"
    VP8 = "vp8"
    VP9 = "vp9"


class AudioCodec(Enum):
    """Audio codecs that can be requested for an output.

    MUTED is a sentinel for "no audio track". It is not a real codec: it has
    no registry entry, is never listed in a container's supported set, and
    cannot be requested by name in an override string.
    """

    AAC = "aac"
    FLAC = "flac"
    OPUS = "opus"
    VORBIS = "vorbis"
    MUTED = "muted"


# =============================================================================
# Registry Records
# =============================================================================


@dataclass(frozen=True)
class QualityRange:
    """Inclusive range of accepted quality values for a codec."""

    minimum: float
    maximum: float

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum

    def as_tuple(self) -> tuple[float, float]:
        return (self.minimum, self.maximum)


@dataclass(frozen=True)
class VideoCodecInfo:
    """Encoder details for a video codec.

    Quality is the encoder's constant rate factor; lower is better.
    """

    encoder: str
    mime_codec: str | None
    quality_range: QualityRange
    default_quality: float
    encoder_options: tuple[str, ...] = ()


@dataclass(frozen=True)
class AudioCodecInfo:
    """Encoder details for an audio codec."""

    encoder: str
    quality_flag: str
    quality_range: QualityRange
    default_quality: float


@dataclass(frozen=True)
class ContainerInfo:
    """Container format details and its codec compatibility matrix."""

    file_extension: str
    mime_type: str
    default_video_codec: VideoCodec
    default_audio_codec: AudioCodec
    supported_video_codecs: frozenset[VideoCodec]
    supported_audio_codecs: frozenset[AudioCodec]
    muxer_options: tuple[str, ...] = ()


# =============================================================================
# Registries
# =============================================================================

VIDEO_CODECS: Mapping[VideoCodec, VideoCodecInfo] = MappingProxyType(
    {
        # https://trac.ffmpeg.org/wiki/Encode/AV1
        VideoCodec.AV1: VideoCodecInfo(
            encoder="libaom-av1",
            mime_codec="av01",
            quality_range=QualityRange(0, 63),
            default_quality=25,
            encoder_options=(
                "-cpu-used", "8",
                "-b:v", "0",
                "-row-mt", "1",
                "-tile-columns", "1",
                "-tile-rows", "1",
            ),
        ),
        # https://trac.ffmpeg.org/wiki/Encode/H.264
        # No MIME token: the codecs parameter for h.264 is profile-specific and
        # every browser plays h.264 anyway.
        VideoCodec.H264: VideoCodecInfo(
            encoder="libx264",
            mime_codec=None,
            quality_range=QualityRange(0, 51),
            default_quality=23,
            encoder_options=("-preset", "medium"),
        ),
        # https://trac.ffmpeg.org/wiki/Encode/H.265
        # hvc1 tag is required for playback on Apple devices.
        VideoCodec.H265: VideoCodecInfo(
            encoder="libx265",
            mime_codec="hvc1",
            quality_range=QualityRange(0, 51),
            default_quality=28,
            encoder_options=("-tag:v", "hvc1", "-preset", "medium"),
        ),
        # https://trac.ffmpeg.org/wiki/Encode/VP8
        VideoCodec.VP8: VideoCodecInfo(
            encoder="libvpx",
            mime_codec="vp8",
            quality_range=QualityRange(4, 63),
            default_quality=10,
            encoder_options=("-deadline", "good", "-cpu-used", "2"),
        ),
        # https://trac.ffmpeg.org/wiki/Encode/VP9
        VideoCodec.VP9: VideoCodecInfo(
            encoder="libvpx-vp9",
            mime_codec="vp9",
            quality_range=QualityRange(4, 63),
            default_quality=32,
            encoder_options=(
                "-b:v", "0",
                "-deadline", "good",
                "-cpu-used", "2",
                "-row-mt", "1",
                "-tile-columns", "1",
                "-tile-rows", "1",
            ),
        ),
    }
)

AUDIO_CODECS: Mapping[AudioCodec, AudioCodecInfo] = MappingProxyType(
    {
        # https://trac.ffmpeg.org/wiki/Encode/AAC
        AudioCodec.AAC: AudioCodecInfo(
            encoder="aac",
            quality_flag="q:a",
            quality_range=QualityRange(0.1, 2),
            default_quality=1,
        ),
        AudioCodec.FLAC: AudioCodecInfo(
            encoder="flac",
            quality_flag="compression_level",
            quality_range=QualityRange(0, 12),
            default_quality=5,
        ),
        AudioCodec.OPUS: AudioCodecInfo(
            encoder="libopus",
            quality_flag="compression_level",
            quality_range=QualityRange(0, 10),
            default_quality=7,
        ),
        AudioCodec.VORBIS: AudioCodecInfo(
            encoder="libvorbis",
            quality_flag="q:a",
            quality_range=QualityRange(-1, 10),
            default_quality=3,
        ),
    }
)

CONTAINERS: Mapping[Container, ContainerInfo] = MappingProxyType(
    {
        Container.MP4: ContainerInfo(
            file_extension="mp4",
            mime_type="video/mp4",
            default_video_codec=VideoCodec.H264,
            default_audio_codec=AudioCodec.AAC,
            supported_video_codecs=frozenset(
                {VideoCodec.AV1, VideoCodec.H264, VideoCodec.H265}
            ),
            supported_audio_codecs=frozenset({AudioCodec.AAC, AudioCodec.FLAC}),
            # Fragmented output so the muxer can write to a pipe
            muxer_options=("-movflags", "frag_keyframe+empty_moov"),
        ),
        Container.WEBM: ContainerInfo(
            file_extension="webm",
            mime_type="video/webm",
            default_video_codec=VideoCodec.VP9,
            default_audio_codec=AudioCodec.OPUS,
            supported_video_codecs=frozenset(
                {VideoCodec.AV1, VideoCodec.VP8, VideoCodec.VP9}
            ),
            supported_audio_codecs=frozenset({AudioCodec.OPUS, AudioCodec.VORBIS}),
        ),
    }
)

REAL_AUDIO_CODECS: frozenset[AudioCodec] = frozenset(
    codec for codec in AudioCodec if codec is not AudioCodec.MUTED
)

_CONTAINERS_BY_NAME: Mapping[str, Container] = MappingProxyType(
    {container.value: container for container in Container}
)
_VIDEO_CODECS_BY_NAME: Mapping[str, VideoCodec] = MappingProxyType(
    {codec.value: codec for codec in VideoCodec}
)
_AUDIO_CODECS_BY_NAME: Mapping[str, AudioCodec] = MappingProxyType(
    {codec.value: codec for codec in REAL_AUDIO_CODECS}
)


def _check_registry_coverage() -> None:
    """Fail at import time if any variant is missing from its registry."""
    missing: list[str] = []
    missing.extend(f"container {c.value}" for c in Container if c not in CONTAINERS)
    missing.extend(
        f"video codec {c.value}" for c in VideoCodec if c not in VIDEO_CODECS
    )
    missing.extend(
        f"audio codec {c.value}" for c in REAL_AUDIO_CODECS if c not in AUDIO_CODECS
    )
    for container, info in CONTAINERS.items():
        if AudioCodec.MUTED in info.supported_audio_codecs:
            missing.append(f"muted sentinel listed for {container.value}")
        if info.default_video_codec not in info.supported_video_codecs:
            missing.append(f"default video codec for {container.value}")
        if info.default_audio_codec not in info.supported_audio_codecs:
            missing.append(f"default audio codec for {container.value}")
    if missing:
        raise RuntimeError(f"Codec registry is inconsistent: {', '.join(missing)}")


_check_registry_coverage()


# =============================================================================
# Name Lookup
# =============================================================================


def parse_container(name: str) -> Container:
    """Look up a container by its user-facing name.

    Raises:
        UnknownContainerError: If the name is not a known container.
    """
    container = _CONTAINERS_BY_NAME.get(name)
    if container is None:
        raise UnknownContainerError(name)
    return container


def find_video_codec(name: str) -> VideoCodec | None:
    """Return the video codec with this exact name, or None."""
    return _VIDEO_CODECS_BY_NAME.get(name)


def find_audio_codec(name: str) -> AudioCodec | None:
    """Return the real audio codec with this exact name, or None.

    The muted sentinel is never returned.
    """
    return _AUDIO_CODECS_BY_NAME.get(name)


# =============================================================================
# Compatibility Table
# =============================================================================


def supported_video_codecs(container: Container) -> frozenset[VideoCodec]:
    return CONTAINERS[container].supported_video_codecs


def supported_audio_codecs(container: Container) -> frozenset[AudioCodec]:
    return CONTAINERS[container].supported_audio_codecs


def default_video_codec(container: Container) -> VideoCodec:
    return CONTAINERS[container].default_video_codec


def default_audio_codec(container: Container) -> AudioCodec:
    return CONTAINERS[container].default_audio_codec


def validate(
    container: Container, video_codec: VideoCodec, audio_codec: AudioCodec
) -> None:
    """Check that both codecs can be stored in the container.

    The muted sentinel is always accepted for audio.

    Raises:
        IncompatibleCodecError: On the first codec (video, then audio) that
            the container does not support.
    """
    info = CONTAINERS[container]
    if video_codec not in info.supported_video_codecs:
        raise IncompatibleCodecError(container.value, video_codec.value, "video")
    if audio_codec is AudioCodec.MUTED:
        return
    if audio_codec not in info.supported_audio_codecs:
        raise IncompatibleCodecError(container.value, audio_codec.value, "audio")


def mime_type_for(container: Container, video_codec: VideoCodec) -> str:
    """Build the MIME type for a <source> element.

    Adds a codecs parameter when the video codec has a MIME token, so a
    browser that supports the container but not the codec can skip it.

    Example:
        mime_type_for(Container.WEBM, VideoCodec.VP9)  # 'video/webm;codecs="vp9"'
    """
    mime_type = CONTAINERS[container].mime_type
    mime_codec = VIDEO_CODECS[video_codec].mime_codec
    if mime_codec:
        return f'{mime_type};codecs="{mime_codec}"'
    return mime_type
