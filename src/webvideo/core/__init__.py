"""Core package: codec registry and exception hierarchy.

Nothing in this package depends on other webvideo packages.
"""

from webvideo.core.codecs import (
    AUDIO_CODECS,
    CONTAINERS,
    VIDEO_CODECS,
    AudioCodec,
    AudioCodecInfo,
    Container,
    ContainerInfo,
    QualityRange,
    VideoCodec,
    VideoCodecInfo,
    default_audio_codec,
    default_video_codec,
    find_audio_codec,
    find_video_codec,
    mime_type_for,
    parse_container,
    supported_audio_codecs,
    supported_video_codecs,
    validate,
)
from webvideo.core.exceptions import (
    CacheIOError,
    ConfigurationError,
    EmptyOutputListError,
    EncoderError,
    IncompatibleCodecError,
    InvalidBooleanError,
    InvalidQualityError,
    InvalidSizeError,
    MediaProbeError,
    NameFormatError,
    StaticConfigError,
    UnknownContainerError,
    UnsupportedOptionsError,
    WebVideoError,
)

__all__ = [
    # Codecs
    "AUDIO_CODECS",
    "CONTAINERS",
    "VIDEO_CODECS",
    "AudioCodec",
    "AudioCodecInfo",
    "Container",
    "ContainerInfo",
    "QualityRange",
    "VideoCodec",
    "VideoCodecInfo",
    "default_audio_codec",
    "default_video_codec",
    "find_audio_codec",
    "find_video_codec",
    "mime_type_for",
    "parse_container",
    "supported_audio_codecs",
    "supported_video_codecs",
    "validate",
    # Exceptions
    "CacheIOError",
    "ConfigurationError",
    "EmptyOutputListError",
    "EncoderError",
    "IncompatibleCodecError",
    "InvalidBooleanError",
    "InvalidQualityError",
    "InvalidSizeError",
    "MediaProbeError",
    "NameFormatError",
    "StaticConfigError",
    "UnknownContainerError",
    "UnsupportedOptionsError",
    "WebVideoError",
]
