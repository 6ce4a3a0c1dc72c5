"""Option and output data models.

This module defines the records that flow through option resolution:

- OutputSpec: one requested output, possibly leaving codecs to defaults
- OptionsLayer: one configuration source (defaults, static config, or
  override string) where None means "not defined in this layer"
- GlobalOptions: the merged build-wide scalar options
- EffectiveTranscodeConfig: a fully resolved, validated output encoding
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from webvideo.core.codecs import (
    CONTAINERS,
    AudioCodec,
    Container,
    VideoCodec,
    mime_type_for,
)
from webvideo.core.exceptions import InvalidSizeError


class QualitySentinel(Enum):
    """Marker for "use the codec's default quality"."""

    DEFAULT = "default"


DEFAULT_QUALITY = QualitySentinel.DEFAULT

# A requested quality: a number, the DEFAULT_QUALITY sentinel, or None (unset)
Quality = float | QualitySentinel | None


@dataclass(frozen=True)
class OutputSpec:
    """One requested output.

    Codec fields left as None resolve to the container's default codec.
    audio_codec may be AudioCodec.MUTED to request an output without audio.
    """

    container: Container
    video_codec: VideoCodec | None = None
    video_quality: Quality = None
    audio_codec: AudioCodec | None = None
    audio_quality: Quality = None

    def describe(self) -> str:
        """Render the spec in override-string form (e.g. "mp4/h.265@40/aac")."""
        parts = [self.container.value]
        for codec, quality in (
            (self.video_codec, self.video_quality),
            (self.audio_codec, self.audio_quality),
        ):
            name = codec.value if codec is not None else "default"
            if isinstance(quality, QualitySentinel):
                name += "@default"
            elif quality is not None:
                name += f"@{quality:g}"
            parts.append(name)
        return "/".join(parts)


@dataclass(frozen=True)
class FrameSize:
    """Target output dimensions parsed from the size option.

    One side may be None, meaning "scale to keep the aspect ratio".
    """

    width: int | None
    height: int | None

    @classmethod
    def parse(cls, text: str) -> FrameSize:
        """Parse "640x360", "640x?" or "?x360".

        Raises:
            InvalidSizeError: If text is not in one of those forms.
        """
        width_text, sep, height_text = text.partition("x")
        if not sep:
            raise InvalidSizeError(text)
        width = None if width_text == "?" else _parse_dimension(width_text, text)
        height = None if height_text == "?" else _parse_dimension(height_text, text)
        if width is None and height is None:
            raise InvalidSizeError(text)
        return cls(width=width, height=height)


def _parse_dimension(value: str, text: str) -> int:
    if not value.isdigit() or int(value) == 0:
        raise InvalidSizeError(text)
    return int(value)


@dataclass(frozen=True)
class GlobalOptions:
    """Build-wide options after all layers are merged."""

    file_name_template: str
    output_path: str
    public_path: str | None
    mute: bool
    size: str | None
    cache: bool
    es_module: bool

    @property
    def effective_public_path(self) -> str:
        """Public path, falling back to the output path when unset."""
        return self.public_path or self.output_path


@dataclass(frozen=True)
class OptionsLayer:
    """Option values from a single configuration source.

    None values indicate "not specified in this source" and will not
    override values from lower-precedence sources.
    """

    file_name_template: str | None = None
    output_files: tuple[OutputSpec, ...] | None = None
    output_path: str | None = None
    public_path: str | None = None
    mute: bool | None = None
    size: str | None = None
    cache: bool | None = None
    es_module: bool | None = None


DEFAULT_FILE_NAME_TEMPLATE = "[originalFileName]-[hash]"

DEFAULT_OUTPUT_FILES: tuple[OutputSpec, ...] = (
    OutputSpec(container=Container.MP4, video_codec=VideoCodec.H264),
    OutputSpec(container=Container.WEBM, video_codec=VideoCodec.VP9),
)

DEFAULT_OPTIONS = OptionsLayer(
    file_name_template=DEFAULT_FILE_NAME_TEMPLATE,
    output_files=DEFAULT_OUTPUT_FILES,
    output_path="/",
    public_path=None,
    mute=False,
    size=None,
    cache=True,
    es_module=False,
)


@dataclass(frozen=True)
class EffectiveTranscodeConfig:
    """A fully resolved description of one output encoding.

    Invariants (enforced by the resolver):
        video_codec is supported by container.
        audio_codec is supported by container, or is AudioCodec.MUTED.
        audio_quality is None when audio_codec is AudioCodec.MUTED.
    """

    container: Container
    video_codec: VideoCodec
    video_quality: float | None
    audio_codec: AudioCodec
    audio_quality: float | None
    mute: bool
    size: str | None
    cache: bool

    @property
    def is_muted(self) -> bool:
        return self.audio_codec is AudioCodec.MUTED

    @property
    def file_extension(self) -> str:
        return CONTAINERS[self.container].file_extension

    @property
    def mime_type(self) -> str:
        return mime_type_for(self.container, self.video_codec)

    @property
    def frame_size(self) -> FrameSize | None:
        return FrameSize.parse(self.size) if self.size else None
