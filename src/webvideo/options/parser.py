"""Override string parsing.

An override string is a URL query string attached to an asset reference,
for example::

    ?outputFiles=mp4/h.265@40/aac,webm&mute&fileNameTemplate=[hash]

This module turns it into an OptionsLayer holding only the keys that were
present. Parsing never raises for user input: every problem is collected
into an OverrideParseResult so a caller can report all of them at once.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, replace
from functools import reduce
from urllib.parse import parse_qsl

from webvideo.config.models import DEFAULT_QUALITY, OptionsLayer, OutputSpec, Quality
from webvideo.core.codecs import (
    AudioCodec,
    VideoCodec,
    find_audio_codec,
    find_video_codec,
    parse_container,
)
from webvideo.core.exceptions import (
    ConfigurationError,
    InvalidBooleanError,
    InvalidQualityError,
    UnsupportedOptionsError,
)
from webvideo.options.errors import (
    DuplicateAudioCodecError,
    DuplicateVideoCodecError,
    TooManyCodecTokensError,
    UnknownCodecNameError,
)

logger = logging.getLogger(__name__)

# Query keys mapped to OptionsLayer field names
STRING_KEYS: dict[str, str] = {
    "fileNameTemplate": "file_name_template",
    "outputPath": "output_path",
    "publicPath": "public_path",
    "size": "size",
}
BOOLEAN_KEYS: dict[str, str] = {
    "mute": "mute",
    "cache": "cache",
    "esModule": "es_module",
}
OUTPUT_FILES_KEY = "outputFiles"

SUPPORTED_KEYS: frozenset[str] = frozenset(
    {*STRING_KEYS, *BOOLEAN_KEYS, OUTPUT_FILES_KEY}
)

DEFAULT_TOKEN = "default"
MAX_CODEC_TOKENS = 2

# Plain decimal with optional sign and exponent; no "_", padding, nan or inf
_NUMBER_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


# =============================================================================
# Scalar values
# =============================================================================


def parse_boolean(key: str, value: str) -> bool:
    """Parse a boolean option value.

    A bare key (empty value) or "true" is True, "false" is False.

    Raises:
        InvalidBooleanError: For any other value.
    """
    if value in ("", "true"):
        return True
    if value == "false":
        return False
    raise InvalidBooleanError(key, value)


def parse_quality(text: str) -> Quality:
    """Parse the text after "@" in a codec token.

    Returns:
        A float, or DEFAULT_QUALITY for the literal "default".

    Raises:
        InvalidQualityError: If the text is not a finite real number.
    """
    if text == DEFAULT_TOKEN:
        return DEFAULT_QUALITY
    if not _NUMBER_PATTERN.fullmatch(text):
        raise InvalidQualityError(text)
    value = float(text)
    # Overflow such as "1e999"
    if not math.isfinite(value):
        raise InvalidQualityError(text)
    return value


# =============================================================================
# Output descriptors
# =============================================================================


@dataclass(frozen=True)
class _Slot:
    """An occupied codec slot. codec None means "default" was requested."""

    codec: VideoCodec | AudioCodec | None
    quality: Quality


@dataclass(frozen=True)
class CodecSlots:
    """Video and audio slots filled left to right by codec tokens."""

    video: _Slot | None = None
    audio: _Slot | None = None


@dataclass(frozen=True)
class _CodecToken:
    name: str
    quality: Quality
    position: int


def _fill_slot(
    slots: CodecSlots, token: _CodecToken, source: str
) -> CodecSlots:
    video_codec = find_video_codec(token.name)
    if video_codec is not None:
        if slots.video is not None:
            raise DuplicateVideoCodecError(source, token.position)
        return replace(slots, video=_Slot(video_codec, token.quality))

    audio_codec = find_audio_codec(token.name)
    if audio_codec is not None:
        if slots.audio is not None:
            raise DuplicateAudioCodecError(source, token.position)
        return replace(slots, audio=_Slot(audio_codec, token.quality))

    if token.name == DEFAULT_TOKEN:
        if slots.video is None:
            return replace(slots, video=_Slot(None, token.quality))
        if slots.audio is None:
            return replace(slots, audio=_Slot(None, token.quality))
        raise TooManyCodecTokensError(source, token.position)

    raise UnknownCodecNameError(token.name, source, token.position)


def _split_codec_token(text: str, position: int) -> _CodecToken:
    name, sep, quality_text = text.partition("@")
    quality = parse_quality(quality_text) if sep else None
    return _CodecToken(name=name, quality=quality, position=position)


def parse_output_spec(descriptor: str) -> OutputSpec:
    """Parse a single output descriptor such as "webm/vp9@30/opus".

    Args:
        descriptor: container name followed by up to two codec tokens,
            separated by "/".

    Returns:
        OutputSpec with unfilled codec slots left as None.

    Raises:
        UnknownContainerError: If the container name is not known.
        TooManyCodecTokensError: If more than two codec tokens are given.
        UnknownCodecNameError: If a token names no known codec.
        DuplicateVideoCodecError: If two video codecs are given.
        DuplicateAudioCodecError: If two audio codecs are given.
        InvalidQualityError: If a quality is not a number or "default".
    """
    container_name, *codec_texts = descriptor.split("/")
    container = parse_container(container_name)

    if len(codec_texts) > MAX_CODEC_TOKENS:
        extra_at = len("/".join([container_name, *codec_texts[:MAX_CODEC_TOKENS]]))
        raise TooManyCodecTokensError(descriptor, extra_at + 1)

    tokens = []
    position = len(container_name) + 1
    for text in codec_texts:
        tokens.append(_split_codec_token(text, position))
        position += len(text) + 1

    slots = reduce(
        lambda acc, token: _fill_slot(acc, token, descriptor), tokens, CodecSlots()
    )

    return OutputSpec(
        container=container,
        video_codec=slots.video.codec if slots.video else None,
        video_quality=slots.video.quality if slots.video else None,
        audio_codec=slots.audio.codec if slots.audio else None,
        audio_quality=slots.audio.quality if slots.audio else None,
    )


def parse_output_specs(
    value: str,
) -> tuple[tuple[OutputSpec, ...], list[ConfigurationError]]:
    """Parse a comma-separated list of output descriptors.

    Returns:
        Tuple of (parsed specs, errors in document order). A descriptor
        with an error contributes no spec.
    """
    specs: list[OutputSpec] = []
    errors: list[ConfigurationError] = []
    for descriptor in value.split(","):
        try:
            specs.append(parse_output_spec(descriptor.strip()))
        except ConfigurationError as e:
            errors.append(e)
    return tuple(specs), errors


# =============================================================================
# Override string
# =============================================================================


@dataclass(frozen=True)
class OverrideParseResult:
    """Result of parsing an override string.

    Attributes:
        layer: Options that parsed successfully; absent keys stay None.
        errors: Every problem found, unsupported keys aggregated into one.
    """

    layer: OptionsLayer
    errors: tuple[ConfigurationError, ...] = ()

    @property
    def success(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise the most relevant error, if any.

        The aggregated unsupported-options error is preferred so a user sees
        every mistyped key at once; otherwise the first error in document
        order is raised.
        """
        for error in self.errors:
            if isinstance(error, UnsupportedOptionsError):
                raise error
        if self.errors:
            raise self.errors[0]


def parse_override_string(query: str) -> OverrideParseResult:
    """Parse an override string into a sparse options layer.

    Args:
        query: URL query string, with or without the leading "?".

    Returns:
        OverrideParseResult holding the layer and any errors.
    """
    pairs = parse_qsl(query.removeprefix("?"), keep_blank_values=True)

    fields: dict[str, object] = {}
    errors: list[ConfigurationError] = []
    unsupported: list[str] = []

    for key, value in pairs:
        if key in STRING_KEYS:
            fields[STRING_KEYS[key]] = value
        elif key in BOOLEAN_KEYS:
            try:
                fields[BOOLEAN_KEYS[key]] = parse_boolean(key, value)
            except InvalidBooleanError as e:
                errors.append(e)
        elif key == OUTPUT_FILES_KEY:
            specs, spec_errors = parse_output_specs(value)
            if spec_errors:
                errors.extend(spec_errors)
            else:
                fields["output_files"] = specs
        elif key not in unsupported:
            unsupported.append(key)

    if unsupported:
        errors.insert(0, UnsupportedOptionsError(tuple(unsupported), source=query))

    if errors:
        logger.debug("Override string %r has %d error(s)", query, len(errors))

    return OverrideParseResult(layer=OptionsLayer(**fields), errors=tuple(errors))
