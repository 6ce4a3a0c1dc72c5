"""Resolution of option layers into effective transcode configs."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from webvideo.config.builder import OptionsBuilder
from webvideo.config.models import (
    DEFAULT_OPTIONS,
    EffectiveTranscodeConfig,
    FrameSize,
    GlobalOptions,
    OptionsLayer,
    OutputSpec,
    Quality,
    QualitySentinel,
)
from webvideo.core.codecs import (
    AUDIO_CODECS,
    VIDEO_CODECS,
    AudioCodec,
    QualityRange,
    default_audio_codec,
    default_video_codec,
    validate,
)
from webvideo.core.exceptions import EmptyOutputListError, InvalidQualityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedBuild:
    """Merged options and the ordered outputs they produce."""

    options: GlobalOptions
    configs: tuple[EffectiveTranscodeConfig, ...]


def _resolve_quality(
    requested: Quality,
    codec_name: str,
    quality_range: QualityRange,
    default: float,
) -> float:
    if requested is None or isinstance(requested, QualitySentinel):
        return default
    if not quality_range.contains(requested):
        raise InvalidQualityError(requested, codec_name, quality_range.as_tuple())
    return float(requested)


def resolve_output(
    spec: OutputSpec, options: GlobalOptions, *, input_has_audio: bool = True
) -> EffectiveTranscodeConfig:
    """Resolve one output spec against the merged options.

    Args:
        spec: Requested output, possibly with codecs left to defaults.
        options: Merged build-wide options.
        input_has_audio: False when the input asset is known to have no
            audio stream; the output is then muted.

    Returns:
        Fully validated EffectiveTranscodeConfig.

    Raises:
        IncompatibleCodecError: If a codec is not supported by the container.
        InvalidQualityError: If a quality is outside the codec's range.
    """
    video_codec = spec.video_codec or default_video_codec(spec.container)
    audio_codec = spec.audio_codec or default_audio_codec(spec.container)

    # Explicit audio codecs are checked even if the output ends up muted
    validate(spec.container, video_codec, audio_codec)

    video_info = VIDEO_CODECS[video_codec]
    video_quality = _resolve_quality(
        spec.video_quality,
        video_codec.value,
        video_info.quality_range,
        video_info.default_quality,
    )

    muted = options.mute or not input_has_audio or audio_codec is AudioCodec.MUTED
    if muted:
        audio_codec = AudioCodec.MUTED
        audio_quality = None
    else:
        audio_info = AUDIO_CODECS[audio_codec]
        audio_quality = _resolve_quality(
            spec.audio_quality,
            audio_codec.value,
            audio_info.quality_range,
            audio_info.default_quality,
        )

    return EffectiveTranscodeConfig(
        container=spec.container,
        video_codec=video_codec,
        video_quality=video_quality,
        audio_codec=audio_codec,
        audio_quality=audio_quality,
        mute=muted,
        size=options.size,
        cache=options.cache,
    )


def resolve_build(
    defaults: OptionsLayer = DEFAULT_OPTIONS,
    static: OptionsLayer | None = None,
    overrides: OptionsLayer | None = None,
    *,
    input_has_audio: bool = True,
) -> ResolvedBuild:
    """Merge option layers and resolve every requested output.

    Precedence is defaults < static < overrides for each scalar option. The
    output list comes whole from the highest layer that defines a non-empty
    one. Resolution is fail-fast: the first invalid output raises and no
    configs are returned.

    Args:
        defaults: Built-in defaults layer.
        static: Layer from the static build configuration, if any.
        overrides: Layer parsed from the asset's override string, if any.
        input_has_audio: False when the input is known to have no audio.

    Returns:
        ResolvedBuild with merged options and configs in list order.

    Raises:
        ConfigurationError: On the first invalid output.
        InvalidSizeError: If the size option is malformed.
        EmptyOutputListError: If no layer yields any outputs.
    """
    builder = OptionsBuilder()
    for layer in (defaults, static, overrides):
        if layer is not None:
            builder.apply(layer)

    options = builder.build()
    if options.size is not None:
        FrameSize.parse(options.size)

    specs = builder.output_files
    if not specs:
        raise EmptyOutputListError()

    configs = tuple(
        resolve_output(spec, options, input_has_audio=input_has_audio)
        for spec in specs
    )
    logger.debug(
        "Resolved %d output(s): %s",
        len(configs),
        ", ".join(spec.describe() for spec in specs),
    )
    return ResolvedBuild(options=options, configs=configs)
