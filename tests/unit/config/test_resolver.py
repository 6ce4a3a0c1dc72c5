"""Tests for option resolution."""

from __future__ import annotations

import pytest

from webvideo.config.loader import load_static_config_from_dict
from webvideo.config.models import (
    DEFAULT_OPTIONS,
    DEFAULT_QUALITY,
    FrameSize,
    OptionsLayer,
    OutputSpec,
)
from webvideo.config.resolver import resolve_build, resolve_output
from webvideo.core.codecs import AudioCodec, Container, VideoCodec
from webvideo.core.exceptions import (
    EmptyOutputListError,
    IncompatibleCodecError,
    InvalidQualityError,
    InvalidSizeError,
)
from webvideo.options.parser import parse_output_spec


def _outputs(*descriptors: str) -> OptionsLayer:
    return OptionsLayer(
        output_files=tuple(parse_output_spec(d) for d in descriptors)
    )


class TestResolveBuild:
    """Tests for resolve_build()."""

    def test_defaults_only(self) -> None:
        """Built-in defaults produce mp4/h.264/aac and webm/vp9/opus."""
        resolved = resolve_build()

        assert [
            (c.container, c.video_codec, c.audio_codec) for c in resolved.configs
        ] == [
            (Container.MP4, VideoCodec.H264, AudioCodec.AAC),
            (Container.WEBM, VideoCodec.VP9, AudioCodec.OPUS),
        ]
        assert resolved.configs[0].video_quality == 23.0
        assert resolved.configs[0].audio_quality == 1.0
        assert resolved.configs[1].video_quality == 32.0
        assert resolved.configs[1].audio_quality == 7.0

    def test_override_precedence(self) -> None:
        resolved = resolve_build(
            DEFAULT_OPTIONS,
            OptionsLayer(output_path="/a"),
            OptionsLayer(output_path="/b"),
        )

        assert resolved.options.output_path == "/b"

    def test_static_layer_used_when_no_override(self) -> None:
        resolved = resolve_build(DEFAULT_OPTIONS, OptionsLayer(output_path="/a"))

        assert resolved.options.output_path == "/a"

    def test_override_output_list_replaces(self) -> None:
        resolved = resolve_build(
            DEFAULT_OPTIONS, _outputs("mp4", "webm"), _outputs("webm/av1")
        )

        assert len(resolved.configs) == 1
        assert resolved.configs[0].video_codec is VideoCodec.AV1

    def test_output_order_preserved(self) -> None:
        resolved = resolve_build(
            overrides=_outputs("webm/vp8", "mp4/h.265", "webm/av1")
        )

        assert [c.video_codec for c in resolved.configs] == [
            VideoCodec.VP8,
            VideoCodec.H265,
            VideoCodec.AV1,
        ]

    def test_empty_output_list(self) -> None:
        with pytest.raises(EmptyOutputListError):
            resolve_build(OptionsLayer())

    def test_global_mute(self) -> None:
        """mute silences every output and drops its audio quality."""
        resolved = resolve_build(overrides=OptionsLayer(mute=True))

        for config in resolved.configs:
            assert config.audio_codec is AudioCodec.MUTED
            assert config.audio_quality is None
            assert config.mute is True
            assert config.is_muted

    def test_per_output_mute_from_static_config(self) -> None:
        static = load_static_config_from_dict(
            {
                "outputFiles": [
                    {"container": "mp4", "audioCodec": "muted"},
                    {"container": "webm", "audioCodec": "default"},
                ]
            }
        )

        resolved = resolve_build(DEFAULT_OPTIONS, static)

        mp4, webm = resolved.configs
        assert mp4.is_muted
        assert mp4.audio_quality is None
        assert webm.audio_codec is AudioCodec.OPUS
        assert webm.audio_quality == 7.0

    def test_input_without_audio_mutes(self) -> None:
        resolved = resolve_build(input_has_audio=False)

        assert all(c.is_muted for c in resolved.configs)

    def test_fail_fast(self) -> None:
        """The first invalid output aborts resolution."""
        with pytest.raises(IncompatibleCodecError) as exc_info:
            resolve_build(overrides=_outputs("mp4", "webm/vp9/aac", "mp4/vp9"))

        assert exc_info.value.codec == "aac"

    def test_size_propagates(self) -> None:
        resolved = resolve_build(overrides=OptionsLayer(size="640x?"))

        for config in resolved.configs:
            assert config.size == "640x?"
            assert config.frame_size == FrameSize(width=640, height=None)

    @pytest.mark.parametrize("size", ["640", "?x?", "0x360", "axb", "640x-1", ""])
    def test_invalid_size(self, size: str) -> None:
        with pytest.raises(InvalidSizeError):
            resolve_build(overrides=OptionsLayer(size=size))

    def test_cache_flag_propagates(self) -> None:
        resolved = resolve_build(overrides=OptionsLayer(cache=False))

        assert not any(c.cache for c in resolved.configs)


class TestResolveOutput:
    """Tests for resolve_output()."""

    @pytest.fixture
    def options(self):
        return resolve_build().options

    def test_explicit_quality(self, options) -> None:
        config = resolve_output(parse_output_spec("mp4/h.265@40/aac@2"), options)

        assert config.video_quality == 40.0
        assert config.audio_quality == 2.0

    def test_default_quality_sentinel(self, options) -> None:
        spec = OutputSpec(
            container=Container.WEBM,
            video_codec=VideoCodec.VP9,
            video_quality=DEFAULT_QUALITY,
        )

        assert resolve_output(spec, options).video_quality == 32.0

    def test_quality_out_of_range(self, options) -> None:
        with pytest.raises(InvalidQualityError) as exc_info:
            resolve_output(parse_output_spec("mp4/h.264@52"), options)

        assert exc_info.value.codec == "h.264"
        assert exc_info.value.quality_range == (0, 51)

    def test_range_bounds_inclusive(self, options) -> None:
        config = resolve_output(parse_output_spec("webm/vp9@4/vorbis@-1"), options)

        assert config.video_quality == 4.0
        assert config.audio_quality == -1.0

    def test_audio_quality_out_of_range(self, options) -> None:
        with pytest.raises(InvalidQualityError):
            resolve_output(parse_output_spec("mp4/aac@3"), options)

    def test_incompatible_video_codec(self, options) -> None:
        with pytest.raises(IncompatibleCodecError) as exc_info:
            resolve_output(parse_output_spec("mp4/vp9"), options)

        assert exc_info.value.codec_kind == "video"

    def test_explicit_audio_checked_when_muted(self) -> None:
        """A muted output still rejects an audio codec its container lacks."""
        options = resolve_build(overrides=OptionsLayer(mute=True)).options

        with pytest.raises(IncompatibleCodecError):
            resolve_output(parse_output_spec("webm/vp9/aac"), options)

    def test_muted_output_ignores_audio_quality(self) -> None:
        options = resolve_build(overrides=OptionsLayer(mute=True)).options

        config = resolve_output(parse_output_spec("mp4/aac@5"), options)

        assert config.is_muted
        assert config.audio_quality is None

    def test_muted_codec_in_spec(self, options) -> None:
        spec = OutputSpec(container=Container.MP4, audio_codec=AudioCodec.MUTED)

        config = resolve_output(spec, options)

        assert config.is_muted
        assert config.mute is True
        assert config.video_codec is VideoCodec.H264

    def test_file_extension_and_mime_type(self, options) -> None:
        config = resolve_output(parse_output_spec("webm/av1"), options)

        assert config.file_extension == "webm"
        assert config.mime_type == 'video/webm;codecs="av01"'
