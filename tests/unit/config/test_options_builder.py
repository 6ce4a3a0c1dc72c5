"""Tests for OptionsBuilder layering."""

from __future__ import annotations

from webvideo.config.builder import OptionsBuilder
from webvideo.config.models import (
    DEFAULT_FILE_NAME_TEMPLATE,
    DEFAULT_OPTIONS,
    DEFAULT_OUTPUT_FILES,
    OptionsLayer,
    OutputSpec,
)
from webvideo.core.codecs import Container, VideoCodec


class TestOptionsBuilder:
    """Tests for OptionsBuilder.apply() and build()."""

    def test_empty_builder_uses_defaults(self) -> None:
        """With no layers applied, build() returns the built-in defaults."""
        options = OptionsBuilder().build()

        assert options.file_name_template == DEFAULT_FILE_NAME_TEMPLATE
        assert options.output_path == "/"
        assert options.public_path is None
        assert options.mute is False
        assert options.cache is True
        assert options.es_module is False

    def test_later_layer_wins(self) -> None:
        builder = OptionsBuilder()
        builder.apply(DEFAULT_OPTIONS)
        builder.apply(OptionsLayer(output_path="/a"))
        builder.apply(OptionsLayer(output_path="/b"))

        assert builder.build().output_path == "/b"

    def test_none_does_not_override(self) -> None:
        """A layer that leaves a key unset keeps the lower layer's value."""
        builder = OptionsBuilder()
        builder.apply(OptionsLayer(output_path="/a", mute=True))
        builder.apply(OptionsLayer(cache=False))

        options = builder.build()
        assert options.output_path == "/a"
        assert options.mute is True
        assert options.cache is False

    def test_false_overrides_true(self) -> None:
        """False is a defined value, not an absent one."""
        builder = OptionsBuilder()
        builder.apply(OptionsLayer(cache=True))
        builder.apply(OptionsLayer(cache=False))

        assert builder.build().cache is False

    def test_output_list_replaced_not_merged(self) -> None:
        webm_only = (OutputSpec(container=Container.WEBM),)
        builder = OptionsBuilder()
        builder.apply(DEFAULT_OPTIONS)
        builder.apply(OptionsLayer(output_files=webm_only))

        assert builder.output_files == webm_only

    def test_empty_output_list_does_not_replace(self) -> None:
        builder = OptionsBuilder()
        builder.apply(DEFAULT_OPTIONS)
        builder.apply(OptionsLayer(output_files=()))

        assert builder.output_files == DEFAULT_OUTPUT_FILES

    def test_no_output_list(self) -> None:
        builder = OptionsBuilder()
        builder.apply(OptionsLayer(mute=True))

        assert builder.output_files == ()

    def test_public_path_falls_back_to_output_path(self) -> None:
        builder = OptionsBuilder()
        builder.apply(OptionsLayer(output_path="/static/video"))
        options = builder.build()

        assert options.public_path is None
        assert options.effective_public_path == "/static/video"

    def test_explicit_public_path(self) -> None:
        builder = OptionsBuilder()
        builder.apply(
            OptionsLayer(output_path="/static", public_path="https://cdn.test/v")
        )

        assert builder.build().effective_public_path == "https://cdn.test/v"

    def test_defaults_have_mp4_and_webm(self) -> None:
        assert [spec.video_codec for spec in DEFAULT_OUTPUT_FILES] == [
            VideoCodec.H264,
            VideoCodec.VP9,
        ]
