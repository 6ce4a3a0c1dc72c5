"""Tests for output file name formatting."""

from __future__ import annotations

import pytest

from webvideo.core.codecs import AudioCodec, VideoCodec
from webvideo.core.exceptions import NameFormatError
from webvideo.naming import (
    format_file_name,
    format_size,
    original_file_stem,
    template_requires_size,
)

DIGEST = "0f" * 20


def _format(template: str, **overrides) -> str:
    values = {
        "digest": DIGEST,
        "original_file_name": "BigBuckBunny",
        "extension": "webm",
        "video_codec": VideoCodec.VP9,
        "audio_codec": AudioCodec.OPUS,
    }
    values.update(overrides)
    return format_file_name(template, **values)


class TestFormatFileName:
    """Tests for format_file_name()."""

    def test_default_template(self) -> None:
        assert _format("[originalFileName]-[hash]") == f"BigBuckBunny-{DIGEST}.webm"

    def test_codec_tokens(self) -> None:
        name = _format(
            "[videoCodec]_[audioCodec]",
            video_codec=VideoCodec.H264,
            audio_codec=AudioCodec.AAC,
            extension="mp4",
        )

        assert name == "h_264_aac.mp4"

    def test_muted_audio(self) -> None:
        assert _format("[audioCodec]", audio_codec=AudioCodec.MUTED) == "muted.webm"

    def test_size_token(self) -> None:
        assert _format("clip-[size]", size="640x360") == "clip-640x360.webm"

    def test_size_required_when_used(self) -> None:
        with pytest.raises(NameFormatError):
            _format("[hash]-[size]")

    def test_size_ignored_when_unused(self) -> None:
        assert _format("[hash]", size="640x360") == f"{DIGEST}.webm"

    def test_unknown_tokens_kept(self) -> None:
        assert _format("[hash]-[quality]") == f"{DIGEST}-[quality].webm"

    def test_repeated_token(self) -> None:
        assert _format("[hash][hash]") == f"{DIGEST}{DIGEST}.webm"

    def test_substituted_values_not_rescanned(self) -> None:
        """A file name that looks like a token is inserted verbatim."""
        name = _format("[originalFileName]", original_file_name="[hash]")

        assert name == "[hash].webm"

    def test_plain_template(self) -> None:
        assert _format("video") == "video.webm"


class TestHelpers:
    """Tests for the small naming helpers."""

    def test_template_requires_size(self) -> None:
        assert template_requires_size("[size]-[hash]")
        assert not template_requires_size("[hash]")

    @pytest.mark.parametrize(
        ("path", "stem"),
        [
            ("BigBuckBunny.mov", "BigBuckBunny"),
            ("/videos/intro.final.mp4", "intro.final"),
            ("noext", "noext"),
        ],
    )
    def test_original_file_stem(self, path: str, stem: str) -> None:
        assert original_file_stem(path) == stem

    def test_format_size(self) -> None:
        assert format_size(1280, 720) == "1280x720"

    def test_format_size_without_video(self) -> None:
        assert format_size(None, None) == ""
        assert format_size(640, None) == ""
