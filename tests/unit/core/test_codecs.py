"""Tests for the container and codec registry."""

from __future__ import annotations

import pytest

from webvideo.core.codecs import (
    AUDIO_CODECS,
    CONTAINERS,
    REAL_AUDIO_CODECS,
    VIDEO_CODECS,
    AudioCodec,
    Container,
    QualityRange,
    VideoCodec,
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
from webvideo.core.exceptions import IncompatibleCodecError, UnknownContainerError


class TestRegistryCoverage:
    """Every variant must have a registry entry."""

    def test_every_container_has_entry(self) -> None:
        """All Container members are in CONTAINERS."""
        assert set(CONTAINERS) == set(Container)

    def test_every_video_codec_has_entry(self) -> None:
        """All VideoCodec members are in VIDEO_CODECS."""
        assert set(VIDEO_CODECS) == set(VideoCodec)

    def test_every_real_audio_codec_has_entry(self) -> None:
        """All real audio codecs are in AUDIO_CODECS, muted is not."""
        assert set(AUDIO_CODECS) == set(REAL_AUDIO_CODECS)
        assert AudioCodec.MUTED not in AUDIO_CODECS

    def test_supported_codecs_exist_in_registries(self) -> None:
        """Every codec a container lists exists in the global registry."""
        for info in CONTAINERS.values():
            assert info.supported_video_codecs <= set(VIDEO_CODECS)
            assert info.supported_audio_codecs <= set(AUDIO_CODECS)

    def test_registries_are_read_only(self) -> None:
        """Registries cannot be mutated."""
        with pytest.raises(TypeError):
            webm_info = CONTAINERS[Container.WEBM]
            CONTAINERS[Container.MP4] = webm_info  # type: ignore[index]

    def test_default_qualities_within_range(self) -> None:
        """Each codec's default quality is inside its declared range."""
        for video_info in VIDEO_CODECS.values():
            assert video_info.quality_range.contains(video_info.default_quality)
        for audio_info in AUDIO_CODECS.values():
            assert audio_info.quality_range.contains(audio_info.default_quality)


class TestCompatibilityTable:
    """Tests for container lookups and validate()."""

    def test_mp4_defaults(self) -> None:
        """mp4 defaults to h.264 and aac."""
        assert default_video_codec(Container.MP4) is VideoCodec.H264
        assert default_audio_codec(Container.MP4) is AudioCodec.AAC

    def test_webm_defaults(self) -> None:
        """webm defaults to vp9 and opus."""
        assert default_video_codec(Container.WEBM) is VideoCodec.VP9
        assert default_audio_codec(Container.WEBM) is AudioCodec.OPUS

    def test_supported_sets(self) -> None:
        """Supported sets match the compatibility matrix."""
        assert supported_video_codecs(Container.MP4) == {
            VideoCodec.AV1,
            VideoCodec.H264,
            VideoCodec.H265,
        }
        assert supported_audio_codecs(Container.WEBM) == {
            AudioCodec.OPUS,
            AudioCodec.VORBIS,
        }

    def test_validate_accepts_supported_pair(self) -> None:
        """mp4 with h.264 and aac is valid."""
        validate(Container.MP4, VideoCodec.H264, AudioCodec.AAC)

    def test_validate_rejects_unsupported_video(self) -> None:
        """mp4 cannot hold vp9."""
        with pytest.raises(IncompatibleCodecError) as exc_info:
            validate(Container.MP4, VideoCodec.VP9, AudioCodec.AAC)

        assert exc_info.value.container == "mp4"
        assert exc_info.value.codec == "vp9"
        assert exc_info.value.codec_kind == "video"

    def test_validate_rejects_unsupported_audio(self) -> None:
        """webm cannot hold aac."""
        with pytest.raises(IncompatibleCodecError) as exc_info:
            validate(Container.WEBM, VideoCodec.VP9, AudioCodec.AAC)

        assert exc_info.value.codec_kind == "audio"
        assert exc_info.value.codec == "aac"

    def test_validate_checks_video_first(self) -> None:
        """When both codecs are wrong the video codec is reported."""
        with pytest.raises(IncompatibleCodecError) as exc_info:
            validate(Container.MP4, VideoCodec.VP8, AudioCodec.OPUS)

        assert exc_info.value.codec_kind == "video"

    @pytest.mark.parametrize("container", list(Container))
    def test_validate_always_accepts_muted(self, container: Container) -> None:
        """The muted sentinel is valid in every container."""
        validate(container, default_video_codec(container), AudioCodec.MUTED)


class TestNameLookup:
    """Tests for name lookups used by the parser."""

    def test_parse_container(self) -> None:
        assert parse_container("webm") is Container.WEBM

    def test_parse_unknown_container(self) -> None:
        """Unknown containers raise with the offending name."""
        with pytest.raises(UnknownContainerError) as exc_info:
            parse_container("avi")

        assert exc_info.value.container == "avi"

    def test_find_codecs(self) -> None:
        assert find_video_codec("h.265") is VideoCodec.H265
        assert find_audio_codec("vorbis") is AudioCodec.VORBIS
        assert find_video_codec("aac") is None
        assert find_audio_codec("vp9") is None

    def test_muted_is_not_a_codec_name(self) -> None:
        """The muted sentinel cannot be looked up by name."""
        assert find_audio_codec("muted") is None


class TestMimeType:
    """Tests for mime_type_for()."""

    def test_codec_with_mime_token(self) -> None:
        webm = mime_type_for(Container.WEBM, VideoCodec.VP9)
        mp4 = mime_type_for(Container.MP4, VideoCodec.H265)

        assert webm == 'video/webm;codecs="vp9"'
        assert mp4 == 'video/mp4;codecs="hvc1"'

    def test_codec_without_mime_token(self) -> None:
        """h.264 has no codecs parameter."""
        assert mime_type_for(Container.MP4, VideoCodec.H264) == "video/mp4"


class TestQualityRange:
    """Tests for QualityRange."""

    def test_bounds_are_inclusive(self) -> None:
        quality_range = QualityRange(4, 63)
        assert quality_range.contains(4)
        assert quality_range.contains(63)
        assert not quality_range.contains(3.9)
        assert not quality_range.contains(64)
