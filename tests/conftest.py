"""Shared test fixtures for webvideo."""

from __future__ import annotations

import shutil
import tempfile
import threading
from pathlib import Path

import pytest

from webvideo.config.models import EffectiveTranscodeConfig
from webvideo.core.codecs import AudioCodec, Container, VideoCodec
from webvideo.core.exceptions import EncoderError
from webvideo.encoder.interface import ProbeResult


class FakeEncoder:
    """Encoder that returns deterministic bytes and records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[Path, EffectiveTranscodeConfig]] = []
        self._lock = threading.Lock()

    def encode(self, input_path: Path, config: EffectiveTranscodeConfig) -> bytes:
        with self._lock:
            self.calls.append((input_path, config))
        return (
            f"{config.container.value}|{config.video_codec.value}|"
            f"{config.audio_codec.value}|{input_path.name}"
        ).encode()


class FailingEncoder:
    """Encoder that fails for one container and succeeds for the rest."""

    def __init__(self, fail_container: Container) -> None:
        self.fail_container = fail_container
        self.inner = FakeEncoder()

    def encode(self, input_path: Path, config: EffectiveTranscodeConfig) -> bytes:
        if config.container is self.fail_container:
            raise EncoderError("encoder exploded", diagnostics="stderr tail")
        return self.inner.encode(input_path, config)


class FakeProbe:
    """MediaProbe that reports fixed dimensions."""

    def __init__(self, width: int | None = 640, height: int | None = 360) -> None:
        self.width = width
        self.height = height
        self.probed: list[bytes] = []

    def probe(self, data: bytes) -> ProbeResult:
        self.probed.append(data)
        return ProbeResult(
            width=self.width, height=self.height, video_codec="h264", audio_codec=None
        )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def input_file(temp_dir: Path) -> Path:
    """A fake input video with fixed content."""
    path = temp_dir / "BigBuckBunny.mov"
    path.write_bytes(b"not really a video, but stable bytes")
    return path


@pytest.fixture
def fake_encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def fake_probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def make_config():
    """Factory for EffectiveTranscodeConfig with sensible defaults."""

    def _make(**overrides) -> EffectiveTranscodeConfig:
        values = {
            "container": Container.WEBM,
            "video_codec": VideoCodec.VP9,
            "video_quality": 32.0,
            "audio_codec": AudioCodec.OPUS,
            "audio_quality": 7.0,
            "mute": False,
            "size": None,
            "cache": True,
        }
        values.update(overrides)
        return EffectiveTranscodeConfig(**values)

    return _make


@pytest.fixture
def failing_encoder() -> FailingEncoder:
    """Encoder whose webm outputs fail."""
    return FailingEncoder(Container.WEBM)
