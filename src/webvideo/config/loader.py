"""Static build configuration loader.

The static configuration is the middle option layer, between built-in
defaults and per-asset override strings. It is a YAML mapping using the
same camelCase keys as the override string::

    fileNameTemplate: "[originalFileName]-[size]-[hash]"
    outputPath: /static/video
    publicPath: https://cdn.example.com/video
    cache: true
    outputFiles:
      - mp4/h.265@30/aac
      - container: webm
        videoCodec: vp9
        videoQuality: 35
        audioCodec: muted

Environment variables:
- WEBVIDEO_CACHE_DIR: Path to the cache directory (overrides
  ~/.cache/webvideo)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from webvideo.config.models import DEFAULT_QUALITY, OptionsLayer, OutputSpec, Quality
from webvideo.core.codecs import (
    AudioCodec,
    Container,
    VideoCodec,
    find_audio_codec,
    find_video_codec,
    parse_container,
)
from webvideo.core.exceptions import ConfigurationError, StaticConfigError
from webvideo.options.parser import parse_output_spec

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "webvideo"

# Codec values a mapping entry accepts besides real codec names
DEFAULT_CODEC = "default"
MUTED_CODEC = AudioCodec.MUTED.value


def get_cache_dir() -> Path:
    """Get the cache directory for encoded outputs.

    Can be overridden by WEBVIDEO_CACHE_DIR environment variable.
    Supports tilde expansion (e.g., ~/custom/cache).

    Returns:
        Path to the cache directory (~/.cache/webvideo by default).
    """
    env_path = os.environ.get("WEBVIDEO_CACHE_DIR")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CACHE_DIR


# =============================================================================
# Pydantic models
# =============================================================================


class OutputFileModel(BaseModel):
    """Pydantic model for an output given as a mapping."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    container: str
    video_codec: str | None = Field(default=None, alias="videoCodec")
    video_quality: float | Literal["default"] | None = Field(
        default=None, alias="videoQuality"
    )
    audio_codec: str | None = Field(default=None, alias="audioCodec")
    audio_quality: float | Literal["default"] | None = Field(
        default=None, alias="audioQuality"
    )

    @field_validator("container")
    @classmethod
    def validate_container(cls, v: str) -> str:
        """Validate container name."""
        valid = {c.value for c in Container}
        if v not in valid:
            raise ValueError(
                f"Unknown container '{v}'. Must be one of: {', '.join(sorted(valid))}"
            )
        return v

    @field_validator("video_codec")
    @classmethod
    def validate_video_codec(cls, v: str | None) -> str | None:
        """Validate video codec name."""
        if v not in (None, DEFAULT_CODEC) and find_video_codec(v) is None:
            raise ValueError(f"Unknown video codec '{v}'")
        return v

    @field_validator("audio_codec")
    @classmethod
    def validate_audio_codec(cls, v: str | None) -> str | None:
        """Validate audio codec name, "default", or "muted"."""
        if v in (None, DEFAULT_CODEC, MUTED_CODEC):
            return v
        if find_audio_codec(v) is None:
            raise ValueError(f"Unknown audio codec '{v}'")
        return v


class StaticConfigModel(BaseModel):
    """Pydantic model for the static build configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    file_name_template: str | None = Field(default=None, alias="fileNameTemplate")
    output_files: list[OutputFileModel | str] | None = Field(
        default=None, alias="outputFiles"
    )
    output_path: str | None = Field(default=None, alias="outputPath")
    public_path: str | None = Field(default=None, alias="publicPath")
    mute: bool | None = None
    size: str | None = None
    cache: bool | None = None
    es_module: bool | None = Field(default=None, alias="esModule")

    @field_validator("file_name_template")
    @classmethod
    def validate_template(cls, v: str | None) -> str | None:
        """Validate the template is not blank."""
        if v is not None and not v.strip():
            raise ValueError("fileNameTemplate must not be empty")
        return v


# =============================================================================
# Conversion
# =============================================================================


def _convert_quality(value: float | str | None) -> Quality:
    if value == DEFAULT_CODEC:
        return DEFAULT_QUALITY
    return value  # type: ignore[return-value]


def _convert_video_codec(name: str | None) -> VideoCodec | None:
    if name in (None, DEFAULT_CODEC):
        return None
    return find_video_codec(name)


def _convert_audio_codec(name: str | None) -> AudioCodec | None:
    if name in (None, DEFAULT_CODEC):
        return None
    if name == MUTED_CODEC:
        return AudioCodec.MUTED
    return find_audio_codec(name)


def _convert_output_file(entry: OutputFileModel | str, index: int) -> OutputSpec:
    if isinstance(entry, str):
        try:
            return parse_output_spec(entry)
        except ConfigurationError as e:
            raise StaticConfigError(
                f"Static config validation failed: outputFiles.{index}: {e}",
                field=f"outputFiles.{index}",
            ) from e

    return OutputSpec(
        container=parse_container(entry.container),
        video_codec=_convert_video_codec(entry.video_codec),
        video_quality=_convert_quality(entry.video_quality),
        audio_codec=_convert_audio_codec(entry.audio_codec),
        audio_quality=_convert_quality(entry.audio_quality),
    )


def _convert_to_layer(model: StaticConfigModel) -> OptionsLayer:
    output_files = None
    if model.output_files is not None:
        output_files = tuple(
            _convert_output_file(entry, index)
            for index, entry in enumerate(model.output_files)
        )

    return OptionsLayer(
        file_name_template=model.file_name_template,
        output_files=output_files,
        output_path=model.output_path,
        public_path=model.public_path,
        mute=model.mute,
        size=model.size,
        cache=model.cache,
        es_module=model.es_module,
    )


# Union member tags pydantic inserts into error locations
_UNION_TAGS = frozenset({"OutputFileModel", "str"})


def _format_validation_error(error: ValidationError) -> tuple[str, str | None]:
    """Build a one-line message and field path from the first pydantic error."""
    prefix = "Static config validation failed"
    details = error.errors()
    if not details:
        return f"{prefix}: {error}", None

    first = details[0]
    loc = [part for part in first["loc"] if part not in _UNION_TAGS]
    field = ".".join(str(part) for part in loc) or None
    if field is None:
        return f"{prefix}: {first['msg']}", None
    return f"{prefix}: {field}: {first['msg']}", field


# =============================================================================
# Loading
# =============================================================================


def load_static_config_from_dict(data: dict[str, Any]) -> OptionsLayer:
    """Load and validate a static configuration from a dictionary.

    Args:
        data: Dictionary using the camelCase option keys.

    Returns:
        OptionsLayer with the options the configuration defines.

    Raises:
        StaticConfigError: If the configuration is invalid.
    """
    try:
        model = StaticConfigModel.model_validate(data)
    except ValidationError as e:
        error_msg, field = _format_validation_error(e)
        raise StaticConfigError(error_msg, field=field) from e

    return _convert_to_layer(model)


def load_static_config(path: Path) -> OptionsLayer:
    """Load and validate a static configuration YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        OptionsLayer with the options the file defines.

    Raises:
        FileNotFoundError: If the file does not exist.
        StaticConfigError: If the file is not valid YAML or fails validation.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise StaticConfigError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        logger.debug("Static config %s is empty, using defaults", path)
        return OptionsLayer()

    if not isinstance(data, dict):
        raise StaticConfigError("Static config file must be a YAML mapping")

    return load_static_config_from_dict(data)
