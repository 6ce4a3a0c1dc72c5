"""Option models, layering, and resolution.

Static configuration files are loaded by webvideo.config.loader, which is
not imported here because it depends on the override string parser.
"""

from webvideo.config.builder import OptionsBuilder
from webvideo.config.models import (
    DEFAULT_FILE_NAME_TEMPLATE,
    DEFAULT_OPTIONS,
    DEFAULT_OUTPUT_FILES,
    DEFAULT_QUALITY,
    EffectiveTranscodeConfig,
    FrameSize,
    GlobalOptions,
    OptionsLayer,
    OutputSpec,
    Quality,
    QualitySentinel,
)
from webvideo.config.resolver import ResolvedBuild, resolve_build, resolve_output

__all__ = [
    "DEFAULT_FILE_NAME_TEMPLATE",
    "DEFAULT_OPTIONS",
    "DEFAULT_OUTPUT_FILES",
    "DEFAULT_QUALITY",
    "EffectiveTranscodeConfig",
    "FrameSize",
    "GlobalOptions",
    "OptionsBuilder",
    "OptionsLayer",
    "OutputSpec",
    "Quality",
    "QualitySentinel",
    "ResolvedBuild",
    "resolve_build",
    "resolve_output",
]
