"""Override string parsing for per-asset output options."""

from webvideo.options.errors import (
    DuplicateAudioCodecError,
    DuplicateVideoCodecError,
    OverrideSyntaxError,
    TooManyCodecTokensError,
    UnknownCodecNameError,
)
from webvideo.options.parser import (
    SUPPORTED_KEYS,
    CodecSlots,
    OverrideParseResult,
    parse_boolean,
    parse_output_spec,
    parse_output_specs,
    parse_override_string,
    parse_quality,
)

__all__ = [
    "SUPPORTED_KEYS",
    "CodecSlots",
    "DuplicateAudioCodecError",
    "DuplicateVideoCodecError",
    "OverrideParseResult",
    "OverrideSyntaxError",
    "TooManyCodecTokensError",
    "UnknownCodecNameError",
    "parse_boolean",
    "parse_output_spec",
    "parse_output_specs",
    "parse_override_string",
    "parse_quality",
]
