"""Exception hierarchy for webvideo.

Errors fall into three families:

- ConfigurationError: raised while parsing or resolving options. Always
  fatal and always raised before any encoder work starts.
- CacheIOError: failures reading, writing, or sweeping the cache store.
  The build pipeline downgrades these to warnings.
- EncoderError / MediaProbeError: failures from the external tools.
"""

from __future__ import annotations


class WebVideoError(Exception):
    """Base class for all webvideo errors."""


# =============================================================================
# Configuration errors
# =============================================================================


class ConfigurationError(WebVideoError):
    """Base class for option parsing and resolution errors."""


class UnknownContainerError(ConfigurationError):
    """Raised when a container name is not a known container."""

    def __init__(self, container: str) -> None:
        self.container = container
        super().__init__(
            f'Video container "{container}" does not match any supported containers.'
        )


class IncompatibleCodecError(ConfigurationError):
    """Raised when a codec is not supported by the target container.

    Attributes:
        container: Container name (e.g. "mp4").
        codec: Codec name that was rejected (e.g. "vp9").
        codec_kind: Either "video" or "audio".
    """

    def __init__(self, container: str, codec: str, codec_kind: str) -> None:
        self.container = container
        self.codec = codec
        self.codec_kind = codec_kind
        super().__init__(
            f'Video container "{container}" does not support '
            f'{codec_kind} codec "{codec}"'
        )


class InvalidBooleanError(ConfigurationError):
    """Raised when a boolean option has a value other than "", "true", "false"."""

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f'Option "{key}={value}" is not a valid boolean')


class InvalidQualityError(ConfigurationError):
    """Raised when a quality value cannot be parsed or is out of range."""

    def __init__(
        self,
        value: str | float,
        codec: str | None = None,
        quality_range: tuple[float, float] | None = None,
    ) -> None:
        self.value = value
        self.codec = codec
        self.quality_range = quality_range
        if quality_range is not None:
            low, high = quality_range
            message = (
                f'Quality {value} for codec "{codec}" is outside the '
                f"supported range [{low:g}, {high:g}]"
            )
        elif codec is not None:
            message = f'Codec "{codec}" does not accept a quality setting'
        else:
            message = f'Quality "{value}" is not a number or "default"'
        super().__init__(message)


class UnsupportedOptionsError(ConfigurationError):
    """Raised once for every unrecognized option key in an override string."""

    def __init__(self, keys: tuple[str, ...], source: str = "") -> None:
        self.keys = keys
        self.source = source
        noun = "option is" if len(keys) == 1 else "options are"
        location = f' in "{source}"' if source else ""
        super().__init__(
            f"Received invalid params{location}: "
            f"{', '.join(keys)} {noun} not supported."
        )


class InvalidSizeError(ConfigurationError):
    """Raised when the size option is not "WxH", "Wx?", or "?xH"."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(
            f'Size "{value}" must be "WIDTHxHEIGHT" with "?" for one scaled side'
        )


class EmptyOutputListError(ConfigurationError):
    """Raised when resolution produces no outputs at all."""

    def __init__(self) -> None:
        super().__init__("No valid output files provided for transcoding")


class StaticConfigError(ConfigurationError):
    """Raised when the static build configuration fails validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


# =============================================================================
# Runtime errors
# =============================================================================


class CacheIOError(WebVideoError):
    """Raised when the cache store cannot read, write, or delete an entry."""


class EncoderError(WebVideoError):
    """Raised when the encoder fails to produce an output.

    Attributes:
        diagnostics: Captured diagnostic text (usually encoder stderr).
    """

    def __init__(self, message: str, diagnostics: str = "") -> None:
        self.diagnostics = diagnostics
        super().__init__(message)


class MediaProbeError(WebVideoError):
    """Raised when encoded bytes cannot be inspected."""


class NameFormatError(WebVideoError):
    """Raised when an output file name cannot be formatted."""
