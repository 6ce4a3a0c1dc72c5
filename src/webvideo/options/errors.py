"""Error types for the output descriptor grammar."""

from __future__ import annotations

from webvideo.core.exceptions import ConfigurationError


class OverrideSyntaxError(ConfigurationError):
    """Base class for errors inside an output descriptor.

    Attributes:
        source: The descriptor text being parsed (e.g. "mp4/aac/aac").
        position: Character offset of the offending token in source.
    """

    def __init__(self, message: str, source: str = "", position: int = 0) -> None:
        self.source = source
        self.position = position
        super().__init__(message)

    def format_error(self) -> str:
        """Format error with caret pointing at the problem position."""
        msg = str(self)
        if not self.source:
            return msg
        caret = " " * self.position + "^"
        return f"{msg}\n  {self.source}\n  {caret}"


class UnknownCodecNameError(OverrideSyntaxError):
    """Raised when a codec token names no known video or audio codec."""

    def __init__(self, codec_name: str, source: str = "", position: int = 0) -> None:
        self.codec_name = codec_name
        super().__init__(
            f'Invalid codec name "{codec_name}" does not match any valid '
            "video or audio codecs.",
            source=source,
            position=position,
        )


class DuplicateVideoCodecError(OverrideSyntaxError):
    """Raised when a descriptor names more than one video codec."""

    def __init__(self, source: str = "", position: int = 0) -> None:
        super().__init__(
            f'Output "{source}" contains more than 1 video codec.',
            source=source,
            position=position,
        )


class DuplicateAudioCodecError(OverrideSyntaxError):
    """Raised when a descriptor names more than one audio codec."""

    def __init__(self, source: str = "", position: int = 0) -> None:
        super().__init__(
            f'Output "{source}" contains more than 1 audio codec.',
            source=source,
            position=position,
        )


class TooManyCodecTokensError(OverrideSyntaxError):
    """Raised when a descriptor has more codec tokens than free slots."""

    def __init__(self, source: str = "", position: int = 0) -> None:
        super().__init__(
            f'Output "{source}" has more codec tokens than video and audio slots.',
            source=source,
            position=position,
        )
