"""Output file name formatting.

File name templates support the following tokens:

- "[hash]": the output's cache key digest
- "[originalFileName]": input file name without its extension
- "[videoCodec]": resolved video codec, "." replaced by "_" (e.g. "h_264")
- "[audioCodec]": resolved audio codec, or "muted"
- "[size]": "{width}x{height}" of the encoded output, from a media probe

Unrecognized bracketed tokens are left unchanged. The container's file
extension is always appended.

Example:
    "[originalFileName]-[hash]" --> "BigBuckBunny-abcd1234.webm"
"""

from __future__ import annotations

import re
from pathlib import PurePath

from webvideo.core.codecs import AudioCodec, VideoCodec
from webvideo.core.exceptions import NameFormatError

SIZE_TOKEN = "[size]"
MUTED_LABEL = "muted"

_TOKEN_PATTERN = re.compile(r"\[[A-Za-z]+\]")


def template_requires_size(template: str) -> bool:
    """Whether formatting template needs probed output dimensions."""
    return SIZE_TOKEN in template


def original_file_stem(input_path: str | PurePath) -> str:
    """Input file name without directory or extension."""
    return PurePath(input_path).stem


def format_size(width: int | None, height: int | None) -> str:
    """Render probed dimensions for the [size] token.

    Outputs without a video stream render as an empty string.
    """
    if width is None or height is None:
        return ""
    return f"{width}x{height}"


def format_file_name(
    template: str,
    *,
    digest: str,
    original_file_name: str,
    extension: str,
    video_codec: VideoCodec,
    audio_codec: AudioCodec,
    size: str | None = None,
) -> str:
    """Fill a file name template for one output.

    Args:
        template: Template text, e.g. "[originalFileName]-[hash]".
        digest: Cache key digest for [hash].
        original_file_name: Input file stem for [originalFileName].
        extension: File extension appended after the formatted name.
        video_codec: Resolved video codec for [videoCodec].
        audio_codec: Resolved audio codec or AudioCodec.MUTED for [audioCodec].
        size: Probed "{width}x{height}" for [size]; required only when the
            template uses it.

    Returns:
        The output file name including extension.

    Raises:
        NameFormatError: If the template uses [size] and size is None.
    """
    if size is None and template_requires_size(template):
        raise NameFormatError(
            f'Template "{template}" uses {SIZE_TOKEN} but the output was not probed'
        )

    audio_label = MUTED_LABEL if audio_codec is AudioCodec.MUTED else audio_codec.value
    replacements = {
        "[hash]": digest,
        "[originalFileName]": original_file_name,
        "[videoCodec]": video_codec.value.replace(".", "_"),
        "[audioCodec]": audio_label,
        SIZE_TOKEN: size or "",
    }

    # Single pass so substituted values are never re-scanned for tokens
    name = _TOKEN_PATTERN.sub(
        lambda m: replacements.get(m.group(0), m.group(0)), template
    )
    return f"{name}.{extension}"
