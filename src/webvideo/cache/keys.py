"""Cache key derivation.

A cache key identifies one (input content, resolved config) pair. It is the
SHAKE256 digest, truncated to 20 bytes, of the full input bytes followed by
the config's canonical serialization.
"""

from __future__ import annotations

import hashlib
import json
import re
from dataclasses import dataclass
from enum import Enum

from webvideo.config.models import EffectiveTranscodeConfig

DIGEST_SIZE = 20

# Serialization order; never derived from the dataclass definition order
CANONICAL_FIELDS: tuple[str, ...] = (
    "container",
    "video_codec",
    "video_quality",
    "audio_codec",
    "audio_quality",
    "mute",
    "size",
    "cache",
)

_DIGEST_PATTERN = re.compile(rf"^[0-9a-f]{{{DIGEST_SIZE * 2}}}$")


@dataclass(frozen=True)
class CacheKey:
    """Address of one cache entry.

    Attributes:
        digest: Lowercase hex digest.
        extension: File extension of the output (e.g. "webm").
    """

    digest: str
    extension: str

    @property
    def file_name(self) -> str:
        return f"{self.digest}.{self.extension}"

    def __str__(self) -> str:
        return self.file_name

    @classmethod
    def from_file_name(cls, name: str) -> CacheKey | None:
        """Parse "{digest}.{ext}", returning None for anything else."""
        digest, sep, extension = name.partition(".")
        if not sep or not extension or "." in extension:
            return None
        if not _DIGEST_PATTERN.match(digest):
            return None
        return cls(digest=digest, extension=extension)


def _canonical_value(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool) or value is None or isinstance(value, str):
        return value
    if isinstance(value, int | float):
        return float(value)
    raise TypeError(f"Cannot serialize {type(value).__name__} in a cache key")


def canonical_serialize(config: EffectiveTranscodeConfig) -> bytes:
    """Serialize a config to bytes with a fixed field order.

    Equal field values always give identical bytes, whatever order the
    config was constructed in. Numbers are normalized to floats so 40 and
    40.0 serialize the same.
    """
    pairs = [
        [name, _canonical_value(getattr(config, name))] for name in CANONICAL_FIELDS
    ]
    return json.dumps(pairs, separators=(",", ":"), ensure_ascii=True).encode("ascii")


def derive_cache_key(content: bytes, config: EffectiveTranscodeConfig) -> CacheKey:
    """Derive the cache key for one output of one input.

    Args:
        content: Full byte content of the input asset.
        config: Resolved output config.

    Returns:
        CacheKey addressing the encoded output.
    """
    hasher = hashlib.shake_256()
    hasher.update(content)
    hasher.update(canonical_serialize(config))
    return CacheKey(
        digest=hasher.hexdigest(DIGEST_SIZE),
        extension=config.file_extension,
    )
