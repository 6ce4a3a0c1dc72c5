"""Cache keys and the content-addressed output store."""

from webvideo.cache.keys import (
    CANONICAL_FIELDS,
    DIGEST_SIZE,
    CacheKey,
    canonical_serialize,
    derive_cache_key,
)
from webvideo.cache.store import CacheStore, FileCacheStore

__all__ = [
    "CANONICAL_FIELDS",
    "DIGEST_SIZE",
    "CacheKey",
    "CacheStore",
    "FileCacheStore",
    "canonical_serialize",
    "derive_cache_key",
]
