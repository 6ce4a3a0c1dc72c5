"""Content-addressed store for encoded outputs.

Entries live in a flat directory as "{digest}.{ext}" files, gzip-compressed
at rest as "{digest}.{ext}.gz" by default. Writes go to a hidden temporary
file in the same directory and are published with an atomic rename, so a
reader never sees a partial entry.
"""

from __future__ import annotations

import gzip
import logging
import os
import tempfile
import zlib
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from webvideo.cache.keys import CacheKey
from webvideo.core.exceptions import CacheIOError

logger = logging.getLogger(__name__)

COMPRESSED_SUFFIX = ".gz"
TEMP_PREFIX = ".tmp-"


class CacheStore(Protocol):
    """Key to blob store shared by concurrent builds."""

    def get(self, key: CacheKey) -> bytes | None:
        """Return the stored bytes, or None if absent.

        Raises:
            CacheIOError: If the entry exists but cannot be read.
        """
        ...

    def put(self, key: CacheKey, data: bytes) -> None:
        """Store bytes under key.

        Raises:
            CacheIOError: If the entry cannot be written.
        """
        ...

    def sweep(self, live_keys: Iterable[CacheKey]) -> list[CacheKey]:
        """Delete every entry not in live_keys and return what was deleted.

        Raises:
            CacheIOError: If any entry could not be deleted.
        """
        ...


class FileCacheStore:
    """CacheStore backed by a directory on the local filesystem."""

    def __init__(self, directory: Path, *, compress: bool = True) -> None:
        self.directory = directory
        self.compress = compress

    def path_for(self, key: CacheKey) -> Path:
        """Path of the file holding key."""
        name = key.file_name
        if self.compress:
            name += COMPRESSED_SUFFIX
        return self.directory / name

    def get(self, key: CacheKey) -> bytes | None:
        path = self.path_for(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheIOError(f"Failed to read cache entry {path}: {e}") from e

        if not self.compress:
            return raw
        try:
            return gzip.decompress(raw)
        except (OSError, EOFError, zlib.error) as e:
            raise CacheIOError(f"Corrupt cache entry {path}: {e}") from e

    def put(self, key: CacheKey, data: bytes) -> None:
        # Replaces any existing entry; equal keys always carry equal bytes
        path = self.path_for(key)
        payload = gzip.compress(data, mtime=0) if self.compress else data
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Atomic write: temp file + rename
            fd, temp_path_str = tempfile.mkstemp(
                prefix=TEMP_PREFIX,
                suffix=path.suffix,
                dir=self.directory,
            )
            temp_path = Path(temp_path_str)
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(payload)
                temp_path.replace(path)  # Atomic on POSIX
                logger.debug("Stored cache entry %s (%d bytes)", path.name, len(data))
            except BaseException:
                temp_path.unlink(missing_ok=True)
                raise
        except OSError as e:
            raise CacheIOError(f"Failed to write cache entry {path}: {e}") from e

    def _scan(self) -> dict[CacheKey, Path]:
        """Map every stored key to its file, skipping temp and foreign files."""
        found: dict[CacheKey, Path] = {}
        try:
            children = list(self.directory.iterdir())
        except FileNotFoundError:
            return found
        except OSError as e:
            raise CacheIOError(f"Failed to list cache {self.directory}: {e}") from e

        for child in children:
            name = child.name
            if name.startswith(TEMP_PREFIX):
                continue
            if self.compress:
                if not name.endswith(COMPRESSED_SUFFIX):
                    continue
                name = name.removesuffix(COMPRESSED_SUFFIX)
            key = CacheKey.from_file_name(name)
            if key is not None:
                found[key] = child
        return found

    def entries(self) -> list[CacheKey]:
        """All keys currently stored, sorted by file name."""
        return sorted(self._scan(), key=lambda k: k.file_name)

    def _delete(
        self, keys: Iterable[CacheKey], found: dict[CacheKey, Path]
    ) -> list[CacheKey]:
        removed: list[CacheKey] = []
        failures: list[str] = []
        for key in keys:
            try:
                # Another build may have removed it already
                found[key].unlink(missing_ok=True)
            except OSError as e:
                failures.append(f"{found[key].name}: {e}")
                continue
            removed.append(key)
        if failures:
            raise CacheIOError(
                f"Failed to delete {len(failures)} cache entries: {'; '.join(failures)}"
            )
        return removed

    def sweep(self, live_keys: Iterable[CacheKey]) -> list[CacheKey]:
        live = set(live_keys)
        found = self._scan()
        stale = sorted((k for k in found if k not in live), key=lambda k: k.file_name)
        removed = self._delete(stale, found)
        if removed:
            logger.info("Swept %d stale cache entries", len(removed))
        return removed

    def clear(self) -> int:
        """Delete every entry. Returns the number deleted."""
        found = self._scan()
        return len(self._delete(list(found), found))
