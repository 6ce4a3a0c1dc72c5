"""Build pipeline: resolved configs in, encoded artifacts and a manifest out.

For one input asset, every resolved output is an independent unit of work:
look the output up in the cache store, encode it on a miss, store the new
bytes, and format its file name. Units run in parallel on a thread pool.

Cache keys for all outputs are derived before any unit starts, and the
cache is swept exactly once after every unit has finished. If any unit
fails, pending units are cancelled, the sweep is skipped, and the error is
raised; a partial result is never returned.
"""

from __future__ import annotations

import logging
import posixpath
import uuid
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from webvideo.cache.keys import CacheKey, derive_cache_key
from webvideo.cache.store import CacheStore
from webvideo.config.models import EffectiveTranscodeConfig, GlobalOptions
from webvideo.config.resolver import ResolvedBuild
from webvideo.core.exceptions import CacheIOError, NameFormatError
from webvideo.encoder.interface import Encoder, MediaProbe
from webvideo.logging import output_context
from webvideo.manifest import ManifestEntry, build_src, render_manifest_module
from webvideo.naming import (
    format_file_name,
    format_size,
    original_file_stem,
    template_requires_size,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True)
class Artifact:
    """One encoded output of a build."""

    config: EffectiveTranscodeConfig
    key: CacheKey
    file_name: str
    data: bytes
    from_cache: bool

    @property
    def mime_type(self) -> str:
        return self.config.mime_type


@dataclass(frozen=True)
class BuildResult:
    """Every output of a successful build, in resolution order."""

    options: GlobalOptions
    artifacts: tuple[Artifact, ...]
    swept: tuple[CacheKey, ...] = ()

    @property
    def manifest(self) -> tuple[ManifestEntry, ...]:
        public_path = self.options.effective_public_path
        return tuple(
            ManifestEntry(
                src=build_src(public_path, artifact.file_name),
                mime_type=artifact.mime_type,
            )
            for artifact in self.artifacts
        )

    def manifest_module(self) -> str:
        """Render the manifest as a JavaScript module."""
        return render_manifest_module(self.manifest, self.options.es_module)

    def output_file(self, artifact: Artifact) -> str:
        """Relative path an artifact is emitted to under the output path."""
        return posixpath.join(self.options.output_path, artifact.file_name).lstrip("/")


class TranscodeBuild:
    """Runs every resolved output of one input asset.

    Example:
        resolved = resolve_build(DEFAULT_OPTIONS, static_layer, override_layer)
        build = TranscodeBuild(
            Path("clip.mov"),
            resolved,
            encoder=FFmpegEncoder(),
            cache_store=FileCacheStore(get_cache_dir()),
            probe=FFprobeMediaProbe(),
        )
        result = build.run()
    """

    def __init__(
        self,
        input_path: Path,
        resolved: ResolvedBuild,
        *,
        encoder: Encoder,
        cache_store: CacheStore | None = None,
        probe: MediaProbe | None = None,
        max_workers: int | None = None,
        build_id: str | None = None,
    ) -> None:
        """Initialize the build.

        Args:
            input_path: Source media file.
            resolved: Output of resolve_build().
            encoder: Encoder used on cache misses.
            cache_store: Store for encoded outputs; None disables caching.
            probe: Media probe, required when the file name template uses
                [size].
            max_workers: Thread pool size. Defaults to
                min(DEFAULT_MAX_WORKERS, number of outputs).
            build_id: Identifier used in log records. Random if not given.
        """
        self.input_path = input_path
        self.resolved = resolved
        self.encoder = encoder
        self.cache_store = cache_store
        self.probe = probe
        self.max_workers = max_workers
        self.build_id = build_id or uuid.uuid4().hex[:8]

    @property
    def options(self) -> GlobalOptions:
        return self.resolved.options

    def _uses_cache(self, config: EffectiveTranscodeConfig) -> bool:
        return self.cache_store is not None and config.cache

    def derive_keys(self, content: bytes) -> list[CacheKey]:
        """Cache keys for every output, in resolution order."""
        return [derive_cache_key(content, config) for config in self.resolved.configs]

    def run(self) -> BuildResult:
        """Produce every output, then sweep the cache.

        Returns:
            BuildResult with artifacts in resolution order.

        Raises:
            OSError: If the input file cannot be read.
            NameFormatError: If the template needs [size] and no probe is set.
            EncoderError: If any output fails to encode.
            MediaProbeError: If an output cannot be probed for its size.
        """
        needs_size = template_requires_size(self.options.file_name_template)
        if needs_size and self.probe is None:
            raise NameFormatError(
                "File name template uses [size] but no media probe is configured"
            )

        content = self.input_path.read_bytes()
        keys = self.derive_keys(content)
        configs = self.resolved.configs
        workers = self.max_workers or min(DEFAULT_MAX_WORKERS, len(configs))

        logger.info(
            "Build %s: %d output(s) for %s",
            self.build_id,
            len(configs),
            self.input_path.name,
        )

        artifacts: list[Artifact | None] = [None] * len(configs)
        with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
            futures: dict[Future[Artifact], int] = {
                executor.submit(self._process_output, config, key, needs_size): index
                for index, (config, key) in enumerate(zip(configs, keys))
            }
            try:
                for future in as_completed(futures):
                    artifacts[futures[future]] = future.result()
            except BaseException:
                # Cancel pending outputs; running encodes finish on shutdown
                for f in futures:
                    f.cancel()
                executor.shutdown(wait=True, cancel_futures=True)
                logger.error("Build %s failed, no outputs returned", self.build_id)
                raise

        swept = self._sweep(keys)
        return BuildResult(
            options=self.options,
            artifacts=tuple(a for a in artifacts if a is not None),
            swept=tuple(swept),
        )

    def _process_output(
        self, config: EffectiveTranscodeConfig, key: CacheKey, needs_size: bool
    ) -> Artifact:
        with output_context(self.build_id, key.file_name):
            data = self._read_cache(config, key)
            from_cache = data is not None
            if data is None:
                logger.info(
                    "Encoding %s/%s", config.container.value, config.video_codec.value
                )
                data = self.encoder.encode(self.input_path, config)
                self._write_cache(config, key, data)
            else:
                logger.info("Cache hit")

            size = None
            if needs_size and self.probe is not None:
                probed = self.probe.probe(data)
                size = format_size(probed.width, probed.height)

            file_name = format_file_name(
                self.options.file_name_template,
                digest=key.digest,
                original_file_name=original_file_stem(self.input_path),
                extension=config.file_extension,
                video_codec=config.video_codec,
                audio_codec=config.audio_codec,
                size=size,
            )
            return Artifact(
                config=config,
                key=key,
                file_name=file_name,
                data=data,
                from_cache=from_cache,
            )

    def _read_cache(
        self, config: EffectiveTranscodeConfig, key: CacheKey
    ) -> bytes | None:
        if not self._uses_cache(config):
            return None
        try:
            return self.cache_store.get(key)  # type: ignore[union-attr]
        except CacheIOError as e:
            logger.warning("Cache read failed, encoding instead: %s", e)
            return None

    def _write_cache(
        self, config: EffectiveTranscodeConfig, key: CacheKey, data: bytes
    ) -> None:
        if not self._uses_cache(config):
            return
        try:
            self.cache_store.put(key, data)  # type: ignore[union-attr]
        except CacheIOError as e:
            logger.warning("Cache write failed: %s", e)

    def _sweep(self, keys: list[CacheKey]) -> list[CacheKey]:
        if self.cache_store is None or not any(c.cache for c in self.resolved.configs):
            return []
        try:
            return self.cache_store.sweep(keys)
        except CacheIOError as e:
            logger.warning("Cache sweep failed: %s", e)
            return []
