"""Output manifest for a finished build.

The manifest lists one <source> candidate per output, in resolution order,
and can be rendered as a JavaScript module for bundler integrations::

    export default { sources: [{"src":"/clip-ab12.mp4","type":"video/mp4"}] };
"""

from __future__ import annotations

import json
import posixpath
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class ManifestEntry:
    """One output as seen by a browser."""

    src: str
    mime_type: str

    def to_dict(self) -> dict[str, str]:
        return {"src": self.src, "type": self.mime_type}


def build_src(public_path: str, file_name: str) -> str:
    """Public URL or path of an output file."""
    return posixpath.join(public_path, file_name)


def render_manifest_module(entries: Iterable[ManifestEntry], es_module: bool) -> str:
    """Render the manifest as an ES module or a CommonJS module."""
    sources = json.dumps(
        [entry.to_dict() for entry in entries], separators=(",", ":")
    )
    if es_module:
        return f"export default {{ sources: {sources} }};"
    return f"module.exports = {{ sources: {sources} }};"
