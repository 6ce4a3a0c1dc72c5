"""Tests for the build manifest."""

from __future__ import annotations

import json

from webvideo.manifest import ManifestEntry, build_src, render_manifest_module

ENTRIES = [
    ManifestEntry(src="/video/clip-1.mp4", mime_type="video/mp4"),
    ManifestEntry(src="/video/clip-2.webm", mime_type='video/webm;codecs="vp9"'),
]


class TestBuildSrc:
    """Tests for build_src()."""

    def test_joins_with_slash(self) -> None:
        assert build_src("/video", "clip.mp4") == "/video/clip.mp4"

    def test_trailing_slash(self) -> None:
        assert build_src("/video/", "clip.mp4") == "/video/clip.mp4"

    def test_root(self) -> None:
        assert build_src("/", "clip.mp4") == "/clip.mp4"

    def test_url(self) -> None:
        assert build_src("https://cdn.test/v", "a.webm") == "https://cdn.test/v/a.webm"


class TestRenderManifestModule:
    """Tests for render_manifest_module()."""

    def test_es_module(self) -> None:
        module = render_manifest_module(ENTRIES, es_module=True)

        assert module.startswith("export default { sources: ")
        assert module.endswith(" };")

    def test_commonjs(self) -> None:
        module = render_manifest_module(ENTRIES, es_module=False)

        assert module.startswith("module.exports = { sources: ")

    def test_sources_in_order(self) -> None:
        module = render_manifest_module(ENTRIES, es_module=True)
        payload = module.removeprefix("export default { sources: ").removesuffix(" };")

        assert json.loads(payload) == [
            {"src": "/video/clip-1.mp4", "type": "video/mp4"},
            {"src": "/video/clip-2.webm", "type": 'video/webm;codecs="vp9"'},
        ]

    def test_compact_json(self) -> None:
        entry = ManifestEntry(src="/videoName.mp4", mime_type="video/mp4")

        assert render_manifest_module([entry], es_module=True) == (
            'export default { sources: [{"src":"/videoName.mp4","type":"video/mp4"}] };'
        )

    def test_empty(self) -> None:
        assert render_manifest_module([], es_module=False) == (
            "module.exports = { sources: [] };"
        )
