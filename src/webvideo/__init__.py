"""webvideo: resolve, cache, and name web video encodings for a build.

Given one input video and layered options, webvideo works out which
encodings to produce, derives a content-addressed cache key for each, reuses
cached encodings when nothing changed, and returns a manifest of sources for
a <video> element.
"""

__version__ = "0.4.0"
