"""Structured logging for webvideo.

Provides configurable logging with JSON format support and file rotation,
plus per-output context for parallel encoding.
"""

from webvideo.logging.config import configure_logging
from webvideo.logging.context import (
    OutputContextFilter,
    get_output_context,
    output_context,
)
from webvideo.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "OutputContextFilter",
    "configure_logging",
    "get_output_context",
    "output_context",
]
