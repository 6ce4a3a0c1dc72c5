"""Output context for structured logging.

Outputs of one build are encoded in parallel worker threads. The context
here is propagated with contextvars so every log record can say which build
and which output it belongs to.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_build_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "build_id", default=None
)
_output_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "output_key", default=None
)


@contextmanager
def output_context(
    build_id: str, output_key: str | None = None
) -> Generator[None, None, None]:
    """Context manager for per-output logging context.

    Args:
        build_id: Short identifier for the build (e.g. "3f9c").
        output_key: Identifier of the output being processed, usually its
            cache file name.

    Example:
        with output_context("3f9c", "ab12...cd.webm"):
            logger.info("Encoding")  # Record carries build_id and output_key
    """
    build_token = _build_id.set(build_id)
    output_token = _output_key.set(output_key)
    try:
        yield
    finally:
        _output_key.reset(output_token)
        _build_id.reset(build_token)


def get_output_context() -> tuple[str | None, str | None]:
    """Return (build_id, output_key) for the current context."""
    return _build_id.get(), _output_key.get()


class OutputContextFilter(logging.Filter):
    """Logging filter that injects output context into log records.

    Adds build_id and output_key attributes to LogRecord from contextvars,
    plus output_tag for compact text display like [3f9c:ab12.webm].
    """

    def filter(self, record: logging.LogRecord) -> bool:
        build_id, output_key = get_output_context()

        record.build_id = build_id
        record.output_key = output_key

        if build_id:
            if output_key:
                record.output_tag = f"[{build_id}:{output_key}] "
            else:
                record.output_tag = f"[{build_id}] "
        else:
            record.output_tag = ""

        return True  # Never filter out records
