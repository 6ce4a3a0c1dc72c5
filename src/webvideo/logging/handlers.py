"""Log formatters for webvideo."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has; anything else was passed via extra=
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

# Set by OutputContextFilter; output_tag is for text logs only
_CONTEXT_FIELDS = ("build_id", "output_key")
_NOT_EXTRA = _RECORD_ATTRS | {*_CONTEXT_FIELDS, "output_tag"}


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON line.

    Keys: timestamp (UTC, ISO-8601), level, message, logger, and a context
    object holding the build and output the record belongs to plus any
    extra= attributes. Exceptions are rendered under "exception".
    """

    def _context(self, record: logging.LogRecord) -> dict[str, Any]:
        context = {
            field: getattr(record, field)
            for field in _CONTEXT_FIELDS
            if getattr(record, field, None)
        }
        context.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _NOT_EXTRA and not key.startswith("_")
        )
        return context

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            entry["logger"] = record.name

        context = self._context(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)
