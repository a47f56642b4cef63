"""JSON log formatting for teacrush.

One object per line: timestamp, level, logger, message, and a ``context``
mapping built from ``extra=`` fields and the job the record belongs to.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else arrived through extra=
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

# Set by JobContextFilter; job_tag only feeds the text format
JOB_FIELDS = ("job_id", "input_path")
_FILTER_ATTRS = frozenset({*JOB_FIELDS, "job_tag"})


class JSONFormatter(logging.Formatter):
    """Render a record as a single-line JSON object.

    Job fields are only emitted while a job is active, so records logged
    outside a pipeline run carry no empty ``job_id``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name and record.name != "root":
            entry["logger"] = record.name

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in _FILTER_ATTRS
            and not key.startswith("_")
        }
        for field in JOB_FIELDS:
            value = getattr(record, field, None)
            if value:
                context[field] = value
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)
