"""JSON log output.

One JSON object per line, so transcode logs from CI builds can be
filtered by asset or level without parsing free text.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has, plus the ones Formatter and
# AssetContextFilter add; anything else came in through ``extra``
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName", "asset_name", "asset_tag"}


class JSONFormatter(logging.Formatter):
    """Format log records as JSON objects.

    Keys:
    - timestamp: ISO-8601 UTC
    - level, logger, message
    - asset: asset being encoded, when the record came from a job
    - context: values passed through ``extra``
    - exception: formatted traceback, if any
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        asset_name = getattr(record, "asset_name", None)
        if asset_name:
            entry["asset"] = asset_name

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["context"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
