# adoption_risk/logging_config.py
"""
Structured logging for adoption-risk.

Command output (tables, JSON results) owns stdout, so log lines are JSON
objects written to stderr. Alert operations attach `alert_id` and
`source_id` through `extra=` so a strategy's alert history can be
filtered out of the log stream.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_VERBOSITY_LEVELS = {
    "quiet": logging.WARNING,
    "normal": logging.INFO,
    "verbose": logging.DEBUG,
}

# Record attributes copied into the JSON line when a caller sets them
CONTEXT_FIELDS = ("alert_id", "source_id")


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, plus alert context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry)


def configure_logging(verbosity: str = "normal") -> None:
    """
    Route all logging to stderr as JSON at the configured verbosity.

    Replaces any handlers already on the root logger, so calling it again
    (as each CLI invocation does) never duplicates output.

    Args:
        verbosity: quiet (warnings only), normal, or verbose (debug)
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_VERBOSITY_LEVELS.get(verbosity, logging.INFO))

    # aiosqlite logs every statement at DEBUG
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
