"""JSONL formatter for the server's warning log."""

from __future__ import annotations

__all__ = ["ISO8601Formatter"]

import json
import logging
from datetime import datetime, timezone


class ISO8601Formatter(logging.Formatter):
    """One JSON object per record, stamped in UTC.

    Dict messages (the {"event": ..., "message": ...} convention) are
    merged into the object; plain strings become {"message": ...}.

    Example line:
        {"time": "2026-10-19T10:48:37.123Z", "level": "WARNING",
         "logger": "headless-proxy.upstream", "event": "members_total_mismatch", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds")
        fields = record.msg if isinstance(record.msg, dict) else {"message": record.getMessage()}
        entry = {
            "time": stamp.replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            **fields,
        }
        return json.dumps(entry, default=str)
