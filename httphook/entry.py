"""
Wire form of a log entry.

Every entry is posted as exactly:

    {"message": "...", "fields": {...}, "timestamp": "2024-05-01T12:00:00.123456+00:00"}
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Union

JSONValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]

# Attributes every LogRecord carries; anything else was passed via `extra=`.
_RECORD_ATTRIBUTES = frozenset((
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message", "asctime",
))


def format_timestamp(timestamp: datetime) -> str:
    """Render a datetime as RFC 3339. Naive values are taken as local time."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.astimezone()
    return timestamp.isoformat()


@dataclass
class LogEntry:
    """A single log entry as handed to HTTPHook.fire."""

    message: str
    fields: Dict[str, JSONValue] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_payload(self) -> Dict[str, Any]:
        """Build the document posted to the endpoint. Values are not copied or cleaned."""
        return {
            "message": self.message,
            "fields": self.fields,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> "LogEntry":
        """Convert a stdlib LogRecord, keeping its `extra` attributes as fields."""
        fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES
        }
        return cls(
            message=record.getMessage(),
            fields=fields,
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
        )
