"""httphook - ship log entries to an HTTP endpoint as JSON."""

from .entry import JSONValue, LogEntry
from .errors import (
    BadStatusError,
    BuildRequestError,
    HookError,
    MarshalError,
    TransportError,
)
from .handler import ALL_LEVELS, HTTPHookHandler, add_hook, from_env, parse_levels
from .hook import AsyncHTTPHook, HTTPHook

__version__ = "1.0.0"

__all__ = [
    "ALL_LEVELS",
    "AsyncHTTPHook",
    "BadStatusError",
    "BuildRequestError",
    "HTTPHook",
    "HTTPHookHandler",
    "HookError",
    "JSONValue",
    "LogEntry",
    "MarshalError",
    "TransportError",
    "add_hook",
    "from_env",
    "parse_levels",
]
