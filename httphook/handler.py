"""
Glue between HTTPHook and the standard library logging package.

Usage:
    import logging
    from httphook import add_hook, from_env

    hook = from_env()          # HTTPHOOK_SERVICE_NAME / HTTPHOOK_ENDPOINT
    add_hook(hook)             # attach to the root logger

    logger = logging.getLogger(__name__)
    logger.error("Payment failed", extra={"user_id": "u123", "amount": 99.99})
"""

import logging
import os
from typing import Optional

from .entry import LogEntry
from .hook import HTTPHook

ALL_LEVELS = (
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
)

_PACKAGE = __name__.split(".")[0]


def _is_own_record(record: logging.LogRecord) -> bool:
    return record.name == _PACKAGE or record.name.startswith(_PACKAGE + ".")


class HTTPHookHandler(logging.Handler):
    """
    Logging handler that fires an HTTPHook for every record at one of its levels.

    Delivery failures go through logging.Handler.handleError, so they are
    reported the same way as any other handler error.
    """

    def __init__(self, hook: HTTPHook):
        # emit() is synchronous; an AsyncHTTPHook's fire() would never be awaited
        if not isinstance(hook, HTTPHook):
            raise TypeError(f"HTTPHookHandler requires an HTTPHook, got {type(hook).__name__}")
        super().__init__()
        self.hook = hook

    def filter(self, record: logging.LogRecord):
        """Drop records outside the hook's levels and records from this package."""
        if record.levelno not in self.hook.levels():
            return False
        # Our own diagnostics would otherwise be posted from inside fire()
        if _is_own_record(record):
            return False
        return super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.hook.fire(LogEntry.from_record(record))
        except Exception:
            self.handleError(record)


def add_hook(hook: HTTPHook, logger: Optional[logging.Logger] = None) -> HTTPHookHandler:
    """
    Register a hook with a logger (the root logger by default).

    The logger's own level still applies: records it discards never reach
    the hook.

    Returns:
        The attached handler, so it can be removed again with removeHandler().
    """
    handler = HTTPHookHandler(hook)
    target = logger if logger is not None else logging.getLogger()
    target.addHandler(handler)
    return handler


def parse_levels(value: str) -> tuple:
    """
    Parse a comma-separated list of level names ("INFO, ERROR").

    Raises:
        ValueError: a name is not a standard logging level
    """
    levels = []
    for name in (part.strip() for part in value.split(",")):
        if not name:
            continue
        level = getattr(logging, name.upper(), None)
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level: {name}")
        levels.append(level)
    return tuple(levels)


def from_env(name: Optional[str] = None) -> HTTPHook:
    """
    Create an HTTPHook from environment variables.

    Environment variables:
        HTTPHOOK_SERVICE_NAME: Service name (required if not passed)
        HTTPHOOK_ENDPOINT: Destination URL (required)
        HTTPHOOK_LEVELS: Comma-separated level names (optional, default all)

    Args:
        name: Override service name from env

    Returns:
        Configured HTTPHook instance
    """
    service_name = name or os.environ.get("HTTPHOOK_SERVICE_NAME")
    endpoint = os.environ.get("HTTPHOOK_ENDPOINT")

    if not service_name:
        raise ValueError("name required or set HTTPHOOK_SERVICE_NAME")
    if not endpoint:
        raise ValueError("HTTPHOOK_ENDPOINT environment variable required")

    levels = ALL_LEVELS
    levels_str = os.environ.get("HTTPHOOK_LEVELS", "")
    if levels_str.strip():
        levels = parse_levels(levels_str)

    return HTTPHook(name=service_name, endpoint=endpoint, levels=levels)
