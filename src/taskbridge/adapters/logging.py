"""Python logging setup for taskbridge.

Log lines carry a ``[TaskBridge]`` prefix so they stand out in the host
application's console, and any ``extra=`` attributes passed to a logging
call are appended as ``key=value`` pairs.
"""

import logging
import sys
from typing import TextIO

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

DEFAULT_FORMAT = "[TaskBridge] %(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"


def extra_attributes(record: logging.LogRecord) -> dict[str, str | int | float | bool]:
    """Return the scalar attributes passed via ``extra=`` on a log call."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_LOGRECORD_ATTRS
        and isinstance(value, (str, int, float, bool))
    }


class StructuredFormatter(logging.Formatter):
    """Formatter that appends extra attributes to the message.

    Example:
        ``logger.info("Sending import batch", extra={"batch": 2, "size": 50})``
        renders as ``... Sending import batch batch=2 size=50``.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        attributes = extra_attributes(record)
        if not attributes:
            return message
        rendered = " ".join(f"{key}={value}" for key, value in attributes.items())
        # Keep tracebacks last.
        head, sep, tail = message.partition("\n")
        return f"{head} {rendered}{sep}{tail}"


class _BridgeStreamHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """Stream handler installed by configure_logging()."""


def configure_logging(
    level: int | str = logging.INFO,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Attach a structured stream handler to the ``taskbridge`` logger.

    Calling this again replaces the handler installed by the previous call.

    Args:
        level: Level for the taskbridge logger.
        stream: Output stream (default: stderr).

    Returns:
        The installed handler.
    """
    logger = logging.getLogger("taskbridge")
    logger.setLevel(level)
    for existing in list(logger.handlers):
        if isinstance(existing, _BridgeStreamHandler):
            logger.removeHandler(existing)

    handler = _BridgeStreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter(DEFAULT_FORMAT, DEFAULT_DATEFMT))
    logger.addHandler(handler)
    return handler
