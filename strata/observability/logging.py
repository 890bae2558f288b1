"""
Strata Cache - Logging Setup

Structured logging for the cache runtime. Modules log through the standard
``logging.getLogger(__name__)`` loggers and attach context via ``extra={...}``;
this module only decides how those records are rendered.
"""

import json
import logging
from datetime import UTC, datetime

_RESERVED_ATTRS = frozenset(
    {
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "name",
        "message",
        "taskName",
    }
)

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Extra fields passed via logger.xxx(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in log_data and not key.startswith("_") and key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(level: str = "INFO", fmt: str = "json") -> logging.Logger:
    """
    Install a single stream handler on the ``strata`` logger.

    Calling this again replaces the previous handler, so it is safe to call
    after a configuration reload.

    Args:
        level: Log level name
        fmt: ``"json"`` for structured output, ``"text"`` for human-readable lines

    Returns:
        The configured ``strata`` logger
    """
    logger = logging.getLogger("strata")
    logger.handlers.clear()

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False

    return logger
