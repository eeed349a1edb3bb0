"""Logging setup for the worker process.

Library modules only create named loggers; the worker calls
:func:`configure_logging` once at start-up.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from mail_relay_core.correlation import get_context_vars

_PLAIN_FORMAT = (
    "%(asctime)s %(levelname)s [%(name)s] "
    "[message_id=%(message_id)s] %(message)s"
)


class MessageContextFilter(logging.Filter):
    """Stamp records with the message id and correlation id of the invocation."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in get_context_vars().items():
            if not hasattr(record, key):
                setattr(record, key, value or "-")
        return True


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message_id": getattr(record, "message_id", "-"),
            "correlation_id": getattr(record, "correlation_id", "-"),
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["error"] = str(record.exc_info[1])
            log_data["traceback"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def configure_logging(level: str = "INFO", json_format: bool = False) -> logging.Handler:
    """Install a single stdout handler on the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        json_format: Use :class:`JSONFormatter` instead of the plain format.

    Returns:
        The installed handler.
    """
    level_const = getattr(logging, str(level).upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level_const)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level_const)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(_PLAIN_FORMAT))
    handler.addFilter(MessageContextFilter())
    root_logger.addHandler(handler)

    # The SDK logs every AMQP frame at INFO.
    logging.getLogger("azure").setLevel(logging.WARNING)
    logging.getLogger("uamqp").setLevel(logging.WARNING)
    return handler
