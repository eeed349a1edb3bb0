"""Transports, settings and worker wiring for mail-relay (Service Bus and in-memory)."""

from __future__ import annotations

from .config import ConsumerSettings, get_settings
from .exceptions import MessagingConnectionError, MessagingError
from .logging_config import JSONFormatter, MessageContextFilter, configure_logging
from .memory import (
    InMemoryHost,
    InMemoryMessageActions,
    InMemoryQueue,
    InMemoryReceivedMessage,
)
from .worker import build_consumer

__all__ = [
    "ConsumerSettings",
    "InMemoryHost",
    "InMemoryMessageActions",
    "InMemoryQueue",
    "InMemoryReceivedMessage",
    "JSONFormatter",
    "MessageContextFilter",
    "MessagingConnectionError",
    "MessagingError",
    "build_consumer",
    "configure_logging",
    "get_settings",
]
