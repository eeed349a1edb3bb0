"""In-memory transport adapters for testing."""

from __future__ import annotations

from .actions import InMemoryMessageActions
from .host import InMemoryHost
from .queue import MAX_DELIVERY_COUNT_REASON, InMemoryQueue, InMemoryReceivedMessage

__all__ = [
    "MAX_DELIVERY_COUNT_REASON",
    "InMemoryHost",
    "InMemoryMessageActions",
    "InMemoryQueue",
    "InMemoryReceivedMessage",
]
