"""Correlation and message-id context for log records of one delivery."""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

# ContextVars survive await points and are copied into spawned tasks.
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_message_id: ContextVar[str | None] = ContextVar("message_id", default=None)


def get_correlation_id() -> str | None:
    """Get current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Set correlation ID in context."""
    _correlation_id.set(correlation_id)


def get_message_id() -> str | None:
    """Get the id of the queue message currently being handled."""
    return _message_id.get()


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def get_context_vars() -> dict[str, str | None]:
    """Get all correlation context variables (e.g. for log record enrichment)."""
    return {
        "correlation_id": get_correlation_id(),
        "message_id": get_message_id(),
    }


@contextmanager
def message_context(
    message_id: str | None,
    correlation_id: str | None = None,
) -> Iterator[str]:
    """Bind *message_id* (and a correlation id) for the duration of one invocation.

    An existing correlation id is kept; otherwise *correlation_id* or a fresh
    one is used. Both variables are restored on exit.
    """
    cid = get_correlation_id() or correlation_id or generate_correlation_id()
    message_token = _message_id.set(message_id)
    correlation_token = _correlation_id.set(cid)
    try:
        yield cid
    finally:
        _correlation_id.reset(correlation_token)
        _message_id.reset(message_token)
