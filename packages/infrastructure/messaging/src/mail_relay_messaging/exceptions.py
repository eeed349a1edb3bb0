"""Messaging-specific exceptions for mail-relay-messaging."""

from __future__ import annotations

from mail_relay_core.primitives.exceptions import InfrastructureError


class MessagingError(InfrastructureError):
    """Base class for all transport-related infrastructure errors."""


class MessagingConnectionError(MessagingError):
    """Raised when connectivity to the message broker fails."""
