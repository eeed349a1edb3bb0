"""Primitives: exceptions."""

from __future__ import annotations

from .exceptions import (
    ConfigurationError,
    EnvelopeDecodeError,
    InfrastructureError,
    MailRelayError,
    MessageAlreadySettledError,
    ProcessingCancelledError,
    ProcessingError,
    SettlementError,
)

__all__ = [
    "ConfigurationError",
    "EnvelopeDecodeError",
    "InfrastructureError",
    "MailRelayError",
    "MessageAlreadySettledError",
    "ProcessingCancelledError",
    "ProcessingError",
    "SettlementError",
]
