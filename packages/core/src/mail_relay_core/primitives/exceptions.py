"""Exception hierarchy for mail-relay-core."""

from __future__ import annotations


class MailRelayError(Exception):
    """Root exception for the entire mail-relay toolkit."""


class ConfigurationError(MailRelayError):
    """Raised when required settings are missing or invalid."""


class ProcessingError(MailRelayError):
    """Raised when handling fails after the envelope was decoded.

    The message is left unsettled so the queue redelivers it once the lock
    expires.
    """

    def __init__(self, message: str, message_id: str | None = None) -> None:
        self.message_id = message_id
        super().__init__(message)


class ProcessingCancelledError(ProcessingError):
    """Raised when cancellation is observed before the message was settled."""


class InfrastructureError(MailRelayError):
    """Base class for all infrastructure-related errors."""


class EnvelopeDecodeError(InfrastructureError):
    """Raised when a message body cannot be decoded into an Envelope.

    ``kind`` names the failure (``malformed``, ``encoding``, ``not_an_object``,
    ``invalid_field``) for diagnostics; every kind is dead-lettered the same way.
    """

    def __init__(self, message: str, kind: str = "malformed") -> None:
        self.kind = kind
        super().__init__(message)


class SettlementError(InfrastructureError):
    """Raised when completing or dead-lettering a message fails.

    Fatal to the current invocation; settlement is never retried in-process.
    """

    def __init__(self, message: str, message_id: str | None = None) -> None:
        self.message_id = message_id
        super().__init__(message)


class MessageAlreadySettledError(SettlementError):
    """Raised by transports when a message was already completed or dead-lettered."""
