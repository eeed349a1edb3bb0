"""mail-relay-core — envelope model, decoder and the settling consumer.

Zero transport dependencies. Transports live in mail-relay-messaging.
"""

from __future__ import annotations

from .consumer import ConsumerState, EnvelopeConsumer
from .correlation import (
    generate_correlation_id,
    get_context_vars,
    get_correlation_id,
    get_message_id,
    message_context,
    set_correlation_id,
)
from .dead_letter import INVALID_FORMAT_REASON, DeadLetterHandler
from .envelope import DEFAULT_PREVIEW_LENGTH, Envelope
from .observability import LoggingSink
from .ports import (
    IEnvelopePublisher,
    IMessageActions,
    IObservabilitySink,
    IReceivedMessage,
)
from .primitives import (
    ConfigurationError,
    EnvelopeDecodeError,
    InfrastructureError,
    MailRelayError,
    MessageAlreadySettledError,
    ProcessingCancelledError,
    ProcessingError,
    SettlementError,
)
from .serialization import EnvelopeSerializer
from .settlement import SettlementGuard, SettlementOutcome

__all__ = [
    "DEFAULT_PREVIEW_LENGTH",
    "INVALID_FORMAT_REASON",
    "ConfigurationError",
    "ConsumerState",
    "DeadLetterHandler",
    "Envelope",
    "EnvelopeConsumer",
    "EnvelopeDecodeError",
    "EnvelopeSerializer",
    "IEnvelopePublisher",
    "IMessageActions",
    "IObservabilitySink",
    "IReceivedMessage",
    "InfrastructureError",
    "LoggingSink",
    "MailRelayError",
    "MessageAlreadySettledError",
    "ProcessingCancelledError",
    "ProcessingError",
    "SettlementError",
    "SettlementGuard",
    "SettlementOutcome",
    "generate_correlation_id",
    "get_context_vars",
    "get_correlation_id",
    "get_message_id",
    "message_context",
    "set_correlation_id",
]
