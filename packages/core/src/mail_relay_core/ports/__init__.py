from mail_relay_core.ports.messaging import IEnvelopePublisher, IMessageActions, IReceivedMessage
from mail_relay_core.ports.observability import IObservabilitySink

__all__ = [
    "IEnvelopePublisher",
    "IMessageActions",
    "IObservabilitySink",
    "IReceivedMessage",
]
