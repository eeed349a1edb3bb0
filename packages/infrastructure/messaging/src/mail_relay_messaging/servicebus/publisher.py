"""ServiceBusPublisher — relay side: put envelopes on the queue."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from azure.servicebus import ServiceBusMessage
from azure.servicebus.exceptions import ServiceBusError
from pydantic import ValidationError

from mail_relay_core.correlation import get_correlation_id
from mail_relay_core.envelope import Envelope
from mail_relay_core.ports.messaging import IEnvelopePublisher
from mail_relay_core.serialization import EnvelopeSerializer

from ..exceptions import MessagingError

if TYPE_CHECKING:
    from .connection import ServiceBusConnectionManager


def _message_to_envelope(message: Any) -> Envelope:
    """Build an Envelope from an Envelope or a wire-keyed dict."""
    if isinstance(message, Envelope):
        return message
    if isinstance(message, dict):
        try:
            return Envelope.from_wire(message)
        except ValidationError as e:
            raise MessagingError(f"Invalid envelope: {e}") from e
    raise MessagingError(f"Cannot publish {type(message).__name__} as an envelope")


class ServiceBusPublisher(IEnvelopePublisher):
    """Sends serialized envelopes to one queue as ``application/json``."""

    def __init__(
        self,
        connection: ServiceBusConnectionManager,
        queue_name: str = "email-messages",
        *,
        serializer: EnvelopeSerializer | None = None,
    ) -> None:
        self._connection = connection
        self._queue_name = queue_name
        self._serializer = serializer or EnvelopeSerializer()

    async def publish(self, envelope: Envelope | dict[str, Any], **kwargs: Any) -> None:
        """Publish *envelope*. ``message_id`` and ``correlation_id`` kwargs are
        copied onto the Service Bus message."""
        body = self._serializer.serialize(_message_to_envelope(envelope))
        message_kwargs: dict[str, Any] = {
            "message_id": kwargs.get("message_id"),
            "correlation_id": kwargs.get("correlation_id") or get_correlation_id(),
            "application_properties": kwargs.get("properties"),
        }
        message = ServiceBusMessage(
            body,
            content_type="application/json",
            **{k: v for k, v in message_kwargs.items() if v is not None},
        )
        client = await self._connection.get_client()
        sender = client.get_queue_sender(queue_name=self._queue_name)
        try:
            async with sender:
                await sender.send_messages(message)
        except ServiceBusError as e:
            raise MessagingError(
                f"Failed to publish to queue {self._queue_name!r}: {e}"
            ) from e

    async def health_check(self) -> bool:
        """Return True if the queue is reachable."""
        return await self._connection.health_check(self._queue_name)
