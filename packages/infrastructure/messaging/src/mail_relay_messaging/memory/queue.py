"""In-memory queue for testing: peek-lock delivery with redelivery and DLQ."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mail_relay_core.primitives.exceptions import MessageAlreadySettledError
from mail_relay_core.serialization import EnvelopeSerializer

if TYPE_CHECKING:
    from mail_relay_core.envelope import Envelope

MAX_DELIVERY_COUNT_REASON = "MaxDeliveryCountExceeded"


@dataclass
class InMemoryReceivedMessage:
    """A message held by :class:`InMemoryQueue`."""

    message_id: str
    body: bytes | str
    delivery_count: int = 0
    dead_letter_reason: str | None = None
    dead_letter_description: str | None = None


class InMemoryQueue:
    """Simulates the broker side of the queue contract.

    ``receive()`` locks the next active message and bumps its delivery count.
    A locked message leaves the queue when completed or dead-lettered, and
    goes back to the active list when abandoned (lock expiry). Once a message
    has been delivered ``max_delivery_count`` times, abandoning it moves it to
    the dead-letter list with reason ``MaxDeliveryCountExceeded``; the
    consumer is not involved.
    """

    def __init__(
        self,
        name: str = "email-messages",
        *,
        max_delivery_count: int = 10,
        serializer: EnvelopeSerializer | None = None,
    ) -> None:
        if max_delivery_count < 1:
            raise ValueError("max_delivery_count must be >= 1")
        self.name = name
        self.max_delivery_count = max_delivery_count
        self._serializer = serializer or EnvelopeSerializer()
        self._active: list[InMemoryReceivedMessage] = []
        self._locked: dict[str, InMemoryReceivedMessage] = {}
        self._completed: list[InMemoryReceivedMessage] = []
        self._dead_lettered: list[InMemoryReceivedMessage] = []

    def send(
        self, body: bytes | str, message_id: str | None = None
    ) -> InMemoryReceivedMessage:
        """Enqueue a raw body."""
        message = InMemoryReceivedMessage(
            message_id=message_id or str(uuid.uuid4()),
            body=body,
        )
        self._active.append(message)
        return message

    def send_envelope(
        self, envelope: Envelope, message_id: str | None = None
    ) -> InMemoryReceivedMessage:
        """Serialize *envelope* and enqueue it."""
        return self.send(self._serializer.serialize(envelope), message_id=message_id)

    def receive(self) -> InMemoryReceivedMessage | None:
        """Lock and return the next active message, or None when empty."""
        if not self._active:
            return None
        message = self._active.pop(0)
        message.delivery_count += 1
        self._locked[message.message_id] = message
        return message

    def complete(self, message_id: str) -> None:
        self._completed.append(self._unlock(message_id))

    def dead_letter(self, message_id: str, reason: str, description: str) -> None:
        message = self._unlock(message_id)
        message.dead_letter_reason = reason
        message.dead_letter_description = description
        self._dead_lettered.append(message)

    def abandon(self, message_id: str) -> None:
        """Release the lock; the queue redelivers or dead-letters the message."""
        message = self._unlock(message_id)
        if message.delivery_count >= self.max_delivery_count:
            message.dead_letter_reason = MAX_DELIVERY_COUNT_REASON
            message.dead_letter_description = (
                f"Message could not be consumed after {message.delivery_count} "
                "delivery attempts."
            )
            self._dead_lettered.append(message)
        else:
            self._active.append(message)

    def _unlock(self, message_id: str) -> InMemoryReceivedMessage:
        try:
            return self._locked.pop(message_id)
        except KeyError:
            raise MessageAlreadySettledError(
                f"Message {message_id} is not locked on queue {self.name!r}",
                message_id=message_id,
            ) from None

    @property
    def active(self) -> list[InMemoryReceivedMessage]:
        return list(self._active)

    @property
    def locked(self) -> list[InMemoryReceivedMessage]:
        return list(self._locked.values())

    @property
    def completed(self) -> list[InMemoryReceivedMessage]:
        return list(self._completed)

    @property
    def dead_lettered(self) -> list[InMemoryReceivedMessage]:
        return list(self._dead_lettered)

    def clear(self) -> None:
        """Drop every message (for test teardown)."""
        self._active.clear()
        self._locked.clear()
        self._completed.clear()
        self._dead_lettered.clear()
