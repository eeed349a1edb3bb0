from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..envelope import Envelope


@runtime_checkable
class IReceivedMessage(Protocol):
    """
    A message delivered by the queue under a lock.

    The queue owns the message; the consumer only borrows it for one
    invocation.
    """

    @property
    def message_id(self) -> str | None: ...

    @property
    def body(self) -> Any:
        """Raw body, ``bytes`` or ``str``."""
        ...


@runtime_checkable
class IMessageActions(Protocol):
    """
    Port for settling a delivered message (Service Bus, in-memory, …).

    Abandonment has no method: a message that is neither completed nor
    dead-lettered is redelivered once its lock expires.
    """

    async def complete(self, message: IReceivedMessage) -> None:
        """Mark *message* as successfully processed."""
        ...

    async def dead_letter(
        self,
        message: IReceivedMessage,
        reason: str,
        description: str,
    ) -> None:
        """
        Move *message* to the dead-letter sub-queue.

        Args:
            message: The delivered message.
            reason: Machine-readable reason code (e.g. ``InvalidFormat``).
            description: Human-readable explanation for operators.
        """
        ...


@runtime_checkable
class IEnvelopePublisher(Protocol):
    """Port for the producer side: put an envelope on the queue."""

    async def publish(self, envelope: Envelope, **kwargs: Any) -> None:
        """Serialize and send *envelope*."""
        ...
