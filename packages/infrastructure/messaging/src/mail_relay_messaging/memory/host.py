"""InMemoryHost — drives an EnvelopeConsumer the way a function runtime would."""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

from mail_relay_core.primitives.exceptions import MessageAlreadySettledError

from .actions import InMemoryMessageActions

if TYPE_CHECKING:
    import asyncio

    from mail_relay_core.consumer import EnvelopeConsumer
    from mail_relay_core.settlement import SettlementOutcome

    from .queue import InMemoryQueue

logger = logging.getLogger("mail_relay.memory")


class InMemoryHost:
    """Dispatches queued messages to the consumer one invocation at a time.

    A handler exception abandons the message (lock expiry), so the queue
    redelivers it until its max delivery count is reached.
    """

    def __init__(
        self,
        queue: InMemoryQueue,
        consumer: EnvelopeConsumer,
        *,
        actions: InMemoryMessageActions | None = None,
    ) -> None:
        self._queue = queue
        self._consumer = consumer
        self._actions = actions or InMemoryMessageActions(queue)

    @property
    def actions(self) -> InMemoryMessageActions:
        return self._actions

    async def dispatch_one(
        self, cancellation: asyncio.Event | None = None
    ) -> SettlementOutcome | None:
        """Deliver the next message. Returns its outcome, or None if it was abandoned
        or the queue was empty."""
        message = self._queue.receive()
        if message is None:
            return None
        try:
            return await self._consumer.handle(
                message, self._actions, cancellation=cancellation
            )
        except Exception:  # noqa: BLE001
            logger.info(
                "Abandoning message %s (delivery %d)",
                message.message_id,
                message.delivery_count,
            )
            with contextlib.suppress(MessageAlreadySettledError):
                self._queue.abandon(message.message_id)
            return None

    async def drain(self, max_invocations: int = 1000) -> int:
        """Dispatch until the queue has no active messages. Returns invocations made."""
        invocations = 0
        while self._queue.active and invocations < max_invocations:
            await self.dispatch_one()
            invocations += 1
        return invocations
