"""ServiceBusConsumer — peek-lock receive loop hosting an EnvelopeConsumer."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from azure.servicebus import ServiceBusReceiveMode

from mail_relay_core.primitives.exceptions import SettlementError

from .actions import ServiceBusDelivery, ServiceBusMessageActions

if TYPE_CHECKING:
    from mail_relay_core.consumer import EnvelopeConsumer

    from ..config import ConsumerSettings
    from .connection import ServiceBusConnectionManager

logger = logging.getLogger("mail_relay.servicebus")


class ServiceBusConsumer:
    """Receives from one queue and hands each message to the consumer.

    Messages are received in PEEK_LOCK mode. The consumer settles them; when
    it raises, the host only abandons (or, with ``abandon_on_error=False``,
    lets the lock expire). It never completes or dead-letters on the
    consumer's behalf.
    """

    def __init__(
        self,
        connection: ServiceBusConnectionManager,
        consumer: EnvelopeConsumer,
        *,
        queue_name: str = "email-messages",
        max_message_count: int = 1,
        max_concurrent_calls: int = 1,
        max_wait_time: float = 5.0,
        abandon_on_error: bool = True,
        receive_error_delay: float = 1.0,
    ) -> None:
        """Configure the host.

        Args:
            connection: Shared connection manager.
            consumer: Handler invoked once per delivered message.
            queue_name: Queue to receive from.
            max_message_count: Messages fetched per receive call.
            max_concurrent_calls: Handlers allowed in flight at once.
            max_wait_time: Seconds each receive call waits.
            abandon_on_error: Abandon failed messages right away.
            receive_error_delay: Pause after a failed receive call.
        """
        if max_message_count < 1 or max_concurrent_calls < 1:
            raise ValueError("max_message_count and max_concurrent_calls must be >= 1")
        self._connection = connection
        self._consumer = consumer
        self._queue_name = queue_name
        self._max_message_count = max_message_count
        self._max_wait_time = max_wait_time
        self._abandon_on_error = abandon_on_error
        self._receive_error_delay = receive_error_delay
        self._semaphore = asyncio.Semaphore(max_concurrent_calls)
        self._stopping = asyncio.Event()
        self._running = False

    @classmethod
    def from_settings(
        cls,
        connection: ServiceBusConnectionManager,
        consumer: EnvelopeConsumer,
        settings: ConsumerSettings,
    ) -> ServiceBusConsumer:
        return cls(
            connection,
            consumer,
            queue_name=settings.queue_name,
            max_message_count=settings.max_message_count,
            max_concurrent_calls=settings.max_concurrent_calls,
            max_wait_time=settings.max_wait_time,
            abandon_on_error=settings.abandon_on_error,
        )

    @property
    def running(self) -> bool:
        return self._running

    async def run(self) -> None:
        """Receive and dispatch until :meth:`stop` is called."""
        self._running = True
        self._stopping.clear()
        client = await self._connection.get_client()
        receiver = client.get_queue_receiver(
            queue_name=self._queue_name,
            receive_mode=ServiceBusReceiveMode.PEEK_LOCK,
        )
        logger.info("Listening on queue %s", self._queue_name)
        async with receiver:
            actions = ServiceBusMessageActions(receiver)
            while self._running:
                try:
                    batch = await receiver.receive_messages(
                        max_message_count=self._max_message_count,
                        max_wait_time=self._max_wait_time,
                    )
                except Exception:  # noqa: BLE001
                    logger.warning(
                        "Receive from %s failed", self._queue_name, exc_info=True
                    )
                    await asyncio.sleep(self._receive_error_delay)
                    continue
                if batch:
                    await asyncio.gather(
                        *(self._dispatch(actions, raw) for raw in batch)
                    )
        logger.info("Stopped listening on queue %s", self._queue_name)

    async def _dispatch(self, actions: ServiceBusMessageActions, raw: Any) -> None:
        async with self._semaphore:
            delivery = ServiceBusDelivery(raw)
            try:
                await self._consumer.handle(
                    delivery, actions, cancellation=self._stopping
                )
            except Exception:  # noqa: BLE001
                # Already logged by the consumer; the queue owns redelivery.
                if self._abandon_on_error:
                    await self._abandon(actions, delivery)

    async def _abandon(
        self, actions: ServiceBusMessageActions, delivery: ServiceBusDelivery
    ) -> None:
        try:
            await actions.abandon(delivery)
        except SettlementError:
            logger.debug(
                "Could not abandon message %s; lock will expire",
                delivery.message_id,
                exc_info=True,
            )

    async def stop(self) -> None:
        """Stop the loop; in-flight handlers see the cancellation signal."""
        self._running = False
        self._stopping.set()

    async def health_check(self) -> bool:
        """Return True if the queue is reachable."""
        return await self._connection.health_check(self._queue_name)
