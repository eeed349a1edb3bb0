"""EnvelopeConsumer — decode, log and settle one delivered message."""

from __future__ import annotations

import enum
import logging
import time
from typing import TYPE_CHECKING

from .correlation import message_context
from .dead_letter import DeadLetterHandler
from .observability import LoggingSink, emit_structured_entry
from .primitives.exceptions import (
    EnvelopeDecodeError,
    MailRelayError,
    ProcessingCancelledError,
    ProcessingError,
)
from .serialization import EnvelopeSerializer
from .settlement import SettlementGuard, SettlementOutcome

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Callable

    from .ports.messaging import IMessageActions, IReceivedMessage
    from .ports.observability import IObservabilitySink

logger = logging.getLogger("mail_relay.consumer")


class ConsumerState(str, enum.Enum):
    """Where an invocation is in its lifecycle."""

    RECEIVED = "received"
    VALIDATED = "validated"
    COMPLETED = "completed"
    DEAD_LETTERED = "dead_lettered"
    ABANDONED = "abandoned"


class EnvelopeConsumer:
    """Handles exactly one delivered message per :meth:`handle` call.

    Transitions:

    * ``RECEIVED -> VALIDATED -> COMPLETED`` when the body decodes;
    * ``RECEIVED -> DEAD_LETTERED`` (reason ``InvalidFormat``) when it does not;
    * ``ABANDONED`` when anything else fails. Nothing is settled and the
      error propagates, so the queue redelivers after the lock expires.

    The consumer keeps no state between calls, so concurrent calls for
    distinct messages are safe.

    Usage::

        consumer = EnvelopeConsumer()
        outcome = await consumer.handle(message, actions)
    """

    def __init__(
        self,
        *,
        serializer: EnvelopeSerializer | None = None,
        sink: IObservabilitySink | None = None,
        dead_letter: DeadLetterHandler | None = None,
    ) -> None:
        self._serializer = serializer or EnvelopeSerializer()
        self._sink = sink or LoggingSink()
        self._dead_letter = dead_letter or DeadLetterHandler()

    async def handle(
        self,
        message: IReceivedMessage,
        actions: IMessageActions,
        *,
        cancellation: asyncio.Event | None = None,
    ) -> SettlementOutcome:
        """Process *message* and settle it through *actions*.

        Args:
            message: The delivered message (id + raw body).
            actions: Settlement actions for this delivery.
            cancellation: Set by the host to request cancellation. Once set,
                the message is not settled.

        Raises:
            ProcessingError: handling failed after decode and before
                settlement; message unsettled.
            ProcessingCancelledError: cancellation observed before settlement.
            SettlementError: the transport rejected the settlement call.
        """
        message_id = message.message_id
        start = time.monotonic()
        state = ConsumerState.RECEIVED
        with message_context(message_id):
            try:
                outcome = await self._process(message, actions, cancellation)
                state = ConsumerState(outcome.value)
                return outcome
            except ProcessingCancelledError:
                # Already logged at WARNING when the cancellation was observed.
                state = ConsumerState.ABANDONED
                raise
            except Exception:
                state = ConsumerState.ABANDONED
                logger.exception("Error processing message %s", message_id)
                raise
            except BaseException:
                state = ConsumerState.ABANDONED
                raise
            finally:
                emit_structured_entry(
                    message_id,
                    state.value,
                    (time.monotonic() - start) * 1000,
                )

    async def _process(
        self,
        message: IReceivedMessage,
        actions: IMessageActions,
        cancellation: asyncio.Event | None,
    ) -> SettlementOutcome:
        message_id = message.message_id
        guard = SettlementGuard(actions, message)
        self._notify(self._sink.message_received, message_id)

        try:
            envelope = self._serializer.deserialize(message.body)
        except EnvelopeDecodeError as e:
            self._notify(self._sink.decode_failed, message_id, e)
            self._raise_if_cancelled(message_id, cancellation)
            await self._dead_letter.route(guard, message, e)
            return SettlementOutcome.DEAD_LETTERED

        # VALIDATED
        self._notify(self._sink.envelope_decoded, message_id, envelope)
        self._raise_if_cancelled(message_id, cancellation)
        await guard.complete()
        self._report_completed(message_id)
        return SettlementOutcome.COMPLETED

    def _notify(self, event: Callable[..., None], message_id: str | None, *args: object) -> None:
        """Invoke a sink event; any failure becomes a ProcessingError."""
        try:
            event(message_id, *args)
        except MailRelayError:
            raise
        except Exception as e:
            raise ProcessingError(
                f"Failed to process message {message_id}: {e}",
                message_id=message_id,
            ) from e

    def _report_completed(self, message_id: str | None) -> None:
        """Log completion. The message is already settled, so a sink failure
        here cannot change the outcome."""
        try:
            self._sink.message_completed(message_id)
        except Exception:  # noqa: BLE001
            logger.debug(
                "Failed to log completion of message %s", message_id, exc_info=True
            )

    @staticmethod
    def _raise_if_cancelled(
        message_id: str | None, cancellation: asyncio.Event | None
    ) -> None:
        if cancellation is not None and cancellation.is_set():
            logger.warning(
                "Cancellation requested; leaving message %s unsettled", message_id
            )
            raise ProcessingCancelledError(
                f"Processing of message {message_id} was cancelled",
                message_id=message_id,
            )
