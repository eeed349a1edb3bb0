"""SettlementGuard — at most one disposition per delivered message."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from .primitives.exceptions import MessageAlreadySettledError, SettlementError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .ports.messaging import IMessageActions, IReceivedMessage

logger = logging.getLogger("mail_relay.settlement")


class SettlementOutcome(str, enum.Enum):
    """Terminal disposition the consumer chose for a message."""

    COMPLETED = "completed"
    DEAD_LETTERED = "dead_lettered"


class SettlementGuard:
    """Wraps :class:`IMessageActions` for one delivery.

    The first successful settlement wins; later attempts are ignored with a
    warning. A transport reporting the message as already settled is treated
    as settled. Any other transport failure surfaces as
    :class:`SettlementError` and is never retried here.
    """

    def __init__(self, actions: IMessageActions, message: IReceivedMessage) -> None:
        self._actions = actions
        self._message = message
        self._outcome: SettlementOutcome | None = None

    @property
    def outcome(self) -> SettlementOutcome | None:
        return self._outcome

    @property
    def settled(self) -> bool:
        return self._outcome is not None

    async def complete(self) -> bool:
        """Complete the message. Returns False if it was already settled."""
        return await self._settle(
            SettlementOutcome.COMPLETED,
            lambda: self._actions.complete(self._message),
        )

    async def dead_letter(self, reason: str, description: str) -> bool:
        """Dead-letter the message. Returns False if it was already settled."""
        return await self._settle(
            SettlementOutcome.DEAD_LETTERED,
            lambda: self._actions.dead_letter(self._message, reason, description),
        )

    async def _settle(
        self,
        outcome: SettlementOutcome,
        call: Callable[[], Awaitable[None]],
    ) -> bool:
        message_id = self._message.message_id
        if self._outcome is not None:
            logger.warning(
                "Message %s already %s; ignoring %s",
                message_id,
                self._outcome.value,
                outcome.value,
            )
            return False
        try:
            await call()
        except MessageAlreadySettledError:
            logger.debug("Message %s was already settled by the transport", message_id)
        except SettlementError:
            raise
        except Exception as e:
            raise SettlementError(
                f"Failed to settle message {message_id} as {outcome.value}: {e}",
                message_id=message_id,
            ) from e
        self._outcome = outcome
        return True
