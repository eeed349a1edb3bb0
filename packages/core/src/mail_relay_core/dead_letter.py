"""DeadLetterHandler — route undecodable messages to the dead-letter sub-queue."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from .ports.messaging import IReceivedMessage
    from .primitives.exceptions import EnvelopeDecodeError
    from .settlement import SettlementGuard

INVALID_FORMAT_REASON = "InvalidFormat"


class DeadLetterHandler:
    """Dead-letters messages whose body cannot be decoded.

    Every decode failure uses the same reason code; the description names
    the concrete failure so operators can triage the dead-letter sub-queue.
    """

    def __init__(
        self,
        reason: str = INVALID_FORMAT_REASON,
        *,
        on_dead_letter: (
            Callable[
                [IReceivedMessage, str, str, BaseException | None],
                Coroutine[Any, Any, None],
            ]
            | None
        ) = None,
    ) -> None:
        """Configure dead-letter handling.

        Args:
            reason: Reason code passed to the transport.
            on_dead_letter: Async callable (message, reason, description,
                exception) -> None, awaited after the transport accepted the
                dead-letter.
        """
        if not reason:
            raise ValueError("reason must be a non-empty string")
        self._reason = reason
        self._on_dead_letter = on_dead_letter

    @property
    def reason(self) -> str:
        return self._reason

    def describe(self, error: EnvelopeDecodeError) -> str:
        """Return the operator-facing description for *error*."""
        return f"Message body could not be deserialized: {error}"

    async def route(
        self,
        guard: SettlementGuard,
        message: IReceivedMessage,
        error: EnvelopeDecodeError,
    ) -> bool:
        """Dead-letter *message* through *guard*.

        Returns False when the message had already been settled.
        """
        description = self.describe(error)
        settled = await guard.dead_letter(self._reason, description)
        if settled and self._on_dead_letter is not None:
            await self._on_dead_letter(message, self._reason, description, error)
        return settled
