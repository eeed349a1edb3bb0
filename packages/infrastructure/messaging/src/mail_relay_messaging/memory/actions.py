"""InMemoryMessageActions — IMessageActions with assertion helpers for tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mail_relay_core.ports.messaging import IMessageActions

if TYPE_CHECKING:
    from mail_relay_core.ports.messaging import IReceivedMessage

    from .queue import InMemoryQueue


class InMemoryMessageActions(IMessageActions):
    """Settles messages on an :class:`InMemoryQueue` and records every call.

    Pass ``error`` to make every settlement call raise it, e.g. to simulate
    a transport outage. Settling a message twice raises
    ``MessageAlreadySettledError`` from the queue, as Service Bus does.
    """

    def __init__(self, queue: InMemoryQueue, *, error: BaseException | None = None) -> None:
        self._queue = queue
        self._error = error
        self._calls: list[tuple[Any, ...]] = []

    async def complete(self, message: IReceivedMessage) -> None:
        self._calls.append(("complete", message.message_id))
        if self._error is not None:
            raise self._error
        self._queue.complete(str(message.message_id))

    async def dead_letter(
        self,
        message: IReceivedMessage,
        reason: str,
        description: str,
    ) -> None:
        self._calls.append(("dead_letter", message.message_id, reason, description))
        if self._error is not None:
            raise self._error
        self._queue.dead_letter(str(message.message_id), reason, description)

    @property
    def calls(self) -> list[tuple[Any, ...]]:
        """Return all recorded (action, message_id, …) tuples in order."""
        return list(self._calls)

    def calls_for(self, message_id: str | None, action: str | None = None) -> list[tuple[Any, ...]]:
        return [
            c
            for c in self._calls
            if c[1] == message_id and (action is None or c[0] == action)
        ]

    def assert_completed(self, message_id: str | None, count: int = 1) -> None:
        """Assert ``complete`` was called exactly *count* times for the message."""
        completes = self.calls_for(message_id, "complete")
        assert len(completes) == count, (
            f"Expected {count} complete call(s) for {message_id!r}, "
            f"got {len(completes)}. Calls: {self.calls_for(message_id)}"
        )

    def assert_dead_lettered(
        self,
        message_id: str | None,
        reason: str | None = None,
        count: int = 1,
    ) -> None:
        """Assert ``dead_letter`` was called *count* times (optionally with *reason*)."""
        dead = self.calls_for(message_id, "dead_letter")
        if reason is not None:
            dead = [c for c in dead if c[2] == reason]
        assert len(dead) == count, (
            f"Expected {count} dead_letter call(s) for {message_id!r} "
            f"(reason={reason!r}), got {len(dead)}. Calls: {self.calls_for(message_id)}"
        )

    def assert_not_settled(self, message_id: str | None) -> None:
        """Assert neither ``complete`` nor ``dead_letter`` was called for the message."""
        calls = self.calls_for(message_id)
        assert not calls, f"Expected no settlement for {message_id!r}, got {calls}"
