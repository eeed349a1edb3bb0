"""Pytest fixtures for mail-relay-core tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest


@dataclass
class FakeMessage:
    message_id: str | None = "msg-1"
    body: Any = b"{}"


class RecordingActions:
    """IMessageActions double that records calls; set ``error`` to make them fail."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.error: BaseException | None = None

    async def complete(self, message: Any) -> None:
        self.calls.append(("complete", message.message_id))
        if self.error is not None:
            raise self.error

    async def dead_letter(self, message: Any, reason: str, description: str) -> None:
        self.calls.append(("dead_letter", message.message_id, reason, description))
        if self.error is not None:
            raise self.error

    def count(self, action: str) -> int:
        return sum(1 for c in self.calls if c[0] == action)


@pytest.fixture
def actions() -> RecordingActions:
    return RecordingActions()


@pytest.fixture
def make_message() -> Any:
    def _make(body: Any = b"{}", message_id: str | None = "msg-1") -> FakeMessage:
        return FakeMessage(message_id=message_id, body=body)

    return _make
