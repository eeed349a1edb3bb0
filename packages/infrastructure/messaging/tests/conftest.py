"""Pytest fixtures for mail-relay-messaging tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from mail_relay_core.consumer import EnvelopeConsumer
from mail_relay_messaging.memory import InMemoryHost, InMemoryQueue


@pytest.fixture
def queue() -> InMemoryQueue:
    return InMemoryQueue(max_delivery_count=3)


@pytest.fixture
def host(queue: InMemoryQueue) -> InMemoryHost:
    return InMemoryHost(queue, EnvelopeConsumer())


@pytest.fixture
def email_body() -> Any:
    def _body(**overrides: Any) -> bytes:
        data = {
            "subject": "Quarterly report",
            "from": "alice@example.com",
            "receivedAt": "2024-05-01T09:30:00Z",
            "bodyPreview": "Please find attached the report.",
        }
        data.update(overrides)
        return json.dumps(data).encode("utf-8")

    return _body
