"""Settlement adapter over an async ``ServiceBusReceiver``."""

from __future__ import annotations

import json
from typing import Any

from azure.servicebus.amqp import AmqpMessageBodyType
from azure.servicebus.exceptions import MessageAlreadySettled, ServiceBusError

from mail_relay_core.ports.messaging import IMessageActions
from mail_relay_core.primitives.exceptions import (
    MessageAlreadySettledError,
    SettlementError,
)


class ServiceBusDelivery:
    """Adapts a ``ServiceBusReceivedMessage`` to ``IReceivedMessage``.

    The body is read once. Data bodies arrive as a sequence of byte sections
    and are joined; value and sequence bodies are handed on as JSON text.
    """

    def __init__(self, raw: Any) -> None:
        self.raw = raw
        self._body = _read_body(raw)

    @property
    def message_id(self) -> str | None:
        return self.raw.message_id

    @property
    def body(self) -> bytes | str:
        return self._body

    @property
    def delivery_count(self) -> int:
        return int(self.raw.delivery_count or 0)


def _read_body(raw: Any) -> bytes | str:
    body = raw.body
    if isinstance(body, (bytes, str)):
        return body
    if isinstance(body, (bytearray, memoryview)):
        return bytes(body)
    if getattr(raw, "body_type", AmqpMessageBodyType.DATA) == AmqpMessageBodyType.DATA:
        return b"".join(body)
    # AMQP value and sequence bodies are rendered as JSON text for the decoder.
    try:
        return json.dumps(body, default=_json_default)
    except (TypeError, ValueError):
        # Not representable as JSON (e.g. binary map keys); decodes as malformed.
        return str(body)


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


class ServiceBusMessageActions(IMessageActions):
    """Completes and dead-letters ``ServiceBusDelivery`` messages via the receiver."""

    def __init__(self, receiver: Any) -> None:
        self._receiver = receiver

    async def complete(self, message: Any) -> None:
        try:
            await self._receiver.complete_message(_raw(message))
        except MessageAlreadySettled as e:
            raise MessageAlreadySettledError(str(e), message.message_id) from e
        except ServiceBusError as e:
            raise SettlementError(
                f"Failed to complete message {message.message_id}: {e}",
                message_id=message.message_id,
            ) from e

    async def dead_letter(self, message: Any, reason: str, description: str) -> None:
        try:
            await self._receiver.dead_letter_message(
                _raw(message),
                reason=reason,
                error_description=description,
            )
        except MessageAlreadySettled as e:
            raise MessageAlreadySettledError(str(e), message.message_id) from e
        except ServiceBusError as e:
            raise SettlementError(
                f"Failed to dead-letter message {message.message_id}: {e}",
                message_id=message.message_id,
            ) from e

    async def abandon(self, message: Any) -> None:
        """Release the lock now instead of waiting for it to expire (host use only)."""
        try:
            await self._receiver.abandon_message(_raw(message))
        except MessageAlreadySettled as e:
            raise MessageAlreadySettledError(str(e), message.message_id) from e
        except ServiceBusError as e:
            raise SettlementError(
                f"Failed to abandon message {message.message_id}: {e}",
                message_id=message.message_id,
            ) from e


def _raw(message: Any) -> Any:
    return message.raw if isinstance(message, ServiceBusDelivery) else message
