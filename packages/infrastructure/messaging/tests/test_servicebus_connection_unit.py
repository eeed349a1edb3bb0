"""Unit tests for ServiceBusConnectionManager (no real namespace)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from mail_relay_core.primitives.exceptions import ConfigurationError
from mail_relay_messaging.config import ConsumerSettings
from mail_relay_messaging.exceptions import MessagingConnectionError
from mail_relay_messaging.servicebus import ServiceBusConnectionManager

CONN_STR = "Endpoint=sb://example.servicebus.windows.net/;SharedAccessKeyName=k;SharedAccessKey=v"


def test_requires_connection_string_or_client() -> None:
    with pytest.raises(ConfigurationError):
        ServiceBusConnectionManager()


def test_from_settings_reads_named_variable() -> None:
    settings = ConsumerSettings(connection_setting="MailBus")
    conn = ServiceBusConnectionManager.from_settings(settings, {"MailBus": CONN_STR})
    assert conn._connection_string == CONN_STR


def test_from_settings_missing_variable() -> None:
    with pytest.raises(ConfigurationError, match="ServiceBusConnection"):
        ServiceBusConnectionManager.from_settings(ConsumerSettings(), {})


@pytest.mark.asyncio
async def test_get_client_creates_and_caches() -> None:
    with patch(
        "mail_relay_messaging.servicebus.connection.ServiceBusClient"
    ) as client_cls:
        conn = ServiceBusConnectionManager(CONN_STR, retry_total=2)
        client1 = await conn.get_client()
        client2 = await conn.get_client()
    assert client1 is client2
    client_cls.from_connection_string.assert_called_once_with(
        conn_str=CONN_STR, retry_total=2
    )


@pytest.mark.asyncio
async def test_get_client_invalid_connection_string() -> None:
    with patch(
        "mail_relay_messaging.servicebus.connection.ServiceBusClient"
    ) as client_cls:
        client_cls.from_connection_string.side_effect = ValueError("bad")
        conn = ServiceBusConnectionManager("garbage")
        with pytest.raises(MessagingConnectionError):
            await conn.get_client()


@pytest.mark.asyncio
async def test_close_releases_client() -> None:
    client = MagicMock()
    client.close = AsyncMock()
    conn = ServiceBusConnectionManager(client=client)
    await conn.close()
    client.close.assert_awaited_once()
    await conn.close()
    client.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_health_check() -> None:
    receiver = MagicMock()
    receiver.__aenter__ = AsyncMock(return_value=receiver)
    receiver.__aexit__ = AsyncMock(return_value=None)
    receiver.peek_messages = AsyncMock(return_value=[])
    client = MagicMock()
    client.get_queue_receiver = MagicMock(return_value=receiver)
    conn = ServiceBusConnectionManager(client=client)

    assert await conn.health_check("email-messages") is True
    client.get_queue_receiver.assert_called_once_with(queue_name="email-messages")

    receiver.peek_messages.side_effect = RuntimeError("unreachable")
    assert await conn.health_check("email-messages") is False
