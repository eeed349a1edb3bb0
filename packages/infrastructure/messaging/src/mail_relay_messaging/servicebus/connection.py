"""Service Bus client management and connection-setting resolution."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

from azure.servicebus.aio import ServiceBusClient

from mail_relay_core.primitives.exceptions import ConfigurationError

from ..exceptions import MessagingConnectionError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..config import ConsumerSettings


class ServiceBusConnectionManager:
    """Manages one shared async ``ServiceBusClient``.

    The connection string is handed to the SDK as-is; it is never parsed
    here.
    """

    def __init__(
        self,
        connection_string: str | None = None,
        *,
        client: Any = None,
        **client_kwargs: Any,
    ) -> None:
        """Configure with a connection string, or inject a ready client."""
        if not connection_string and client is None:
            raise ConfigurationError(
                "Either a connection string or a client must be provided"
            )
        self._connection_string = connection_string
        self._client_kwargs = client_kwargs
        self._client: Any = client

    @classmethod
    def from_settings(
        cls,
        settings: ConsumerSettings,
        environ: Mapping[str, str] | None = None,
        **client_kwargs: Any,
    ) -> ServiceBusConnectionManager:
        """Read the connection string from the variable named by
        ``settings.connection_setting``."""
        env = os.environ if environ is None else environ
        value = env.get(settings.connection_setting)
        if not value:
            raise ConfigurationError(
                f"Connection setting {settings.connection_setting!r} is not set"
            )
        return cls(value, **client_kwargs)

    async def get_client(self) -> Any:
        """Return shared client; create if needed."""
        if self._client is None:
            try:
                self._client = ServiceBusClient.from_connection_string(
                    conn_str=str(self._connection_string),
                    **self._client_kwargs,
                )
            except ValueError as e:
                raise MessagingConnectionError(
                    f"Invalid Service Bus connection string: {e}"
                ) from e
        return self._client

    async def close(self) -> None:
        """Close the client if open."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def health_check(self, queue_name: str) -> bool:
        """Return True if *queue_name* can be peeked (lightweight check)."""
        try:
            client = await self.get_client()
            receiver = client.get_queue_receiver(queue_name=queue_name)
            async with receiver:
                await receiver.peek_messages(max_message_count=1)
            return True
        except Exception:  # noqa: BLE001
            return False
