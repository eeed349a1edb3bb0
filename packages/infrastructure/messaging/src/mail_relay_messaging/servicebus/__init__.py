"""Azure Service Bus transport adapter (optional extra: mail-relay[servicebus])."""

from __future__ import annotations

from .actions import ServiceBusDelivery, ServiceBusMessageActions
from .connection import ServiceBusConnectionManager
from .consumer import ServiceBusConsumer
from .publisher import ServiceBusPublisher

__all__ = [
    "ServiceBusConnectionManager",
    "ServiceBusConsumer",
    "ServiceBusDelivery",
    "ServiceBusMessageActions",
    "ServiceBusPublisher",
]
