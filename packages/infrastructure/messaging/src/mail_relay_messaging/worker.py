"""Worker entry point: runs the envelope consumer against Service Bus."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import TYPE_CHECKING

from mail_relay_core.consumer import EnvelopeConsumer
from mail_relay_core.dead_letter import DeadLetterHandler
from mail_relay_core.observability import LoggingSink
from mail_relay_core.primitives.exceptions import ConfigurationError

from .config import ConsumerSettings, get_settings
from .logging_config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger("mail_relay.worker")


def build_consumer(settings: ConsumerSettings) -> EnvelopeConsumer:
    """Wire an EnvelopeConsumer from settings."""
    return EnvelopeConsumer(
        sink=LoggingSink(preview_length=settings.preview_length),
        dead_letter=DeadLetterHandler(settings.dead_letter_reason),
    )


async def run_worker(
    settings: ConsumerSettings | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> None:
    """Receive from the configured queue until SIGINT/SIGTERM."""
    from .servicebus import ServiceBusConnectionManager, ServiceBusConsumer

    settings = settings or get_settings()
    connection = ServiceBusConnectionManager.from_settings(settings, environ)
    host = ServiceBusConsumer.from_settings(connection, build_consumer(settings), settings)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, lambda: asyncio.ensure_future(host.stop()))
    try:
        await host.run()
    finally:
        await connection.close()


def main() -> None:
    """Console script ``mail-relay-worker``."""
    settings = get_settings()
    configure_logging(settings.log_level, json_format=settings.log_json)
    try:
        asyncio.run(run_worker(settings))
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        raise SystemExit(2) from e
