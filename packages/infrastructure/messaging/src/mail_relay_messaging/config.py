"""Consumer settings loaded from the environment.

Environment Variables (prefix ``MAIL_RELAY_``):
    QUEUE_NAME: Queue the consumer reads from (default ``email-messages``)
    CONNECTION_SETTING: Name of the variable holding the broker connection
        string (default ``ServiceBusConnection``). Only the name lives here.
    DEAD_LETTER_REASON: Reason code for undecodable messages
    PREVIEW_LENGTH: Characters of ``bodyPreview`` written to the log
    MAX_MESSAGE_COUNT: Messages fetched per receive call
    MAX_CONCURRENT_CALLS: Handlers allowed in flight at once
    MAX_WAIT_TIME: Seconds a receive call waits for messages
    ABANDON_ON_ERROR: Release the lock right away when a handler fails
    LOG_LEVEL: Logging level (default INFO)
    LOG_JSON: Emit JSON log lines
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mail_relay_core.dead_letter import INVALID_FORMAT_REASON
from mail_relay_core.envelope import DEFAULT_PREVIEW_LENGTH


class ConsumerSettings(BaseSettings):
    """Settings for the envelope consumer and its Service Bus host."""

    model_config = SettingsConfigDict(
        env_prefix="MAIL_RELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    queue_name: str = Field(default="email-messages", min_length=1)
    connection_setting: str = Field(default="ServiceBusConnection", min_length=1)
    dead_letter_reason: str = Field(default=INVALID_FORMAT_REASON, min_length=1)
    preview_length: int = Field(default=DEFAULT_PREVIEW_LENGTH, ge=1)

    max_message_count: int = Field(default=1, ge=1)
    max_concurrent_calls: int = Field(default=1, ge=1)
    max_wait_time: float = Field(default=5.0, gt=0)
    abandon_on_error: bool = True

    log_level: str = "INFO"
    log_json: bool = False


@lru_cache
def get_settings() -> ConsumerSettings:
    """Get cached settings instance.

    Call ``get_settings.cache_clear()`` to reload settings.
    """
    return ConsumerSettings()
