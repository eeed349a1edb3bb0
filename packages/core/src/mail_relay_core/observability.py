"""LoggingSink — per-message log lines for the envelope consumer."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from .correlation import get_correlation_id
from .envelope import DEFAULT_PREVIEW_LENGTH

if TYPE_CHECKING:
    from .envelope import Envelope
    from .primitives.exceptions import EnvelopeDecodeError

_log = logging.getLogger("mail_relay.consumer")
_structured_log = logging.getLogger("mail_relay.structured")

# Field name -> label used in the "  <Label>: <value>" line.
_FIELD_LABELS = (
    ("subject", "Subject"),
    ("from_address", "From"),
    ("received_at", "Received"),
)


class LoggingSink:
    """Emits the consumer's observability events through stdlib logging.

    Only populated fields get a line. The preview line carries at most
    ``preview_length`` characters; the envelope itself is never modified.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        preview_length: int = DEFAULT_PREVIEW_LENGTH,
    ) -> None:
        if preview_length < 1:
            raise ValueError("preview_length must be >= 1")
        self._log = logger or _log
        self._preview_length = preview_length

    def message_received(self, message_id: str | None) -> None:
        self._log.info("Processing message ID: %s", message_id)

    def envelope_decoded(self, message_id: str | None, envelope: Envelope) -> None:  # noqa: ARG002
        self._log.info("Email received:")
        for name, label in _FIELD_LABELS:
            value = getattr(envelope, name)
            if value:
                self._log.info("  %s: %s", label, value)
        preview = envelope.preview(self._preview_length)
        if preview:
            truncated = len(envelope.body_preview or "") > len(preview)
            self._log.info("  Preview: %s%s", preview, "..." if truncated else "")

    def decode_failed(
        self, message_id: str | None, error: EnvelopeDecodeError
    ) -> None:
        self._log.warning("Failed to deserialize message %s: %s", message_id, error)

    def message_completed(self, message_id: str | None) -> None:
        self._log.info("Successfully processed message ID: %s", message_id)


def emit_structured_entry(
    message_id: str | None,
    outcome: str,
    duration_ms: float,
    **extra: Any,
) -> None:
    """Emit one JSON summary line per invocation; failures are only logged at DEBUG."""
    try:
        entry = {
            "message_id": message_id,
            "outcome": outcome,
            "duration_ms": round(duration_ms, 2),
            "correlation_id": get_correlation_id(),
            **extra,
        }
        _structured_log.info(json.dumps(entry, default=str))
    except Exception:  # noqa: BLE001
        _log.debug("Failed to emit structured log entry", exc_info=True)
