from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..envelope import Envelope
    from ..primitives.exceptions import EnvelopeDecodeError


@runtime_checkable
class IObservabilitySink(Protocol):
    """
    Receives the per-message observability events emitted by the consumer.

    Every processed message produces ``message_received`` followed by either
    ``envelope_decoded`` + ``message_completed`` or ``decode_failed``.
    """

    def message_received(self, message_id: str | None) -> None: ...

    def envelope_decoded(self, message_id: str | None, envelope: Envelope) -> None: ...

    def decode_failed(
        self, message_id: str | None, error: EnvelopeDecodeError
    ) -> None: ...

    def message_completed(self, message_id: str | None) -> None: ...
