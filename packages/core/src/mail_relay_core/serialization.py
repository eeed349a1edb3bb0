"""EnvelopeSerializer — JSON encode/decode of relayed mail envelopes."""

from __future__ import annotations

import json

from pydantic import ValidationError

from .envelope import Envelope
from .primitives.exceptions import EnvelopeDecodeError


class EnvelopeSerializer:
    """Serialize/deserialize :class:`Envelope` to/from JSON.

    Decoding is pure: the same body always yields an equal envelope or the
    same kind of :class:`EnvelopeDecodeError`.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def serialize(self, envelope: Envelope) -> bytes:
        """Encode envelope to JSON bytes using the wire keys; absent fields are omitted."""
        data = envelope.model_dump(by_alias=True, exclude_none=True)
        return json.dumps(data).encode(self._encoding)

    def deserialize(self, raw: bytes | bytearray | memoryview | str) -> Envelope:
        """Decode a raw message body into an Envelope.

        Raises:
            EnvelopeDecodeError: the body is not a JSON object holding
                string-or-null values for the recognized fields.
        """
        text = self._to_text(raw)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise EnvelopeDecodeError(
                f"Message body is not valid JSON: {e}", kind="malformed"
            ) from e
        if not isinstance(data, dict):
            raise EnvelopeDecodeError(
                f"Message body must be a JSON object, got {type(data).__name__}",
                kind="not_an_object",
            )
        try:
            return Envelope.from_wire(data)
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(p) for p in err["loc"]) for err in e.errors()
            )
            raise EnvelopeDecodeError(
                f"Message body has invalid envelope fields: {fields}",
                kind="invalid_field",
            ) from e

    def _to_text(self, raw: bytes | bytearray | memoryview | str) -> str:
        if isinstance(raw, str):
            return raw
        try:
            # utf-8-sig tolerates the BOM some relays prepend.
            codec = "utf-8-sig" if self._encoding.lower() == "utf-8" else self._encoding
            return bytes(raw).decode(codec)
        except UnicodeDecodeError as e:
            raise EnvelopeDecodeError(
                f"Message body is not valid {self._encoding}: {e.reason}",
                kind="encoding",
            ) from e
