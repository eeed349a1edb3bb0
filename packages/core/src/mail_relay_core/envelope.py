"""Envelope — immutable decoded payload of one relayed email."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_PREVIEW_LENGTH = 100

# Wire key per field, in the order the fields are logged.
WIRE_KEYS: dict[str, str] = {
    "subject": "subject",
    "from_address": "from",
    "received_at": "receivedAt",
    "body_preview": "bodyPreview",
}

# Keys a decoded body may carry. Python field names are not wire keys.
_ACCEPTED_KEYS = frozenset(
    {"subject", "from", "receivedAt", "receivedDateTime", "bodyPreview"}
)


class Envelope(BaseModel):
    """Mail event relayed onto the queue by the mailbox workflow.

    Every field is optional; the envelope is opaque payload and carries no
    required data. Unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    subject: str | None = None
    from_address: str | None = Field(default=None, alias="from")
    received_at: str | None = Field(
        default=None,
        validation_alias=AliasChoices("receivedAt", "receivedDateTime"),
        serialization_alias="receivedAt",
        description="Timestamp as sent by the producer; never parsed.",
    )
    body_preview: str | None = Field(
        default=None,
        validation_alias="bodyPreview",
        serialization_alias="bodyPreview",
    )

    def preview(self, limit: int = DEFAULT_PREVIEW_LENGTH) -> str | None:
        """Return at most *limit* leading characters of ``body_preview``."""
        if limit < 0:
            raise ValueError("limit must be >= 0")
        if self.body_preview is None:
            return None
        return self.body_preview[:limit]

    def populated_fields(self) -> list[str]:
        """Return names of fields carrying a non-empty value, in wire order."""
        return [name for name in WIRE_KEYS if getattr(self, name)]

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> Envelope:
        """Validate a decoded JSON object, reading only the wire keys.

        Keyword construction (``Envelope(from_address=...)``) stays available
        for code; bodies spelling the Python field names leave those fields
        absent.
        """
        return cls.model_validate(
            {key: value for key, value in data.items() if key in _ACCEPTED_KEYS}
        )
