"""Tests for Envelope."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mail_relay_core.envelope import Envelope


def test_envelope_defaults_are_absent() -> None:
    e = Envelope()
    assert e.subject is None
    assert e.from_address is None
    assert e.received_at is None
    assert e.body_preview is None
    assert e.populated_fields() == []


def test_envelope_accepts_wire_keys() -> None:
    e = Envelope.model_validate(
        {
            "subject": "Hi",
            "from": "a@b.com",
            "receivedAt": "2026-02-02T10:00:00Z",
            "bodyPreview": "Hello world",
        }
    )
    assert e.subject == "Hi"
    assert e.from_address == "a@b.com"
    assert e.received_at == "2026-02-02T10:00:00Z"
    assert e.body_preview == "Hello world"


def test_envelope_accepts_received_date_time_key() -> None:
    e = Envelope.model_validate({"receivedDateTime": "2026-02-02T10:00:00Z"})
    assert e.received_at == "2026-02-02T10:00:00Z"


def test_envelope_frozen() -> None:
    e = Envelope(subject="Hi")
    with pytest.raises((ValueError, ValidationError), match=r".+"):
        e.subject = "Other"  # type: ignore[misc]


def test_preview_truncates_without_mutating() -> None:
    text = "x" * 250
    e = Envelope(body_preview=text)
    assert e.preview() == "x" * 100
    assert e.preview(10) == "x" * 10
    assert e.body_preview == text
    assert len(e.body_preview) == 250


def test_preview_of_absent_field_is_none() -> None:
    assert Envelope().preview() is None


def test_preview_rejects_negative_limit() -> None:
    with pytest.raises(ValueError, match="limit"):
        Envelope(body_preview="abc").preview(-1)


def test_populated_fields_skips_empty_strings() -> None:
    e = Envelope(subject="", from_address="a@b.com", body_preview="hi")
    assert e.populated_fields() == ["from_address", "body_preview"]


def test_from_wire_reads_only_wire_keys() -> None:
    e = Envelope.from_wire(
        {"subject": "Hi", "receivedDateTime": "t", "body_preview": "ignored"}
    )
    assert e.populated_fields() == ["subject", "received_at"]
    assert e.body_preview is None
