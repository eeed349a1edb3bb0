"""Tests for EnvelopeSerializer decode/encode."""

from __future__ import annotations

import itertools
import json

import pytest

from mail_relay_core.envelope import WIRE_KEYS, Envelope
from mail_relay_core.primitives.exceptions import EnvelopeDecodeError
from mail_relay_core.serialization import EnvelopeSerializer

CANONICAL = (
    b'{"subject":"Hi","from":"a@b.com",'
    b'"receivedAt":"2026-02-02T10:00:00Z","bodyPreview":"Hello world"}'
)


def test_decode_canonical_body() -> None:
    e = EnvelopeSerializer().deserialize(CANONICAL)
    assert e == Envelope(
        subject="Hi",
        from_address="a@b.com",
        received_at="2026-02-02T10:00:00Z",
        body_preview="Hello world",
    )


def test_decode_is_idempotent() -> None:
    ser = EnvelopeSerializer()
    first = ser.deserialize(CANONICAL)
    second = ser.deserialize(CANONICAL)
    assert first == second
    assert first.model_dump() == second.model_dump()


def test_decode_accepts_str_body() -> None:
    e = EnvelopeSerializer().deserialize(CANONICAL.decode("utf-8"))
    assert e.subject == "Hi"


def test_decode_tolerates_utf8_bom() -> None:
    e = EnvelopeSerializer().deserialize(b"\xef\xbb\xbf" + b'{"subject":"Hi"}')
    assert e.subject == "Hi"


def test_decode_empty_object() -> None:
    e = EnvelopeSerializer().deserialize(b"{}")
    assert e == Envelope()


def test_decode_ignores_unknown_keys() -> None:
    e = EnvelopeSerializer().deserialize(b'{"subject":"Hi","importance":"high"}')
    assert e.subject == "Hi"
    assert e.populated_fields() == ["subject"]


def test_decode_ignores_python_field_names() -> None:
    e = EnvelopeSerializer().deserialize(
        b'{"from_address": "x@y", "body_preview": "p", "received_at": "t"}'
    )
    assert e == Envelope()
    assert e.populated_fields() == []


def test_decode_wire_key_wins_over_field_name() -> None:
    e = EnvelopeSerializer().deserialize(
        b'{"from": "real@example.com", "from_address": "x@y"}'
    )
    assert e.from_address == "real@example.com"


def test_decode_explicit_nulls_are_absent() -> None:
    e = EnvelopeSerializer().deserialize(b'{"subject":null,"from":null}')
    assert e == Envelope()


_VALUES = {
    "subject": "Hi",
    "from": "a@b.com",
    "receivedAt": "2026-02-02T10:00:00Z",
    "bodyPreview": "Hello world",
}
_SUBSETS = [
    subset
    for size in range(len(_VALUES) + 1)
    for subset in itertools.combinations(_VALUES, size)
]


@pytest.mark.parametrize("keys", _SUBSETS, ids=lambda k: "+".join(k) or "none")
def test_decode_populates_exactly_present_fields(keys: tuple[str, ...]) -> None:
    body = json.dumps({k: _VALUES[k] for k in keys}).encode()
    e = EnvelopeSerializer().deserialize(body)
    wire_to_name = {wire: name for name, wire in WIRE_KEYS.items()}
    expected = [wire_to_name[k] for k in _VALUES if k in keys]
    assert e.populated_fields() == expected
    for name, wire in WIRE_KEYS.items():
        if wire not in keys:
            assert getattr(e, name) is None


@pytest.mark.parametrize(
    ("raw", "kind"),
    [
        (b"not-json{", "malformed"),
        (b"", "malformed"),
        ("{'subject': 'single quotes'}", "malformed"),
        (b"[1, 2]", "not_an_object"),
        (b'"just a string"', "not_an_object"),
        (b"null", "not_an_object"),
        (b"42", "not_an_object"),
        (b'{"subject": 5}', "invalid_field"),
        (b'{"bodyPreview": {"text": "x"}}', "invalid_field"),
        (b"\xff\xfe\x00", "encoding"),
    ],
)
def test_decode_failures(raw: bytes | str, kind: str) -> None:
    with pytest.raises(EnvelopeDecodeError) as exc_info:
        EnvelopeSerializer().deserialize(raw)
    assert exc_info.value.kind == kind


def test_decode_error_chains_cause() -> None:
    with pytest.raises(EnvelopeDecodeError) as exc_info:
        EnvelopeSerializer().deserialize(b"not-json{")
    assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)
    assert "not valid JSON" in str(exc_info.value)


def test_invalid_field_error_names_the_field() -> None:
    with pytest.raises(EnvelopeDecodeError, match="subject"):
        EnvelopeSerializer().deserialize(b'{"subject": 5}')


def test_serialize_uses_wire_keys_and_omits_absent_fields() -> None:
    raw = EnvelopeSerializer().serialize(
        Envelope(subject="Hi", from_address="a@b.com", received_at="t")
    )
    assert isinstance(raw, bytes)
    assert json.loads(raw) == {"subject": "Hi", "from": "a@b.com", "receivedAt": "t"}


def test_serialize_output_decodes_to_same_envelope() -> None:
    ser = EnvelopeSerializer()
    original = ser.deserialize(CANONICAL)
    assert ser.deserialize(ser.serialize(original)) == original
