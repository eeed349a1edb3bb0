"""Tests for worker logging setup."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator

import pytest

from mail_relay_core.correlation import message_context
from mail_relay_messaging.logging_config import (
    JSONFormatter,
    MessageContextFilter,
    configure_logging,
)


def _record(msg: str = "hello", exc_info: object = None) -> logging.LogRecord:
    return logging.LogRecord(
        "mail_relay.consumer", logging.INFO, __file__, 1, msg, None, exc_info
    )


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_filter_stamps_message_context() -> None:
    record = _record()
    with message_context("m-1", correlation_id="c-1"):
        assert MessageContextFilter().filter(record)
    assert record.message_id == "m-1"
    assert record.correlation_id == "c-1"


def test_filter_outside_invocation_uses_placeholder() -> None:
    record = _record()
    MessageContextFilter().filter(record)
    assert record.message_id == "-"


def test_json_formatter() -> None:
    record = _record("Processing message ID: m-1")
    record.message_id = "m-1"
    record.correlation_id = "c-1"
    data = json.loads(JSONFormatter().format(record))
    assert data["message"] == "Processing message ID: m-1"
    assert data["level"] == "INFO"
    assert data["logger"] == "mail_relay.consumer"
    assert data["message_id"] == "m-1"
    assert data["correlation_id"] == "c-1"
    assert "error" not in data


def test_json_formatter_includes_exception() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record("failed", exc_info=sys.exc_info())
    data = json.loads(JSONFormatter().format(record))
    assert data["error"] == "boom"
    assert "RuntimeError" in data["traceback"]


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_installs_single_handler() -> None:
    handler = configure_logging("debug", json_format=True)
    root = logging.getLogger()
    assert root.handlers == [handler]
    assert root.level == logging.DEBUG
    assert isinstance(handler.formatter, JSONFormatter)
    assert any(isinstance(f, MessageContextFilter) for f in handler.filters)
    assert logging.getLogger("azure").level == logging.WARNING

    again = configure_logging("INFO")
    assert root.handlers == [again]
    assert not isinstance(again.formatter, JSONFormatter)
