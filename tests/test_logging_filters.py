"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from app.core.config import LogSettings
from app.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    configure_logging,
    hash_identifier,
    set_request_id,
)


@pytest.fixture
def capture():
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
    clear_request_id()


def _records(stream: StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


def test_redacts_api_keys(capture):
    logger, stream = capture

    logger.info(
        "upstream.call",
        extra={
            "api_key": "sk-ant-secret-123",
            "x-api-key": "another-secret",
            "model": "claude-sonnet-4-20250514",
        },
    )

    output = stream.getvalue()
    assert "sk-ant-secret-123" not in output
    assert "another-secret" not in output
    assert "[REDACTED]" in output
    assert "claude-sonnet-4-20250514" in output


def test_redacts_chat_content_and_client_addresses(capture):
    logger, stream = capture

    logger.info(
        "chat.debug",
        extra={
            "system_prompt": "You are Stack, an AI assistant",
            "message_text": "my phone number is 555-0100",
            "client_ip": "203.0.113.9",
            "message_chars": 27,
        },
    )

    output = stream.getvalue()
    assert "You are Stack" not in output
    assert "555-0100" not in output
    assert "203.0.113.9" not in output
    assert _records(stream)[0]["message_chars"] == 27


def test_redacts_nested_headers(capture):
    logger, stream = capture

    logger.info(
        "request.headers",
        extra={
            "headers": {
                "X-Forwarded-For": "198.51.100.4",
                "user-agent": "pytest",
            },
        },
    )

    output = stream.getvalue()
    assert "198.51.100.4" not in output
    assert "pytest" in output


def test_safe_fields_pass_through(capture):
    logger, stream = capture

    logger.info(
        "rate_limit.allowed",
        extra={"client_hash": "abc123", "limit": 10, "remaining": 9},
    )

    record = _records(stream)[0]
    assert record["message"] == "rate_limit.allowed"
    assert record["level"] == "info"
    assert record["remaining"] == 9
    assert "[REDACTED]" not in stream.getvalue()


def test_request_id_from_context(capture):
    logger, stream = capture
    set_request_id("req-42")

    logger.warning("something")

    assert _records(stream)[0]["request_id"] == "req-42"


def test_hash_identifier_is_stable_and_opaque():
    digest = hash_identifier("1.2.3.4")

    assert digest == hash_identifier("1.2.3.4")
    assert digest != hash_identifier("1.2.3.5")
    assert len(digest) == 16
    assert "1.2.3.4" not in digest


def test_configure_logging_writes_rotating_file(tmp_path):
    log_file = tmp_path / "logs" / "app.log"
    root = logging.getLogger()
    previous = (list(root.handlers), root.level)

    try:
        configure_logging(
            LogSettings(output="file", file_path=str(log_file), max_bytes=1024, level="INFO")
        )
        logging.getLogger("test_file").info("file.event", extra={"token": "t-1"})
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = previous[0]
        root.setLevel(previous[1])

    content = log_file.read_text(encoding="utf-8")
    assert "file.event" in content
    assert "t-1" not in content
