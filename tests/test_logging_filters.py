"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from waitlist_api.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    set_request_id,
)


@pytest.fixture
def capture():
    """Logger wired like production, writing into a buffer."""

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


def test_sensitive_filter_redacts_contact_data(capture):
    logger, stream = capture

    logger.info(
        "signup_event",
        extra={
            "contact": "jane@example.com",
            "email": "jane@example.com",
            "phone": "15550109999",
            "ip": "203.0.113.7",
            "user_agent": "Mozilla/5.0",
            "contact_type": "email",
        },
    )

    output = stream.getvalue()
    assert "jane@example.com" not in output
    assert "15550109999" not in output
    assert "203.0.113.7" not in output
    assert "Mozilla" not in output
    assert "[REDACTED]" in output
    assert json.loads(output)["contact_type"] == "email"


def test_sensitive_filter_allows_safe_fields(capture):
    logger, stream = capture

    logger.info(
        "safe_event",
        extra={
            "route": "/api/waitlist",
            "status_code": 201,
            "entry_id": "3f1c",
        },
    )

    output = stream.getvalue()
    assert "/api/waitlist" in output
    assert "3f1c" in output
    assert "[REDACTED]" not in output


def test_sensitive_filter_redacts_nested_dicts(capture):
    logger, stream = capture

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "X-Forwarded-For": "198.51.100.4",
                "User-Agent": "curl/8.0",
                "accept": "application/json",
            },
        },
    )

    output = stream.getvalue()
    assert "198.51.100.4" not in output
    assert "curl/8.0" not in output
    assert "application/json" in output


def test_request_id_is_attached_from_context(capture):
    logger, stream = capture
    set_request_id("req-123")

    logger.info("with_context")

    assert json.loads(stream.getvalue())["request_id"] == "req-123"


def test_json_formatter_emits_one_line_per_record(capture):
    logger, stream = capture

    logger.warning("first")
    logger.warning("second")

    lines = stream.getvalue().strip().splitlines()
    assert [json.loads(line)["message"] for line in lines] == ["first", "second"]
    assert json.loads(lines[0])["level"] == "warning"
