"""Tests for logging utilities and sensitive data redaction."""

from __future__ import annotations

import json
import logging

import pytest

from dinnerboard.logging_utils import configure_logging


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord(
        name="dinnerboard.test.redaction",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )


@pytest.mark.parametrize("fmt", ["plain", "json"])
def test_sensitive_data_filter_redacts_tokens(fmt):
    secret = "top-secret-token"
    configure_logging("INFO", fmt, [secret])

    handler = logging.getLogger().handlers[0]
    record = _record("Authorization header Bearer %s", secret)

    for filter_ in handler.filters:
        filter_.filter(record)

    formatted = handler.format(record)
    assert secret not in formatted
    assert "[redacted]" in formatted


def test_webhook_secret_field_is_masked_without_configured_secrets():
    configure_logging("INFO", "json", [])

    handler = logging.getLogger().handlers[0]
    record = _record("payload=%s", {"secret": "hook-123", "title": "Tacos"})

    for filter_ in handler.filters:
        filter_.filter(record)

    payload = json.loads(handler.format(record))
    assert "hook-123" not in payload["message"]
    assert "Tacos" in payload["message"]
    assert payload["logger"] == "dinnerboard.test.redaction"


def test_api_key_header_and_configured_secret_are_masked():
    handler = configure_logging("INFO", "plain", ["calendar-secret"])
    record = _record("headers X-API-Key: %s body secret=%s", "key-987", "calendar-secret")

    for filter_ in handler.filters:
        filter_.filter(record)

    formatted = handler.format(record)
    assert "key-987" not in formatted
    assert "calendar-secret" not in formatted
    assert formatted.count("[redacted]") == 2
    assert logging.getLogger().handlers == [handler]
