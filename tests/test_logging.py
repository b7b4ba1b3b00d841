"""Tests for structured log formatting and redaction."""

import json
import logging

from news_fusion.utils.logging import JsonlFormatter, redact_text, truncate_text


def test_jsonl_formatter_keeps_extra_fields_only():
    record = logging.LogRecord("news_fusion", logging.INFO, __file__, 1, "Report stored", (), None)
    record.event = "store_ok"
    record.url_primary = "https://edition.cnn.com/a"

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["message"] == "Report stored"
    assert payload["event"] == "store_ok"
    assert payload["url_primary"] == "https://edition.cnn.com/a"
    assert "lineno" not in payload
    assert "args" not in payload


def test_redact_and_truncate_text():
    assert redact_text("see https://rt.com/x now", "redact_urls") == "see [REDACTED_URL] now"
    assert redact_text("anything", "redact_content") == ""
    assert truncate_text("abcdef", 3) == "abc...(truncated)"
