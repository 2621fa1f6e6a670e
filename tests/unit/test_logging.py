"""Unit tests for structured logging and redaction."""

import json
import logging

import pytest

from whisperlink.core.logging import (
    JsonFormatter,
    _redact,
    _redact_dict,
    secret_ref,
    structured_log,
)

SECRET_ID = "3f2b8c1e-9a4d-4e6f-8b2a-1c3d5e7f9a0b"


def test_secret_ref_is_prefix_only() -> None:
    assert secret_ref(SECRET_ID) == "3f2b8c1e…"
    assert secret_ref("") == ""


def test_redact_masks_full_ids() -> None:
    line = f'127.0.0.1 - "GET /api/secrets/{SECRET_ID} HTTP/1.1" 200'
    out = _redact(line)
    assert SECRET_ID not in out
    assert "3f2b8c1e-****" in out


def test_redact_masks_credentials() -> None:
    out = _redact("token=abcdefghijklmnopqrstuvwxyz123456")
    assert "abcdefghijklmnop" not in out
    assert "REDACTED" in out


def test_redact_dict_masks_sensitive_keys() -> None:
    out = _redact_dict({"content": "hunter2", "removed": 3, "nested": {"password": "x"}})
    assert out["content"] == "***REDACTED***"
    assert out["removed"] == 3
    assert out["nested"]["password"] == "***REDACTED***"


def test_structured_log_readable(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("LOG_FORMAT", "readable")
    with caplog.at_level(logging.INFO):
        structured_log("INFO", "Secret created", secret_id=SECRET_ID, operation="secrets.create")
    assert "Secret created" in caplog.text
    assert "secret_ref=3f2b8c1e…" in caplog.text
    assert SECRET_ID not in caplog.text


def test_secret_ref_escapes_control_characters() -> None:
    ref = secret_ref("ab\ncd\r\x1b")
    assert "\n" not in ref
    assert "\r" not in ref
    assert ref.startswith("ab\\ncd\\r")


def test_readable_log_stays_on_one_line(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("LOG_FORMAT", "readable")
    with caplog.at_level(logging.INFO):
        structured_log("INFO", "Secret not found", secret_id="\n[ERROR] forged", operation="secrets.read")
    message = caplog.records[-1].getMessage()
    assert "\n" not in message
    assert "secret_ref=\\n[ERROR]" in message


def test_structured_log_json(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("LOG_FORMAT", "json")
    with caplog.at_level(logging.INFO):
        structured_log(
            "INFO",
            "Removed 2 expired secret(s)",
            operation="reaper.sweep",
            metadata={"removed": 2, "store_size": 5},
        )
    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["severity"] == "INFO"
    assert payload["operation"] == "reaper.sweep"
    assert payload["metadata"] == {"removed": 2, "store_size": 5}


def test_json_formatter_plain_record() -> None:
    record = logging.LogRecord("uvicorn.access", logging.INFO, __file__, 1, f"GET /api/secrets/{SECRET_ID}", None, None)
    payload = json.loads(JsonFormatter().format(record))
    assert payload["logger"] == "uvicorn.access"
    assert SECRET_ID not in payload["message"]
