"""Unit tests for custom exceptions."""

from whisperlink.core.errors import (
    NOT_FOUND_MESSAGE,
    InvalidSecretError,
    LengthRequiredError,
    PayloadTooLargeError,
    RateLimitError,
    SecretNotFoundError,
    SecretTooLargeError,
    WhisperLinkError,
)


def test_not_found_is_generic_404() -> None:
    e = SecretNotFoundError()
    assert e.status_code == 404
    assert e.message == NOT_FOUND_MESSAGE
    assert e.details == {}


def test_invalid_secret_is_400() -> None:
    e = InvalidSecretError()
    assert e.status_code == 400
    assert "required" in e.message


def test_too_large_carries_limit() -> None:
    e = SecretTooLargeError(100_000)
    assert e.status_code == 400
    assert e.details.get("max_length") == 100_000
    assert "100000" in e.message


def test_rate_limit_error() -> None:
    e = RateLimitError(retry_after_seconds=42)
    assert e.status_code == 429
    assert e.details["retry_after_seconds"] == 42


def test_base_error() -> None:
    e = WhisperLinkError("msg", status_code=500, error_code="TestError")
    assert str(e) == "msg"
    assert e.error_code == "TestError"
    assert SecretNotFoundError().error_code == "SecretNotFoundError"


def test_payload_too_large_carries_cap() -> None:
    e = PayloadTooLargeError(1024)
    assert e.status_code == 413
    assert e.details == {"max_body_bytes": 1024}
    assert "1024" in e.message


def test_length_required_is_411() -> None:
    e = LengthRequiredError()
    assert e.status_code == 411
    assert e.error_code == "LengthRequiredError"
