"""Unit tests for entities and API schemas."""

import dataclasses

import pytest

from whisperlink.models.entities import SecretEntry, SweepReport
from whisperlink.models.schemas import HealthResponse, SecretCreate, SecretCreated, SecretView


def test_secret_entry_is_immutable() -> None:
    entry = SecretEntry(id="abc", payload="p", expires_at=10.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.payload = "q"  # type: ignore[misc]


def test_secret_entry_expiry_boundary() -> None:
    entry = SecretEntry(id="abc", payload="p", expires_at=10.0)
    assert not entry.is_expired(9.999)
    assert entry.is_expired(10.0)
    assert entry.is_expired(11.0)


def test_sweep_report_fields() -> None:
    r = SweepReport(removed=2, remaining=3, swept_at=1.0)
    assert (r.removed, r.remaining) == (2, 3)


def test_secret_create_defaults_to_empty() -> None:
    assert SecretCreate.model_validate({}).content == ""
    assert SecretCreate(content="x").content == "x"


def test_secret_created_serializes_camel_case() -> None:
    body = SecretCreated(id="i", url="https://x/?secret=i", expires_at=123, expires_in="24 hours")
    dumped = body.model_dump(by_alias=True)
    assert dumped == {
        "id": "i",
        "url": "https://x/?secret=i",
        "expiresAt": 123,
        "expiresIn": "24 hours",
    }


def test_health_response_rejects_negative_counts() -> None:
    with pytest.raises(ValueError):
        HealthResponse(active_secrets=-1, uptime_seconds=0)
    assert HealthResponse(active_secrets=0, uptime_seconds=1.5).model_dump(by_alias=True)["activeSecrets"] == 0


def test_secret_view() -> None:
    assert SecretView(content="hello").content == "hello"
