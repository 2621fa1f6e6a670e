"""Data models: in-memory entities and Pydantic API schemas."""

from whisperlink.models.entities import SecretEntry, SweepReport
from whisperlink.models.schemas import (
    ErrorResponse,
    HealthResponse,
    SecretCreate,
    SecretCreated,
    SecretView,
)

__all__ = [
    "SecretEntry",
    "SweepReport",
    "SecretCreate",
    "SecretCreated",
    "SecretView",
    "HealthResponse",
    "ErrorResponse",
]
