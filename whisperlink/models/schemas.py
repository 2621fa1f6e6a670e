"""Pydantic request/response models for the public API.

Field names are snake_case in Python and camelCase on the wire, which is what
the browser client reads (``expiresAt``, ``expiresIn``).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Request ---
class SecretCreate(BaseModel):
    """POST /api/secrets request body.

    Blank and oversized content is rejected by the route, against the
    configured limit, so that both produce the API's 400 error envelope.
    """

    content: str = Field(default="", description="The secret text to share once")


# --- Response ---
class SecretCreated(_CamelModel):
    """Response after storing a secret."""

    id: str
    url: str = Field(..., description="Share link embedding the retrieval id")
    expires_at: int = Field(..., description="Expiry as milliseconds since the Unix epoch")
    expires_in: str = Field(..., description="Human-readable lifetime, e.g. '24 hours'")


class SecretView(_CamelModel):
    """Response for a successful one-time retrieval."""

    content: str


class HealthResponse(_CamelModel):
    status: str = "ok"
    active_secrets: int = Field(..., ge=0)
    uptime_seconds: float = Field(..., ge=0)


class ErrorResponse(BaseModel):
    """Error envelope rendered for every WhisperLinkError."""

    error: str
    message: str
    details: dict = Field(default_factory=dict)
