"""One-time secrets: POST /api/secrets, GET /api/secrets/{id}."""

from fastapi import APIRouter, Depends, Request

from whisperlink.api.dependencies import SettingsDep, StoreDep, enforce_rate_limit
from whisperlink.core.errors import InvalidSecretError, SecretNotFoundError, SecretTooLargeError
from whisperlink.core.logging import structured_log
from whisperlink.core.telemetry import (
    record_secret_created,
    record_secret_not_found,
    record_secret_retrieved,
    span,
)
from whisperlink.models.schemas import ErrorResponse, SecretCreate, SecretCreated, SecretView

router = APIRouter(
    prefix="/api/secrets",
    tags=["secrets"],
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        411: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
    },
)


def _share_base_url(request: Request, public_base_url: str) -> str:
    if public_base_url:
        return public_base_url.rstrip("/")
    proto = request.headers.get("x-forwarded-proto") or request.url.scheme
    host = request.headers.get("host") or request.url.netloc
    return f"{proto}://{host}"


def _validate_content(content: str, max_length: int) -> str:
    """Return the content to store, or raise the matching 400 error."""
    if not content or not content.strip():
        raise InvalidSecretError()
    if len(content) > max_length:
        raise SecretTooLargeError(max_length)
    return content.strip()


@router.post("", response_model=SecretCreated)
async def create_secret(
    body: SecretCreate,
    request: Request,
    store: StoreDep,
    settings: SettingsDep,
) -> SecretCreated:
    """Store a secret and return its one-time share link."""
    payload = _validate_content(body.content, settings.max_secret_length)
    with span("secret_store.put"):
        secret_id, expires_at = store.put(payload)
    record_secret_created()
    structured_log(
        "INFO",
        "Secret created",
        secret_id=secret_id,
        operation="secrets.create",
        metadata={"expires_at": expires_at, "store_size": store.size()},
    )
    return SecretCreated(
        id=secret_id,
        url=f"{_share_base_url(request, settings.public_base_url)}/?secret={secret_id}",
        expires_at=int(expires_at * 1000),
        expires_in=settings.describe_ttl(),
    )


@router.get("/{secret_id}", response_model=SecretView)
async def read_secret(
    secret_id: str,
    store: StoreDep,
    settings: SettingsDep,
) -> SecretView:
    """Return a secret once and destroy it.

    Unknown, already read and expired ids all produce the same 404.
    """
    payload = None
    if len(secret_id) == settings.secret_id_length:
        with span("secret_store.take"):
            payload = store.take_if_valid(secret_id)
    if payload is None:
        record_secret_not_found()
        structured_log("INFO", "Secret not available", secret_id=secret_id, operation="secrets.read")
        raise SecretNotFoundError()

    record_secret_retrieved()
    structured_log(
        "INFO",
        "Secret read and destroyed",
        secret_id=secret_id,
        operation="secrets.read",
        metadata={"store_size": store.size()},
    )
    return SecretView(content=payload)
