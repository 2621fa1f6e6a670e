"""Custom exceptions for the WhisperLink API."""

from typing import Any, Optional


NOT_FOUND_MESSAGE = "Secret not found or already accessed"


class WhisperLinkError(Exception):
    """Base exception for errors surfaced to API clients."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class SecretNotFoundError(WhisperLinkError):
    """Raised for unknown, already consumed and expired ids alike.

    The three causes are deliberately indistinguishable to the client.
    """

    def __init__(self) -> None:
        super().__init__(NOT_FOUND_MESSAGE, status_code=404)


class InvalidSecretError(WhisperLinkError):
    """Raised when submitted content is missing or blank."""

    def __init__(self, message: str = "Secret content is required") -> None:
        super().__init__(message, status_code=400)


class SecretTooLargeError(WhisperLinkError):
    """Raised when submitted content exceeds the configured maximum length."""

    def __init__(self, max_length: int) -> None:
        super().__init__(
            f"Secret content is too large (max {max_length} characters)",
            status_code=400,
            details={"max_length": max_length},
        )


class RateLimitError(WhisperLinkError):
    """Raised when a client exceeds the per-IP request budget."""

    def __init__(self, retry_after_seconds: int = 60) -> None:
        super().__init__(
            "Too many requests, please try again later.",
            status_code=429,
            details={"retry_after_seconds": retry_after_seconds},
        )


class PayloadTooLargeError(WhisperLinkError):
    """Raised before reading a request body whose declared size exceeds the cap."""

    def __init__(self, max_body_bytes: int) -> None:
        super().__init__(
            f"Request body is too large (max {max_body_bytes} bytes)",
            status_code=413,
            details={"max_body_bytes": max_body_bytes},
        )


class LengthRequiredError(WhisperLinkError):
    """Raised for request bodies sent without a usable Content-Length."""

    def __init__(self) -> None:
        super().__init__("Content-Length header is required", status_code=411)
