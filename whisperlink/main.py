"""FastAPI application entry point."""

import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from whisperlink import __version__
from whisperlink.api.dependencies import SlidingWindowRateLimiter
from whisperlink.api.routes import health_router, secrets_router
from whisperlink.core.config import Settings, get_settings
from whisperlink.core.errors import (
    LengthRequiredError,
    PayloadTooLargeError,
    RateLimitError,
    WhisperLinkError,
)
from whisperlink.core.logging import configure_logging, structured_log
from whisperlink.core.telemetry import init_telemetry, instrument_fastapi
from whisperlink.models.schemas import ErrorResponse
from whisperlink.services.reaper import Reaper
from whisperlink.services.secret_store import SecretStore

CONTENT_SECURITY_POLICY = "; ".join(
    (
        "default-src 'self'",
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com",
        "font-src 'self' https://fonts.gstatic.com",
        "script-src 'self'",
        "img-src 'self' data:",
        "frame-ancestors 'none'",
    )
)

# Interactive docs load their assets from a CDN
_CSP_EXEMPT_PREFIXES = ("/docs", "/redoc")

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def error_response(exc: WhisperLinkError) -> JSONResponse:
    """Render a WhisperLinkError in the API's error envelope."""
    headers = None
    if isinstance(exc, RateLimitError):
        headers = {"Retry-After": str(exc.details["retry_after_seconds"])}
    body = ErrorResponse(error=exc.error_code, message=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=headers)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Store and reaper live for the app's lifespan."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: logging, telemetry, store and reaper. Shutdown: stop reaper, then wipe the store."""
        configure_logging(settings.log_level)
        init_telemetry(enabled=settings.tracing_enabled)
        store = SecretStore(settings.secret_ttl_seconds)
        reaper = Reaper(store, settings.reaper_interval_seconds)
        app.state.secret_store = store
        app.state.reaper = reaper
        app.state.started_at = time.monotonic()
        reaper.start()
        structured_log(
            "INFO",
            "WhisperLink started",
            operation="app.startup",
            metadata={
                "ttl": settings.describe_ttl(),
                "rate_limit": f"{settings.rate_limit_requests} per {settings.rate_limit_window_seconds:g}s",
            },
        )
        try:
            yield
        finally:
            try:
                await reaper.stop()
            finally:
                cleared = store.clear()
                structured_log(
                    "INFO",
                    "Shutting down; in-memory store cleared",
                    operation="app.shutdown",
                    metadata={"cleared": cleared},
                )

    app = FastAPI(
        title="WhisperLink",
        description="One-time secret sharing backed by process memory only",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_limiter = SlidingWindowRateLimiter(
        settings.rate_limit_requests,
        settings.rate_limit_window_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        """Reject oversized bodies from their Content-Length, before any byte is read."""
        if request.method in _BODY_METHODS:
            declared = request.headers.get("content-length")
            if declared is None or not declared.isdigit():
                return error_response(LengthRequiredError())
            if int(declared) > settings.max_body_bytes:
                return error_response(PayloadTooLargeError(settings.max_body_bytes))
        return await call_next(request)

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        path = request.url.path
        if not path.startswith(_CSP_EXEMPT_PREFIXES):
            response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if path.startswith("/api/secrets"):
            response.headers["Cache-Control"] = "no-store"
            response.headers["Pragma"] = "no-cache"
        return response

    app.include_router(health_router)
    app.include_router(secrets_router)

    instrument_fastapi(app)

    @app.exception_handler(WhisperLinkError)
    async def whisperlink_error_handler(request: Request, exc: WhisperLinkError) -> JSONResponse:
        """Map custom exceptions to JSON response."""
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Submitted values are not echoed back; they may be the secret itself
        fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
        body = ErrorResponse(
            error="InvalidRequestError",
            message="Request body is invalid",
            details={"fields": fields},
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    static_dir = Path(settings.static_dir) if settings.static_dir else None
    if static_dir is not None and static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="ui")
    else:
        @app.get("/")
        async def root() -> dict:
            """Service info when no browser UI is configured."""
            return {"service": "whisperlink", "version": __version__}

    return app


app = create_app()
