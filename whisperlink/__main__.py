"""Run the server: ``python -m whisperlink``."""

from pathlib import Path

import uvicorn

from whisperlink.core.config import Settings, get_settings
from whisperlink.core.logging import configure_logging, structured_log


def ssl_options(settings: Settings) -> dict[str, str]:
    """uvicorn TLS kwargs, or {} to serve plain HTTP.

    HTTPS needs ``use_https`` plus readable certificate and key files;
    anything less falls back to HTTP with a warning.
    """
    if not settings.use_https:
        return {}
    cert, key = settings.ssl_cert_path, settings.ssl_key_path
    if cert and key and Path(cert).is_file() and Path(key).is_file():
        return {"ssl_certfile": cert, "ssl_keyfile": key}
    structured_log(
        "WARNING",
        "HTTPS requested but certificate or key is missing; falling back to HTTP",
        operation="server.start",
        metadata={"cert_path": cert, "key_path": key},
    )
    return {}


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    tls = ssl_options(settings)
    scheme = "https" if tls else "http"
    structured_log(
        "INFO",
        f"WhisperLink listening on {scheme}://{settings.host}:{settings.port}",
        operation="server.start",
    )
    if not tls:
        structured_log("INFO", "For production, terminate TLS here or at a reverse proxy", operation="server.start")
    # log_config=None routes uvicorn's loggers (including access logs) through our redacting handler
    uvicorn.run(
        "whisperlink.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
        **tls,
    )


if __name__ == "__main__":
    main()
