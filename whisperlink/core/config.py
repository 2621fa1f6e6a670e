"""Application settings loaded from environment with validation."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """WhisperLink settings from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Secret store
    secret_ttl_seconds: float = Field(
        default=24 * 60 * 60,
        gt=0,
        description="Seconds an unread secret stays retrievable",
    )
    reaper_interval_seconds: float = Field(
        default=60 * 60,
        gt=0,
        description="Seconds between background sweeps of expired secrets",
    )
    max_secret_length: int = Field(
        default=100_000,
        ge=1,
        description="Maximum submitted content length (characters)",
    )
    secret_id_length: int = Field(
        default=36,
        ge=1,
        description="Expected length of a retrieval id (canonical UUID text)",
    )

    # API
    max_body_bytes: int = Field(
        default=1024 * 1024,
        ge=1,
        description="Largest request body accepted, checked against Content-Length before reading",
    )
    rate_limit_requests: int = Field(default=100, ge=1, le=100_000)
    rate_limit_window_seconds: float = Field(default=15 * 60, gt=0)
    public_base_url: str = Field(
        default="",
        description="Base URL used in share links (e.g. https://whisper.example.com); derived from the request if empty",
    )
    cors_allow_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )
    static_dir: str = Field(
        default="",
        description="Directory with the browser UI; served at / when set",
    )

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    use_https: bool = Field(default=False)
    ssl_cert_path: str = Field(default="", description="PEM certificate for HTTPS")
    ssl_key_path: str = Field(default="", description="PEM private key for HTTPS")

    # Observability
    log_level: LogLevel = Field(default="INFO")
    tracing_enabled: bool = Field(
        default=False,
        description="Install an OpenTelemetry tracer provider at startup",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        u = (v or "INFO").upper()
        if u not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return u

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    def describe_ttl(self) -> str:
        """Human-readable TTL, e.g. '24 hours' or '90 minutes'."""
        seconds = self.secret_ttl_seconds
        for unit, size in (("hour", 3600), ("minute", 60)):
            if seconds >= size and seconds % size == 0:
                n = int(seconds // size)
                return f"{n} {unit}" + ("" if n == 1 else "s")
        n = round(seconds, 3)
        return f"{n:g} second" + ("" if n == 1 else "s")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
