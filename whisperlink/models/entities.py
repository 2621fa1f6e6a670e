"""In-memory entity models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SecretEntry:
    """One stored payload. Immutable: entries are inserted or removed whole."""

    id: str
    payload: str = field(repr=False)
    expires_at: float  # seconds since epoch, same clock as the owning store

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now


@dataclass(frozen=True)
class SweepReport:
    """Outcome of one expiry sweep."""

    removed: int
    remaining: int
    swept_at: float
